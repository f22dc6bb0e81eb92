"""Shared pytest fixtures and configuration for the pipeterm test suite.

Guidelines
----------
* Async code is driven with ``asyncio.run`` inside synchronous tests.
* Files are only created under ``tmp_path``.
* Tests must not depend on the real home or working directory.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path

import pytest

from pipeterm.config import TerminalConfig
from pipeterm.core.streams import StringTextWriter
from pipeterm.terminal import Terminal


@dataclass
class LineResult:
    code: int
    stdout: str
    stderr: str


def run_line(terminal: Terminal, line: str) -> LineResult:
    """Execute *line* on *terminal* with in-memory output streams."""
    stdout = StringTextWriter()
    stderr = StringTextWriter()
    code = asyncio.run(terminal.execute(line, stdout, stderr))
    return LineResult(int(code), stdout.getvalue(), stderr.getvalue())


@pytest.fixture()
def workdir(tmp_path: Path) -> Path:
    """A working directory with a ``home`` sibling, both under tmp_path."""
    work = tmp_path / "work"
    work.mkdir()
    (tmp_path / "home").mkdir()
    return work


@pytest.fixture()
def terminal(tmp_path: Path, workdir: Path) -> Terminal:
    return Terminal(
        TerminalConfig(
            home_directory=(tmp_path / "home").as_posix(),
            working_directory=workdir.as_posix(),
        )
    )
