"""CLI console helpers with optional Rich support.

Rich is imported lazily so bootstrap paths (``--help``, ``--version``)
keep working when it is not installed; output then falls back to plain
stream writes.
"""

from __future__ import annotations

import logging
import sys
from functools import lru_cache
from typing import Any, TextIO

from pipeterm.core.cancellation import CancellationToken, raise_if_cancelled
from pipeterm.exceptions import DependencyError


def _load_rich_console_class() -> type[Any]:
    """Return ``rich.console.Console`` or raise :class:`DependencyError`."""
    try:
        from rich.console import Console
    except ModuleNotFoundError as exc:
        raise DependencyError(
            "rich is not installed.",
            hint="Install with: pip install rich",
        ) from exc
    return Console


@lru_cache(maxsize=2)
def get_rich_console(*, stderr: bool = True) -> Any:
    """Return a shared Rich console targeting stderr (or stdout)."""
    console_class = _load_rich_console_class()
    return console_class(stderr=stderr)


class _ConsoleProxy:
    """Minimal ``print``-compatible proxy with Rich fallback."""

    def print(self, *objects: object) -> None:
        """Render with Rich when available, else plain stderr print."""
        try:
            rich_console = get_rich_console(stderr=True)
        except DependencyError:
            print(*objects, file=sys.stderr)
            return
        rich_console.print(*objects)


console = _ConsoleProxy()


# ---------------------------------------------------------------------------
# TextWriter adapter
# ---------------------------------------------------------------------------

class ConsoleTextWriter:
    """Adapt a console stream to the :class:`~pipeterm.core.protocols.TextWriter` contract.

    Command output is printed verbatim: markup and highlighting are off,
    so text such as ``[red]`` reaches the user unchanged.

    Parameters
    ----------
    stderr:
        Write to stderr instead of stdout.
    style:
        Optional Rich style applied to everything written (``"red"``
        for the error stream).
    """

    def __init__(self, *, stderr: bool = False, style: str | None = None) -> None:
        self._stderr: bool = stderr
        self._style: str | None = style

    async def write_line(self, line: str = "", token: CancellationToken | None = None) -> None:
        raise_if_cancelled(token)
        self._emit(line + "\n")

    async def write(self, text: str, token: CancellationToken | None = None) -> None:
        raise_if_cancelled(token)
        self._emit(text)

    def clear(self) -> None:
        try:
            get_rich_console(stderr=self._stderr).clear()
        except DependencyError:
            return

    def _emit(self, text: str) -> None:
        try:
            rich_console = get_rich_console(stderr=self._stderr)
        except DependencyError:
            stream: TextIO = sys.stderr if self._stderr else sys.stdout
            stream.write(text)
            stream.flush()
            return
        rich_console.print(
            text,
            end="",
            style=self._style,
            markup=False,
            highlight=False,
            soft_wrap=True,
        )


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

def configure_logging(level: str = "WARNING") -> None:
    """Route the ``pipeterm`` loggers to stderr, through Rich when available."""
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.WARNING

    try:
        from rich.logging import RichHandler
    except ModuleNotFoundError:
        handler: logging.Handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    else:
        handler = RichHandler(
            console=get_rich_console(stderr=True),
            show_path=False,
            rich_tracebacks=True,
        )

    root = logging.getLogger("pipeterm")
    root.handlers[:] = [handler]
    root.setLevel(numeric_level)
    root.propagate = False
