"""Interactive read-eval loop.

Each line is read with ``questionary.text`` and run through a
:class:`~pipeterm.terminal.Terminal`.  The loop ends on ``exit`` or when
the prompt is dismissed (Ctrl+C / Esc make ``ask()`` return ``None``).
"""

from __future__ import annotations

import asyncio
from typing import Any

from pipeterm.cli import exit_codes
from pipeterm.cli.console import ConsoleTextWriter, console
from pipeterm.exceptions import DependencyError
from pipeterm.terminal import Terminal

EXIT_WORDS: frozenset[str] = frozenset({"exit", "quit"})


def _import_questionary() -> Any:
    """Import questionary lazily for the interactive prompt."""
    try:
        import questionary
    except ModuleNotFoundError as exc:
        raise DependencyError(
            "questionary is not installed.",
            hint="Install with: pip install questionary, or pass a line with -c.",
        ) from exc
    return questionary


def build_prompt(terminal: Terminal) -> str:
    """Return ``<cwd> $`` with the home directory shown as ``~``."""
    cwd = terminal.working_directory
    home = terminal.home_directory.rstrip("/")
    if home and (cwd == home or cwd.startswith(home + "/")):
        cwd = "~" + cwd[len(home):]
    return f"{cwd} $"


def run_repl(terminal: Terminal) -> int:
    """Prompt for lines until the user leaves; return the last line's code."""
    questionary = _import_questionary()
    stdout = ConsoleTextWriter()
    stderr = ConsoleTextWriter(stderr=True, style="red")
    last_code: int = exit_codes.SUCCESS

    while True:
        line: str | None = questionary.text(build_prompt(terminal)).ask()
        if line is None or line.strip() in EXIT_WORDS:
            break

        try:
            last_code = asyncio.run(terminal.execute(line, stdout, stderr))
        except KeyboardInterrupt:
            console.print("[yellow]Interrupted.[/yellow]")
            last_code = exit_codes.KEYBOARD_INTERRUPT
        except asyncio.CancelledError:
            console.print("[yellow]Cancelled.[/yellow]")
            last_code = exit_codes.GENERAL_ERROR

    return last_code
