"""Command-line front end for pipeterm.

`main` wires argparse flags into a :class:`~pipeterm.terminal.Terminal`
and either runs one line (`-c`) or enters the interactive loop.  `cli`
wraps it for the console script and turns escaped errors into process
exit codes rendered through the Rich console.

Notes
-----
* Lines are interpreted by the terminal; nothing here parses them.
* A `-c` run exits with the line's own classification (0, 1 or 2).
"""

from __future__ import annotations

import argparse
import asyncio
import sys

from pipeterm.cli import exit_codes
from pipeterm.cli.console import ConsoleTextWriter, configure_logging, console
from pipeterm.config import DEFAULT_MAX_HISTORY, TerminalConfig
from pipeterm.exceptions import PipetermError
from pipeterm.terminal import Terminal
from pipeterm.version import __version__


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    """Build the `pipeterm` argument parser.

    * ``pipeterm``                 interactive session
    * ``pipeterm -c "echo hi"``    run one line and exit with its code
    * ``pipeterm --version``
    """
    parser = argparse.ArgumentParser(
        prog="pipeterm",
        description="Embeddable shell-like command interpreter.",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-c",
        "--command",
        metavar="LINE",
        default=None,
        help="Run LINE and exit with its exit code.",
    )
    parser.add_argument("--home", metavar="DIR", default=None, help="Home directory used for '~'.")
    parser.add_argument("--cwd", metavar="DIR", default=None, help="Initial working directory.")
    parser.add_argument(
        "--max-history",
        metavar="N",
        type=int,
        default=DEFAULT_MAX_HISTORY,
        help=f"Maximum number of history entries (default: {DEFAULT_MAX_HISTORY}).",
    )
    parser.add_argument(
        "--log-level",
        metavar="LEVEL",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
        help="Logging level for diagnostics on stderr (default: WARNING).",
    )
    return parser


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

def _run_line(terminal: Terminal, line: str) -> int:
    """Run a single line with console-backed streams."""
    stdout = ConsoleTextWriter()
    stderr = ConsoleTextWriter(stderr=True, style="red")
    return asyncio.run(terminal.execute(line, stdout, stderr))


def main(argv: list[str] | None = None) -> int:
    """Parse *argv* (``sys.argv[1:]`` when ``None``) and run the session.

    Returns the exit code of the `-c` line, or of the last line run in
    the interactive loop.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.max_history < 0:
        parser.error("--max-history must not be negative")

    configure_logging(args.log_level)

    terminal = Terminal(
        TerminalConfig(
            home_directory=args.home,
            working_directory=args.cwd,
            max_history=args.max_history,
        )
    )

    if args.command is not None:
        return _run_line(terminal, args.command)

    from pipeterm.cli.repl import run_repl

    return run_repl(terminal)


# ---------------------------------------------------------------------------
# Process boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Console-script entry: run :func:`main` and exit with its code."""
    try:
        sys.exit(main())
    except PipetermError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        if exc.hint:
            console.print(f"[yellow]Hint:[/yellow] {exc.hint}")
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        console.print(
            "[bold red]pipeterm crashed:[/bold red] "
            f"{type(exc).__name__}: {exc}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)
