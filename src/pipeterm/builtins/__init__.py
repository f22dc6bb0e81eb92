"""Built-in commands.

Rules
-----
* Commands use only the public command contract from :mod:`pipeterm.core`.
* Failures are reported on ``context.stderr`` and as an exit
  classification; commands do not raise for user errors.
"""

from __future__ import annotations

from pipeterm.builtins.session import CdCommand, HelpCommand, HistoryCommand, PwdCommand
from pipeterm.builtins.text import CatCommand, EchoCommand, GrepCommand, HeadCommand, TailCommand
from pipeterm.core.command import Command
from pipeterm.core.registry import CommandRegistry

BUILTIN_COMMANDS: tuple[type[Command], ...] = (
    EchoCommand,
    CatCommand,
    GrepCommand,
    HeadCommand,
    TailCommand,
    PwdCommand,
    CdCommand,
    HelpCommand,
    HistoryCommand,
)


def register_builtins(registry: CommandRegistry) -> None:
    """Register every command in :data:`BUILTIN_COMMANDS` with *registry*."""
    for command_type in BUILTIN_COMMANDS:
        registry.register_command(command_type)


__all__: list[str] = [
    "BUILTIN_COMMANDS",
    "CatCommand",
    "CdCommand",
    "EchoCommand",
    "GrepCommand",
    "HeadCommand",
    "HelpCommand",
    "HistoryCommand",
    "PwdCommand",
    "TailCommand",
    "register_builtins",
]
