"""Session built-ins: ``pwd``, ``cd``, ``help`` and ``history``.

These commands only touch the session through the callbacks on
:class:`~pipeterm.core.command.CommandContext`.
"""

from __future__ import annotations

import os

from pipeterm.core.cancellation import CancellationToken
from pipeterm.core.command import Command, CommandContext
from pipeterm.core.options import option
from pipeterm.utils.exit_code import ExitCode


class PwdCommand(Command):
    name = "pwd"
    description = "Print current working directory"

    async def execute(self, context: CommandContext, token: CancellationToken) -> int:
        await context.stdout.write_line(context.working_directory, token)
        return ExitCode.SUCCESS


class CdCommand(Command):
    """Change the working directory.

    ``cd`` alone goes home; ``cd -`` returns to the previous directory
    and prints it.
    """

    name = "cd"
    description = "Change working directory"

    async def execute(self, context: CommandContext, token: CancellationToken) -> int:
        args = context.positional_arguments
        if len(args) > 1:
            await context.stderr.write_line("cd: too many arguments", token)
            return ExitCode.USAGE_ERROR

        show_path = False
        if not args:
            target = context.home_directory
        elif args[0] == "-":
            if not context.previous_working_directory:
                await context.stderr.write_line("cd: OLDPWD not set", token)
                return ExitCode.RUNTIME_ERROR
            target = context.previous_working_directory
            show_path = True
        else:
            target = context.resolve_path(args[0])

        display = args[0] if args else target
        if not os.path.isdir(target):
            reason = "Not a directory" if os.path.exists(target) else "No such file or directory"
            await context.stderr.write_line(f"cd: {display}: {reason}", token)
            return ExitCode.RUNTIME_ERROR

        context.change_working_directory(target)
        if show_path:
            await context.stdout.write_line(target, token)
        return ExitCode.SUCCESS


class HelpCommand(Command):
    name = "help"
    description = "Display help for commands"

    async def execute(self, context: CommandContext, token: CancellationToken) -> int:
        registry = context.registry
        if registry is None:
            await context.stderr.write_line("help: registry not configured", token)
            return ExitCode.RUNTIME_ERROR

        if not context.positional_arguments:
            await context.stdout.write_line(registry.generate_global_help(), token)
            return ExitCode.SUCCESS

        command_name = context.positional_arguments[0]
        metadata = registry.try_get_command(command_name)
        if metadata is None:
            await context.stderr.write_line(f"help: unknown command: {command_name}", token)
            return ExitCode.USAGE_ERROR

        await context.stdout.write_line(metadata.generate_help(), token)
        return ExitCode.SUCCESS


class HistoryCommand(Command):
    """List, clear or prune the session's command history.

    Entries are numbered from 1, oldest first.
    """

    name = "history"
    description = "Display or manage command history"

    clear = option("clear", "c", type=bool, description="Clear all history")
    delete = option("delete", "d", type=int, description="Delete entry at specified position")
    number = option("number", "n", type=int, description="Display only last N entries")
    reverse = option("reverse", "r", type=bool, description="Display history in reverse order")

    async def execute(self, context: CommandContext, token: CancellationToken) -> int:
        if self.clear:
            context.clear_history()
            return ExitCode.SUCCESS

        # Positions start at 1; zero or a negative position lists instead.
        if self.delete is not None and self.delete > 0:
            if not context.delete_history_entry(self.delete):
                await context.stderr.write_line(
                    f"history: position {self.delete} out of range", token
                )
                return ExitCode.RUNTIME_ERROR
            return ExitCode.SUCCESS

        history = context.history
        start = 0
        if self.number is not None and 0 < self.number < len(history):
            start = len(history) - self.number

        numbered = [(index + 1, history[index]) for index in range(start, len(history))]
        if self.reverse:
            numbered.reverse()
        for position, entry in numbered:
            token.raise_if_cancelled()
            await context.stdout.write_line(f"{position:>5}  {entry}", token)
        return ExitCode.SUCCESS
