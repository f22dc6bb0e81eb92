"""Text-processing built-ins: ``echo``, ``cat``, ``grep``, ``head``, ``tail``."""

from __future__ import annotations

import os
import re
from collections import deque
from collections.abc import AsyncIterator

from pipeterm.core.cancellation import CancellationToken
from pipeterm.core.command import Command, CommandContext
from pipeterm.core.options import option
from pipeterm.infra.file_streams import FileTextReader
from pipeterm.utils.exit_code import ExitCode

DEFAULT_LINE_COUNT: int = 10


class EchoCommand(Command):
    name = "echo"
    description = "Echo arguments to stdout"

    no_newline = option("newline", "n", type=bool, description="Do not output trailing newline")

    async def execute(self, context: CommandContext, token: CancellationToken) -> int:
        output = " ".join(context.positional_arguments)
        if self.no_newline:
            await context.stdout.write(output, token)
        else:
            await context.stdout.write_line(output, token)
        return ExitCode.SUCCESS


class CatCommand(Command):
    """Copy stdin, or each file argument in turn, to stdout."""

    name = "cat"
    description = "Concatenate and display file contents"

    async def execute(self, context: CommandContext, token: CancellationToken) -> int:
        if not context.positional_arguments:
            async for line in context.stdin.read_lines(token):
                await context.stdout.write_line(line, token)
            return ExitCode.SUCCESS

        for path in context.positional_arguments:
            if not os.path.isfile(context.resolve_path(path)):
                await context.stderr.write_line(f"cat: {path}: No such file or directory", token)
                return ExitCode.RUNTIME_ERROR
            try:
                with FileTextReader(context.resolve_path(path)) as reader:
                    async for line in reader.read_lines(token):
                        await context.stdout.write_line(line, token)
            except OSError as exc:
                await context.stderr.write_line(f"cat: {path}: {exc.strerror or exc}", token)
                return ExitCode.RUNTIME_ERROR
        return ExitCode.SUCCESS


class GrepCommand(Command):
    """Filter stdin by a regular expression.

    Exit classification follows ``grep``: success when at least one line
    was selected, runtime error when none was, usage error for a bad
    pattern.
    """

    name = "grep"
    description = "Filter lines matching a pattern"

    pattern = option("pattern", "p", required=True, description="Pattern to search for")
    ignore_case = option("ignorecase", "i", type=bool, description="Ignore case distinctions")
    invert = option("invert", "v", type=bool, description="Select non-matching lines")
    count_only = option("count", "c", type=bool, description="Only print count of matching lines")

    async def execute(self, context: CommandContext, token: CancellationToken) -> int:
        if not self.pattern:
            await context.stderr.write_line("grep: pattern is required", token)
            return ExitCode.USAGE_ERROR

        try:
            regex = re.compile(self.pattern, re.IGNORECASE if self.ignore_case else 0)
        except re.error as exc:
            await context.stderr.write_line(f"grep: invalid pattern: {exc}", token)
            return ExitCode.USAGE_ERROR

        matches = 0
        async for line in context.stdin.read_lines(token):
            if (regex.search(line) is not None) == self.invert:
                continue
            matches += 1
            if not self.count_only:
                await context.stdout.write_line(line, token)

        if self.count_only:
            await context.stdout.write_line(str(matches), token)
        return ExitCode.SUCCESS if matches else ExitCode.RUNTIME_ERROR


class _LineSliceCommand(Command):
    """Shared driver for ``head`` and ``tail``; subclasses pick the lines."""

    lines = option("lines", "n", type=int, default=DEFAULT_LINE_COUNT,
                   description=f"Number of lines to output (default: {DEFAULT_LINE_COUNT})")

    async def execute(self, context: CommandContext, token: CancellationToken) -> int:
        if self.lines < 0:
            await context.stderr.write_line(
                f"{self.name}: invalid number of lines: {self.lines}", token
            )
            return ExitCode.USAGE_ERROR

        files = context.positional_arguments
        if not files:
            for line in await self.select(context.stdin.read_lines(token)):
                await context.stdout.write_line(line, token)
            return ExitCode.SUCCESS

        exit_code = ExitCode.SUCCESS
        for position, path in enumerate(files):
            if not os.path.isfile(context.resolve_path(path)):
                await context.stderr.write_line(
                    f"{self.name}: cannot open '{path}' for reading: No such file or directory",
                    token,
                )
                exit_code = ExitCode.RUNTIME_ERROR
                continue
            if len(files) > 1:
                if position:
                    await context.stdout.write_line("", token)
                await context.stdout.write_line(f"==> {path} <==", token)
            with FileTextReader(context.resolve_path(path)) as reader:
                selected = await self.select(reader.read_lines(token))
            for line in selected:
                await context.stdout.write_line(line, token)
        return exit_code

    async def select(self, source: AsyncIterator[str]) -> list[str]:
        raise NotImplementedError


class HeadCommand(_LineSliceCommand):
    name = "head"
    description = "Output the first part of files"

    async def select(self, source: AsyncIterator[str]) -> list[str]:
        selected: list[str] = []
        if self.lines == 0:
            return selected
        async for line in source:
            selected.append(line)
            if len(selected) >= self.lines:
                break
        return selected


class TailCommand(_LineSliceCommand):
    name = "tail"
    description = "Output the last part of files"

    async def select(self, source: AsyncIterator[str]) -> list[str]:
        window: deque[str] = deque(maxlen=self.lines)
        async for line in source:
            window.append(line)
        return list(window)
