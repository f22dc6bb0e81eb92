"""Sequential execution of a bound pipeline.

Each stage runs to completion before the next one starts.  A stage's
output is buffered in a :class:`~pipeterm.core.streams.ListTextWriter`
and replayed to the next stage as its stdin.  The first stage that
returns a non-success classification (or raises) ends the run.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from contextlib import ExitStack
from dataclasses import dataclass

from pipeterm.core.cancellation import CancellationToken
from pipeterm.core.command import CommandContext
from pipeterm.core.models import (
    SUCCESSFUL_RESULT,
    BoundCommand,
    BoundPipeline,
    ExecutionResult,
    RedirectMode,
)
from pipeterm.core.protocols import FileSystem, TextReader, TextWriter
from pipeterm.core.registry import CommandRegistry
from pipeterm.core.streams import EmptyTextReader, ListTextWriter
from pipeterm.exceptions import CommandRuntimeError
from pipeterm.utils.exit_code import ExitCode
from pipeterm.utils.paths import resolve_path

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class _StageStdout:
    writer: TextWriter
    pipe: ListTextWriter | None = None
    """Set when the output feeds the next stage."""


class PipelineExecutor:
    """Run :class:`BoundPipeline` objects for one session.

    Parameters
    ----------
    working_directory, home_directory:
        Directories redirection paths are resolved against.
    filesystem:
        Opens redirection targets; see :class:`~pipeterm.core.protocols.FileSystem`.
    registry:
        Exposed to commands (``help`` needs it).
    previous_working_directory:
        Initial value of the directory ``cd -`` returns to.
    on_directory_changed:
        Called with the new path whenever a command changes directory.
    history, clear_history, delete_history_entry:
        Read-only history snapshot and the callbacks that mutate it.
    """

    def __init__(
        self,
        working_directory: str,
        home_directory: str,
        *,
        filesystem: FileSystem,
        registry: CommandRegistry | None = None,
        previous_working_directory: str | None = None,
        on_directory_changed: Callable[[str], None] | None = None,
        history: Sequence[str] = (),
        clear_history: Callable[[], None] | None = None,
        delete_history_entry: Callable[[int], bool] | None = None,
    ) -> None:
        self._working_directory: str = working_directory
        self._home_directory: str = home_directory
        self._previous_working_directory: str | None = previous_working_directory
        self._filesystem: FileSystem = filesystem
        self._registry: CommandRegistry | None = registry
        self._on_directory_changed = on_directory_changed
        self._history: tuple[str, ...] = tuple(history)
        self._clear_history = clear_history
        self._delete_history_entry = delete_history_entry

    # ------------------------------------------------------------------
    # Session state
    # ------------------------------------------------------------------

    @property
    def working_directory(self) -> str:
        return self._working_directory

    @property
    def previous_working_directory(self) -> str | None:
        return self._previous_working_directory

    def change_working_directory(self, path: str) -> None:
        """The single mutation commands may perform on the session."""
        self._previous_working_directory = self._working_directory
        self._working_directory = path
        logger.debug("Working directory changed to %s", path)
        if self._on_directory_changed is not None:
            self._on_directory_changed(path)

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    async def execute(
        self,
        pipeline: BoundPipeline,
        stdin: TextReader | None,
        stdout: TextWriter,
        stderr: TextWriter,
        token: CancellationToken | None = None,
    ) -> ExecutionResult:
        """Run *pipeline* and return the classification of the run.

        Every file opened for a redirection, input or output, is closed
        before this coroutine returns or raises, even when the command
        stopped reading early.

        Raises
        ------
        OperationCancelledError
            When *token* fires; cancellation never becomes an exit code.
        """
        if not pipeline:
            return SUCCESSFUL_RESULT

        token = token or CancellationToken()
        with ExitStack() as resources:
            return await self._run(pipeline, stdin, stdout, stderr, token, resources)

    async def _run(
        self,
        pipeline: BoundPipeline,
        stdin: TextReader | None,
        stdout: TextWriter,
        stderr: TextWriter,
        token: CancellationToken,
        resources: ExitStack,
    ) -> ExecutionResult:
        current_stdin: TextReader = stdin if stdin is not None else EmptyTextReader()
        last_index = len(pipeline) - 1

        for index, bound in enumerate(pipeline.commands):
            token.raise_if_cancelled()

            try:
                stage_stdin = self._resolve_stdin(bound, current_stdin, resources)
                stage_stdout = self._resolve_stdout(bound, stdout, index == last_index, resources)
            except CommandRuntimeError as exc:
                await stderr.write_line(str(exc), token)
                return ExecutionResult(exc.exit_code)

            logger.debug("Stage %d: running %s", index, bound.name)
            exit_code = await self._execute_command(
                bound, stage_stdin, stage_stdout.writer, stderr, token
            )
            logger.debug("Stage %d: %s finished with %d", index, bound.name, exit_code)

            if exit_code != ExitCode.SUCCESS:
                return ExecutionResult(exit_code)

            current_stdin = (
                stage_stdout.pipe.to_reader()
                if stage_stdout.pipe is not None
                else EmptyTextReader()
            )

        return SUCCESSFUL_RESULT

    def _resolve_stdin(
        self, bound: BoundCommand, current: TextReader, resources: ExitStack
    ) -> TextReader:
        path = bound.redirections.stdin_path
        if path is None:
            return current

        resolved = resolve_path(path, self._working_directory, self._home_directory)
        if not self._filesystem.is_file(resolved):
            raise CommandRuntimeError(f"File not found: {resolved}")
        reader = self._filesystem.open_reader(resolved)
        resources.callback(reader.close)
        return reader

    def _resolve_stdout(
        self,
        bound: BoundCommand,
        external: TextWriter,
        is_last: bool,
        resources: ExitStack,
    ) -> _StageStdout:
        redirections = bound.redirections
        if redirections.stdout_mode is not RedirectMode.NONE and redirections.stdout_path:
            resolved = resolve_path(
                redirections.stdout_path, self._working_directory, self._home_directory
            )
            try:
                writer = self._filesystem.open_writer(
                    resolved, append=redirections.stdout_mode is RedirectMode.APPEND
                )
            except OSError as exc:
                raise CommandRuntimeError(
                    f"Cannot open {resolved} for writing: {exc.strerror or exc}"
                ) from exc
            resources.callback(writer.close)
            return _StageStdout(writer)

        if is_last:
            return _StageStdout(external)

        pipe = ListTextWriter()
        return _StageStdout(pipe, pipe)

    async def _execute_command(
        self,
        bound: BoundCommand,
        stdin: TextReader,
        stdout: TextWriter,
        stderr: TextWriter,
        token: CancellationToken,
    ) -> int:
        context = CommandContext(
            stdin=stdin,
            stdout=stdout,
            stderr=stderr,
            working_directory=self._working_directory,
            home_directory=self._home_directory,
            previous_working_directory=self._previous_working_directory,
            positional_arguments=bound.positional_arguments,
            registry=self._registry,
            change_working_directory=self.change_working_directory,
            history=self._history,
            clear_history=self._clear_history or _noop,
            delete_history_entry=self._delete_history_entry or _refuse_delete,
        )

        try:
            return int(await bound.command.execute(context, token))
        except Exception as exc:
            # asyncio.CancelledError (and so OperationCancelledError) is a
            # BaseException and passes through untouched.
            logger.warning("Command %s raised %s", bound.name, type(exc).__name__, exc_info=True)
            await stderr.write_line(f"Error executing {bound.name}: {exc}", token)
            return ExitCode.RUNTIME_ERROR


def _noop() -> None:
    return None


def _refuse_delete(_index: int) -> bool:
    return False
