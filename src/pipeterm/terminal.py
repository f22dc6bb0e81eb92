"""One interpreter session: parse, bind and execute a line at a time.

:class:`Terminal` is the error boundary for a single input line.  Parse,
bind and runtime failures are written to the caller's stderr writer and
reported as an exit classification; cancellation propagates.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pipeterm.builtins import register_builtins
from pipeterm.config import TerminalConfig
from pipeterm.core.binder import Binder
from pipeterm.core.cancellation import CancellationToken
from pipeterm.core.executor import PipelineExecutor
from pipeterm.core.models import BoundPipeline, ParsedPipeline
from pipeterm.core.parser import Parser
from pipeterm.core.registry import CommandRegistry
from pipeterm.exceptions import BindError, ParseError
from pipeterm.infra.file_streams import LocalFileSystem
from pipeterm.utils.exit_code import ExitCode
from pipeterm.utils.paths import normalize_to_slash

if TYPE_CHECKING:
    from pipeterm.core.command import Command
    from pipeterm.core.protocols import FileSystem, TextReader, TextWriter

logger = logging.getLogger(__name__)


class Terminal:
    """Owns the registry and the mutable session state.

    Parameters
    ----------
    config:
        Directories, history limit and built-in registration.
    registry:
        Optional pre-populated registry.  Built-ins are added to it when
        ``config.register_builtins`` is set.
    filesystem:
        Redirection backend; the local filesystem by default.
    """

    def __init__(
        self,
        config: TerminalConfig | None = None,
        *,
        registry: CommandRegistry | None = None,
        filesystem: FileSystem | None = None,
    ) -> None:
        self._config: TerminalConfig = config or TerminalConfig()
        self._home_directory: str = self._config.resolved_home()
        self._working_directory: str = self._config.resolved_working_directory()
        self._previous_working_directory: str | None = None
        self._history: list[str] = []
        self._registry: CommandRegistry = registry if registry is not None else CommandRegistry()
        self._filesystem: FileSystem = filesystem or LocalFileSystem()
        self._parser: Parser = Parser()
        self._binder: Binder = Binder(self._registry)

        if self._config.register_builtins:
            register_builtins(self._registry)

    # ------------------------------------------------------------------
    # Session state
    # ------------------------------------------------------------------

    @property
    def registry(self) -> CommandRegistry:
        return self._registry

    @property
    def home_directory(self) -> str:
        return self._home_directory

    @property
    def working_directory(self) -> str:
        return self._working_directory

    @working_directory.setter
    def working_directory(self, value: str) -> None:
        normalized = normalize_to_slash(value)
        if normalized != self._working_directory:
            self._previous_working_directory = self._working_directory
            self._working_directory = normalized

    @property
    def previous_working_directory(self) -> str | None:
        return self._previous_working_directory

    @property
    def history(self) -> tuple[str, ...]:
        return tuple(self._history)

    def register_command(self, command_type: type[Command]) -> None:
        self._registry.register_command(command_type)

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def add_history(self, line: str) -> None:
        """Record *line*, skipping blanks and an immediate repeat."""
        if not line or line.isspace():
            return
        if self._history and self._history[-1] == line:
            return
        self._history.append(line)
        overflow = len(self._history) - self._config.max_history
        if overflow > 0:
            del self._history[:overflow]

    def clear_history(self) -> None:
        self._history.clear()

    def delete_history_entry(self, index: int) -> bool:
        """Delete the 1-based entry *index*; return whether it existed."""
        if 1 <= index <= len(self._history):
            del self._history[index - 1]
            return True
        return False

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def parse(self, line: str) -> ParsedPipeline:
        return self._parser.parse(line)

    def bind(self, pipeline: ParsedPipeline) -> BoundPipeline:
        return self._binder.bind(pipeline)

    async def execute(
        self,
        line: str,
        stdout: TextWriter,
        stderr: TextWriter,
        stdin: TextReader | None = None,
        token: CancellationToken | None = None,
    ) -> int:
        """Run one input line and return its exit classification.

        Raises
        ------
        OperationCancelledError
            When *token* fires while the line is running.
        """
        if not line or line.isspace():
            return ExitCode.SUCCESS

        self.add_history(line)
        token = token or CancellationToken()

        try:
            parsed = self._parser.parse(line)
            if parsed.is_empty:
                return ExitCode.SUCCESS
            bound = self._binder.bind(parsed)
            result = await self._new_executor().execute(bound, stdin, stdout, stderr, token)
        except ParseError as exc:
            logger.debug("Parse error in %r: %s", line, exc)
            await stderr.write_line(f"Parse error: {exc}", token)
            return exc.exit_code
        except BindError as exc:
            logger.debug("Bind error in %r: %s", line, exc)
            await stderr.write_line(exc.render(), token)
            return exc.exit_code

        return result.exit_code

    def _new_executor(self) -> PipelineExecutor:
        return PipelineExecutor(
            self._working_directory,
            self._home_directory,
            filesystem=self._filesystem,
            registry=self._registry,
            previous_working_directory=self._previous_working_directory,
            on_directory_changed=self._on_directory_changed,
            history=self._history,
            clear_history=self.clear_history,
            delete_history_entry=self.delete_history_entry,
        )

    def _on_directory_changed(self, path: str) -> None:
        self.working_directory = path
