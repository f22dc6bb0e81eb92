"""The command contract and the contexts handed to commands."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar

from pipeterm.utils.paths import resolve_path

if TYPE_CHECKING:
    from pipeterm.core.cancellation import CancellationToken
    from pipeterm.core.protocols import TextReader, TextWriter
    from pipeterm.core.registry import CommandRegistry


def _ignore(*_: object) -> None:
    return None


@dataclass(frozen=True, slots=True)
class CommandContext:
    """Everything a command may touch while it executes.

    Session state is read-only here.  The only ways a command mutates
    the session are :attr:`change_working_directory` and the two history
    callbacks.
    """

    stdin: TextReader
    stdout: TextWriter
    stderr: TextWriter
    working_directory: str
    home_directory: str
    previous_working_directory: str | None = None
    positional_arguments: tuple[str, ...] = ()
    registry: CommandRegistry | None = None
    change_working_directory: Callable[[str], None] = field(
        default=_ignore, repr=False
    )
    history: tuple[str, ...] = ()
    clear_history: Callable[[], None] = field(default=_ignore, repr=False)
    delete_history_entry: Callable[[int], bool] = field(
        default=lambda _index: False, repr=False
    )

    def resolve_path(self, path: str) -> str:
        """Resolve *path* against this context's working and home directories."""
        return resolve_path(path, self.working_directory, self.home_directory)


@dataclass(frozen=True, slots=True)
class CompletionContext:
    """Partial input handed to :meth:`Command.get_completions`."""

    input_line: str
    current_token: str
    token_index: int
    working_directory: str
    home_directory: str
    previous_tokens: Sequence[str] = ()


class Command(ABC):
    """Base class for every command.

    Subclasses set :attr:`name` and :attr:`description` and declare
    options with :func:`~pipeterm.core.options.option`.  A fresh instance
    is created for every occurrence of the command in a pipeline.
    """

    name: ClassVar[str] = ""
    description: ClassVar[str] = ""

    @abstractmethod
    async def execute(self, context: CommandContext, token: CancellationToken) -> int:
        """Run the command and return its exit classification.

        Long-running work should call ``token.raise_if_cancelled()``
        between units of work.
        """

    def get_completions(self, context: CompletionContext) -> list[str]:
        return []
