"""Protocols (interfaces) consumed by the core layer.

These define the contracts that stream and filesystem adapters must
satisfy.  The executor and the commands depend ONLY on these
protocols; the in-memory streams live in :mod:`pipeterm.core.streams`
and the file-backed ones in :mod:`pipeterm.infra.file_streams`.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from pipeterm.core.cancellation import CancellationToken


class TextReader(Protocol):
    """Source of lines for a pipeline stage.

    The sequence returned by :meth:`read_lines` is lazy, forward-only and
    finite.  It cannot be restarted: a second call continues where the
    first one stopped (or yields nothing once exhausted).
    """

    def read_lines(self, token: CancellationToken | None = None) -> AsyncIterator[str]:
        """Yield lines without their terminators.

        Raises
        ------
        OperationCancelledError
            When *token* fires before the next line is produced.
        """
        ...  # pragma: no cover


class ClosableTextReader(TextReader, Protocol):
    """A :class:`TextReader` that owns a resource released by :meth:`close`."""

    def close(self) -> None:
        ...  # pragma: no cover


class TextWriter(Protocol):
    """Sink for a pipeline stage's output."""

    async def write_line(self, line: str = "", token: CancellationToken | None = None) -> None:
        """Write *line* followed by a line terminator."""
        ...  # pragma: no cover

    async def write(self, text: str, token: CancellationToken | None = None) -> None:
        """Write *text* as-is; an unterminated tail stays pending."""
        ...  # pragma: no cover

    def clear(self) -> None:
        """Discard anything written so far, where the sink supports it."""
        ...  # pragma: no cover


class ClosableTextWriter(TextWriter, Protocol):
    """A :class:`TextWriter` that owns a resource released by :meth:`close`."""

    def close(self) -> None:
        ...  # pragma: no cover


class FileSystem(Protocol):
    """Contract for the filesystem access the executor needs for redirections.

    Paths handed to these methods are already resolved and absolute.
    """

    def is_file(self, path: str) -> bool:
        ...  # pragma: no cover

    def open_reader(self, path: str) -> ClosableTextReader:
        """Open *path* for line-by-line reading.

        The executor calls ``close()`` when the run ends, whether or not
        the command read every line.
        """
        ...  # pragma: no cover

    def open_writer(self, path: str, *, append: bool) -> ClosableTextWriter:
        """Open *path* for writing, truncating unless *append* is set.

        Raises
        ------
        OSError
            When the file cannot be created or opened.
        """
        ...  # pragma: no cover
