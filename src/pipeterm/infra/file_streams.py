"""File-backed text streams and the local filesystem adapter.

Rules
-----
* Files are read as UTF-8 (a BOM is skipped) and written as UTF-8 with
  ``\\n`` line endings.
* A :class:`FileTextWriter` owns its handle from construction until
  :meth:`FileTextWriter.close`; closing twice is harmless.
* A :class:`FileTextReader` owns its handle while lines are being read;
  :meth:`FileTextReader.close` releases it even if the reader stopped
  early.
* No user-facing output.
"""

from __future__ import annotations

import io
import os
from collections.abc import AsyncIterator
from types import TracebackType
from typing import TextIO

from pipeterm.core.cancellation import CancellationToken, raise_if_cancelled


class FileTextReader:
    """Lazy line reader over a file.

    The file is opened on the first iteration and closed when the
    iteration ends or :meth:`close` is called, whichever comes first.
    Lines are produced only once: iterating again after the first pass
    (or after :meth:`close`) yields nothing.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path: str = os.fspath(path)
        self._consumed: bool = False
        self._handle: TextIO | None = None

    @property
    def path(self) -> str:
        return self._path

    async def read_lines(self, token: CancellationToken | None = None) -> AsyncIterator[str]:
        if self._consumed:
            return
        self._consumed = True
        raise_if_cancelled(token)
        with open(self._path, encoding="utf-8-sig", errors="replace") as handle:
            self._handle = handle
            try:
                for line in handle:
                    raise_if_cancelled(token)
                    yield line.removesuffix("\n")
            finally:
                self._handle = None

    @property
    def closed(self) -> bool:
        return self._handle is None

    def close(self) -> None:
        """Release the handle of an unfinished read.  Later calls do nothing."""
        self._consumed = True
        if self._handle is not None:
            handle, self._handle = self._handle, None
            handle.close()

    def __enter__(self) -> FileTextReader:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


class FileTextWriter:
    """Writer that owns an open file, truncated or appended to.

    Every write is flushed immediately so output survives a failure in
    the middle of a stage.

    Raises
    ------
    OSError
        From the constructor, when the file cannot be opened.
    """

    def __init__(self, path: str | os.PathLike[str], *, append: bool = False) -> None:
        self._path: str = os.fspath(path)
        self._handle: TextIO | None = open(  # noqa: SIM115
            self._path, "a" if append else "w", encoding="utf-8", newline="\n"
        )

    @property
    def path(self) -> str:
        return self._path

    @property
    def closed(self) -> bool:
        return self._handle is None

    async def write_line(self, line: str = "", token: CancellationToken | None = None) -> None:
        await self.write(line + "\n", token)

    async def write(self, text: str, token: CancellationToken | None = None) -> None:
        raise_if_cancelled(token)
        handle = self._require_open()
        handle.write(text)
        handle.flush()

    def clear(self) -> None:
        raise io.UnsupportedOperation("clear is not supported for file output")

    def close(self) -> None:
        """Release the file handle.  Later calls do nothing."""
        if self._handle is not None:
            handle, self._handle = self._handle, None
            handle.close()

    def _require_open(self) -> TextIO:
        if self._handle is None:
            raise ValueError(f"write to closed file: {self._path}")
        return self._handle

    def __enter__(self) -> FileTextWriter:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"FileTextWriter({self._path!r}, {state})"


class LocalFileSystem:
    """:class:`~pipeterm.core.protocols.FileSystem` backed by the OS."""

    def is_file(self, path: str) -> bool:
        return os.path.isfile(path)

    def open_reader(self, path: str) -> FileTextReader:
        return FileTextReader(path)

    def open_writer(self, path: str, *, append: bool) -> FileTextWriter:
        return FileTextWriter(path, append=append)
