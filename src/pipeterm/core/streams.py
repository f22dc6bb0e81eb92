"""In-memory text streams used between pipeline stages and in tests."""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterable

from pipeterm.core.cancellation import CancellationToken, raise_if_cancelled


# ---------------------------------------------------------------------------
# Readers
# ---------------------------------------------------------------------------

class EmptyTextReader:
    """Reader that yields nothing; stdin of the first stage by default."""

    async def read_lines(self, token: CancellationToken | None = None) -> AsyncIterator[str]:
        raise_if_cancelled(token)
        return
        yield  # pragma: no cover


class ListTextReader:
    """Reader over a fixed list of lines.

    Consumption is forward-only: lines handed out by one
    :meth:`read_lines` call are not produced again by the next.
    """

    def __init__(self, lines: Iterable[str]) -> None:
        self._lines: list[str] = list(lines)
        self._position: int = 0

    async def read_lines(self, token: CancellationToken | None = None) -> AsyncIterator[str]:
        while self._position < len(self._lines):
            raise_if_cancelled(token)
            line = self._lines[self._position]
            self._position += 1
            yield line


# ---------------------------------------------------------------------------
# Writers
# ---------------------------------------------------------------------------

class ListTextWriter:
    """Line-buffering writer feeding the next pipeline stage.

    Completed lines accumulate in :attr:`lines`; text written without a
    trailing newline stays in a pending fragment until more text
    completes it or :meth:`flush` promotes it to a line of its own.
    """

    def __init__(self) -> None:
        self._lines: list[str] = []
        self._pending: str = ""

    @property
    def lines(self) -> tuple[str, ...]:
        return tuple(self._lines)

    @property
    def pending(self) -> str:
        return self._pending

    async def write_line(self, line: str = "", token: CancellationToken | None = None) -> None:
        raise_if_cancelled(token)
        self._append(line + "\n")

    async def write(self, text: str, token: CancellationToken | None = None) -> None:
        raise_if_cancelled(token)
        self._append(text)

    def flush(self) -> None:
        """Promote a non-empty pending fragment to a completed line."""
        if self._pending:
            self._lines.append(self._pending)
            self._pending = ""

    def clear(self) -> None:
        self._lines.clear()
        self._pending = ""

    def to_reader(self) -> ListTextReader:
        """Flush and expose the buffered lines as the next stage's stdin."""
        self.flush()
        return ListTextReader(self._lines)

    def _append(self, text: str) -> None:
        if not text:
            return
        *complete, tail = (self._pending + text).split("\n")
        self._lines.extend(line.removesuffix("\r") for line in complete)
        self._pending = tail


class StringTextWriter:
    """Writer accumulating raw text; handy as an external sink."""

    def __init__(self) -> None:
        self._parts: list[str] = []

    async def write_line(self, line: str = "", token: CancellationToken | None = None) -> None:
        raise_if_cancelled(token)
        self._parts.append(line + "\n")

    async def write(self, text: str, token: CancellationToken | None = None) -> None:
        raise_if_cancelled(token)
        self._parts.append(text)

    def clear(self) -> None:
        self._parts.clear()

    def getvalue(self) -> str:
        return "".join(self._parts)

    def __str__(self) -> str:
        return self.getvalue()
