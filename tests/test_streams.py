"""Tests for in-memory and file-backed text streams."""

from __future__ import annotations

import asyncio
import io
from collections.abc import AsyncIterator
from pathlib import Path

import pytest

from pipeterm.core.cancellation import CancellationToken
from pipeterm.core.streams import (
    EmptyTextReader,
    ListTextReader,
    ListTextWriter,
    StringTextWriter,
)
from pipeterm.exceptions import OperationCancelledError
from pipeterm.infra.file_streams import FileTextReader, FileTextWriter, LocalFileSystem


async def _collect(lines: AsyncIterator[str]) -> list[str]:
    return [line async for line in lines]


def _read_all(reader: object, token: CancellationToken | None = None) -> list[str]:
    return asyncio.run(_collect(reader.read_lines(token)))  # type: ignore[attr-defined]


# ---------------------------------------------------------------------------
# Readers
# ---------------------------------------------------------------------------

class TestReaders:
    def test_empty_reader_yields_nothing(self) -> None:
        assert _read_all(EmptyTextReader()) == []

    def test_list_reader_yields_in_order(self) -> None:
        assert _read_all(ListTextReader(["a", "b"])) == ["a", "b"]

    def test_list_reader_is_forward_only(self) -> None:
        reader = ListTextReader(["a", "b"])
        assert _read_all(reader) == ["a", "b"]
        assert _read_all(reader) == []

    def test_cancelled_token_stops_reading(self) -> None:
        token = CancellationToken()
        token.cancel()
        with pytest.raises(OperationCancelledError):
            _read_all(ListTextReader(["a"]), token)

    def test_cancellation_is_an_asyncio_cancellation(self) -> None:
        assert issubclass(OperationCancelledError, asyncio.CancelledError)


# ---------------------------------------------------------------------------
# In-memory writers
# ---------------------------------------------------------------------------

class TestListTextWriter:
    def test_write_line_completes_lines(self) -> None:
        writer = ListTextWriter()
        asyncio.run(writer.write_line("one"))
        asyncio.run(writer.write_line("two"))
        assert writer.lines == ("one", "two")

    def test_partial_writes_accumulate_until_newline(self) -> None:
        writer = ListTextWriter()
        asyncio.run(writer.write("hel"))
        asyncio.run(writer.write("lo\nwor"))
        assert writer.lines == ("hello",)
        assert writer.pending == "wor"

    def test_flush_promotes_fragment(self) -> None:
        writer = ListTextWriter()
        asyncio.run(writer.write("tail"))
        writer.flush()
        assert writer.lines == ("tail",)
        assert writer.pending == ""

    def test_flush_without_fragment_adds_nothing(self) -> None:
        writer = ListTextWriter()
        asyncio.run(writer.write_line("x"))
        writer.flush()
        assert writer.lines == ("x",)

    def test_to_reader_replays_lines(self) -> None:
        writer = ListTextWriter()
        asyncio.run(writer.write("a\nb"))
        assert _read_all(writer.to_reader()) == ["a", "b"]

    def test_clear(self) -> None:
        writer = ListTextWriter()
        asyncio.run(writer.write("a\nb"))
        writer.clear()
        assert writer.lines == ()
        assert writer.pending == ""

    def test_cancelled_write_raises(self) -> None:
        token = CancellationToken()
        token.cancel()
        with pytest.raises(OperationCancelledError):
            asyncio.run(ListTextWriter().write_line("x", token))


class TestStringTextWriter:
    def test_accumulates_raw_text(self) -> None:
        writer = StringTextWriter()
        asyncio.run(writer.write("a"))
        asyncio.run(writer.write_line("b"))
        assert writer.getvalue() == "ab\n"
        writer.clear()
        assert writer.getvalue() == ""


# ---------------------------------------------------------------------------
# File streams
# ---------------------------------------------------------------------------

class TestFileStreams:
    def test_reader_strips_terminators_and_bom(self, tmp_path: Path) -> None:
        path = tmp_path / "in.txt"
        path.write_bytes("﻿one\r\ntwo\nthree".encode())
        assert _read_all(FileTextReader(path)) == ["one", "two", "three"]

    def test_reader_is_forward_only(self, tmp_path: Path) -> None:
        path = tmp_path / "in.txt"
        path.write_text("x\n", encoding="utf-8")
        reader = FileTextReader(path)
        assert _read_all(reader) == ["x"]
        assert _read_all(reader) == []

    def test_close_releases_unfinished_read(self, tmp_path: Path) -> None:
        path = tmp_path / "in.txt"
        path.write_text("a\nb\nc\n", encoding="utf-8")
        reader = FileTextReader(path)

        async def first_then_close() -> tuple[str, bool, bool]:
            lines = reader.read_lines()
            first = await lines.__anext__()
            opened = not reader.closed
            reader.close()
            reader.close()
            return first, opened, reader.closed

        assert asyncio.run(first_then_close()) == ("a", True, True)
        assert _read_all(reader) == []

    def test_reader_context_manager_closes(self, tmp_path: Path) -> None:
        path = tmp_path / "in.txt"
        path.write_text("a\nb\n", encoding="utf-8")

        async def take_one() -> FileTextReader:
            with FileTextReader(path) as reader:
                async for _ in reader.read_lines():
                    break
            return reader

        reader = asyncio.run(take_one())
        assert reader.closed
        assert _read_all(reader) == []

    def test_writer_truncates(self, tmp_path: Path) -> None:
        path = tmp_path / "out.txt"
        path.write_text("old\n", encoding="utf-8")
        with FileTextWriter(path) as writer:
            asyncio.run(writer.write_line("new"))
        assert path.read_text(encoding="utf-8") == "new\n"

    def test_writer_appends(self, tmp_path: Path) -> None:
        path = tmp_path / "out.txt"
        path.write_text("old\n", encoding="utf-8")
        with FileTextWriter(path, append=True) as writer:
            asyncio.run(writer.write("new"))
        assert path.read_text(encoding="utf-8") == "old\nnew"

    def test_close_is_idempotent(self, tmp_path: Path) -> None:
        writer = FileTextWriter(tmp_path / "out.txt")
        writer.close()
        writer.close()
        assert writer.closed

    def test_write_after_close_fails(self, tmp_path: Path) -> None:
        writer = FileTextWriter(tmp_path / "out.txt")
        writer.close()
        with pytest.raises(ValueError, match="closed"):
            asyncio.run(writer.write_line("x"))

    def test_clear_is_unsupported(self, tmp_path: Path) -> None:
        with FileTextWriter(tmp_path / "out.txt") as writer:
            with pytest.raises(io.UnsupportedOperation):
                writer.clear()

    def test_missing_directory_raises_oserror(self, tmp_path: Path) -> None:
        with pytest.raises(OSError):
            FileTextWriter(tmp_path / "missing" / "out.txt")

    def test_local_filesystem(self, tmp_path: Path) -> None:
        fs = LocalFileSystem()
        path = tmp_path / "f.txt"
        assert not fs.is_file(path.as_posix())
        writer = fs.open_writer(path.as_posix(), append=False)
        asyncio.run(writer.write_line("hi"))
        writer.close()
        assert fs.is_file(path.as_posix())
        assert _read_all(fs.open_reader(path.as_posix())) == ["hi"]
