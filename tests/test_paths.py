"""Tests for the pure path helpers."""

from __future__ import annotations

import pytest

from pipeterm.utils.paths import normalize_to_slash, resolve_path

CWD = "/work/dir"
HOME = "/home/user"


class TestNormalize:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("a\\b\\c", "a/b/c"),
            ("a//b///c", "a/b/c"),
            ("//server/share//x", "//server/share/x"),
            ("", ""),
        ],
    )
    def test_normalize(self, raw: str, expected: str) -> None:
        assert normalize_to_slash(raw) == expected


class TestResolve:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("", CWD),
            ("file.txt", "/work/dir/file.txt"),
            ("./file.txt", "/work/dir/file.txt"),
            ("../file.txt", "/work/file.txt"),
            ("~", HOME),
            ("~/notes.txt", "/home/user/notes.txt"),
            ("/abs/path.txt", "/abs/path.txt"),
            ("sub\\inner.txt", "/work/dir/sub/inner.txt"),
        ],
    )
    def test_resolve(self, raw: str, expected: str) -> None:
        assert resolve_path(raw, CWD, HOME) == expected

    def test_tilde_user_is_relative(self) -> None:
        assert resolve_path("~bob/x", CWD, HOME) == "/work/dir/~bob/x"

    def test_drive_letter_paths_are_absolute(self) -> None:
        assert resolve_path("C:\\data\\..\\f.txt", CWD, HOME) == "C:/f.txt"

    def test_parent_never_escapes_root(self) -> None:
        assert resolve_path("../../../..", CWD, HOME) == "/"
