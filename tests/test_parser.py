"""Tests for pipeline, option and redirection parsing."""

from __future__ import annotations

import pytest

from pipeterm.core.models import ParsedCommand, ParsedOptionOccurrence, RedirectMode
from pipeterm.core.parser import Parser
from pipeterm.exceptions import ParseError


def _parse_one(text: str) -> ParsedCommand:
    pipeline = Parser().parse(text)
    assert len(pipeline) == 1
    return pipeline.commands[0]


def _option(command: ParsedCommand, index: int = 0) -> ParsedOptionOccurrence:
    return command.options[index]


# ---------------------------------------------------------------------------
# Pipelines
# ---------------------------------------------------------------------------

class TestPipelines:
    @pytest.mark.parametrize("text", ["", "   ", "\t \t"])
    def test_blank_input_is_an_empty_pipeline(self, text: str) -> None:
        pipeline = Parser().parse(text)
        assert pipeline.is_empty
        assert len(pipeline) == 0

    def test_stages_split_on_pipe(self) -> None:
        pipeline = Parser().parse("echo hello | grep -p ell | head")
        assert [c.name for c in pipeline.commands] == ["echo", "grep", "head"]

    @pytest.mark.parametrize("text", ["| echo", "echo |", "echo || cat"])
    def test_empty_stage_is_an_error(self, text: str) -> None:
        with pytest.raises(ParseError, match="Empty command"):
            Parser().parse(text)

    def test_pipe_after_stdout_redirection_is_an_error(self) -> None:
        with pytest.raises(ParseError, match="Cannot use pipe after stdout redirection"):
            Parser().parse("echo hi > out.txt | cat")

    def test_quoted_pipe_is_an_argument(self) -> None:
        command = _parse_one("echo 'a|b'")
        assert command.positional_arguments == ("a|b",)


# ---------------------------------------------------------------------------
# Long options
# ---------------------------------------------------------------------------

class TestLongOptions:
    def test_equals_value(self) -> None:
        opt = _option(_parse_one("grep --pattern=ell"))
        assert (opt.name, opt.is_long, opt.raw_value, opt.has_value) == ("pattern", True, "ell", True)
        assert opt.space_separated is False

    def test_empty_equals_value(self) -> None:
        opt = _option(_parse_one("cmd --name="))
        assert opt.has_value is True
        assert opt.raw_value == ""

    def test_following_word_is_attached_tentatively(self) -> None:
        command = _parse_one("cmd --verbose foo")
        opt = _option(command)
        assert opt.raw_value == "foo"
        assert opt.space_separated is True
        assert command.positional_arguments == ()

    def test_following_option_is_not_attached(self) -> None:
        command = _parse_one("cmd --verbose --count")
        assert [o.name for o in command.options] == ["verbose", "count"]
        assert not any(o.has_value for o in command.options)

    def test_quoted_value_is_flagged(self) -> None:
        opt = _option(_parse_one("cmd --tags 'a,b'"))
        assert opt.quoted is True
        assert opt.raw_value == "a,b"


# ---------------------------------------------------------------------------
# Short options
# ---------------------------------------------------------------------------

class TestShortOptions:
    def test_single_short_flag(self) -> None:
        opt = _option(_parse_one("grep -i"))
        assert (opt.name, opt.is_long, opt.has_value) == ("i", False, False)

    def test_single_short_takes_following_value(self) -> None:
        opt = _option(_parse_one("head -n 5"))
        assert opt.raw_value == "5"
        assert opt.space_separated is True

    def test_bundle_expands_to_flags(self) -> None:
        command = _parse_one("grep -ivc")
        assert [o.name for o in command.options] == ["i", "v", "c"]
        assert not any(o.has_value for o in command.options)

    def test_bundle_with_equals_gives_value_to_last(self) -> None:
        command = _parse_one("cmd -ab=3")
        assert [(o.name, o.raw_value) for o in command.options] == [("a", None), ("b", "3")]

    def test_bundle_never_takes_following_word(self) -> None:
        command = _parse_one("grep -iv foo")
        assert command.positional_arguments == ("foo",)

    def test_dash_equals_is_an_error(self) -> None:
        with pytest.raises(ParseError, match="Invalid option format"):
            Parser().parse("cmd -=x")

    @pytest.mark.parametrize("number", ["-5", "-1.5", "-.5"])
    def test_negative_numbers_are_positional(self, number: str) -> None:
        command = _parse_one(f"calc {number}")
        assert command.positional_arguments == (number,)
        assert command.options == ()

    def test_lone_dash_is_positional(self) -> None:
        assert _parse_one("cd -").positional_arguments == ("-",)


# ---------------------------------------------------------------------------
# End of options
# ---------------------------------------------------------------------------

class TestEndOfOptions:
    def test_words_after_double_dash_are_positional(self) -> None:
        command = _parse_one("echo -- -n --help")
        assert command.options == ()
        assert command.positional_arguments == ("-n", "--help")

    def test_options_before_double_dash_still_parse(self) -> None:
        command = _parse_one("echo -n -- -x")
        assert [o.name for o in command.options] == ["n"]
        assert command.positional_arguments == ("-x",)


# ---------------------------------------------------------------------------
# Redirections
# ---------------------------------------------------------------------------

class TestRedirections:
    def test_stdin_redirection(self) -> None:
        redirections = _parse_one("cat < in.txt").redirections
        assert redirections.stdin_path == "in.txt"
        assert redirections.stdin_count == 1

    def test_stdout_truncate(self) -> None:
        redirections = _parse_one("echo hi > out.txt").redirections
        assert redirections.stdout_path == "out.txt"
        assert redirections.stdout_mode is RedirectMode.OVERWRITE

    def test_stdout_append(self) -> None:
        redirections = _parse_one("echo hi >> out.txt").redirections
        assert redirections.stdout_mode is RedirectMode.APPEND

    def test_redirection_path_is_not_an_argument(self) -> None:
        command = _parse_one("echo hi > out.txt there")
        assert command.positional_arguments == ("hi", "there")

    def test_duplicates_are_counted_and_last_wins(self) -> None:
        redirections = _parse_one("echo hi > a.txt >> b.txt").redirections
        assert redirections.stdout_count == 2
        assert redirections.stdout_path == "b.txt"
        assert redirections.stdout_mode is RedirectMode.APPEND

    @pytest.mark.parametrize("text", ["echo hi >", "cat <", "echo hi >> | cat", "cat < > x"])
    def test_missing_path_is_an_error(self, text: str) -> None:
        with pytest.raises(ParseError, match="Expected file path after"):
            Parser().parse(text)

    def test_stdin_on_later_stage_is_accepted_by_parser(self) -> None:
        pipeline = Parser().parse("echo hi | cat < in.txt")
        assert pipeline.commands[1].redirections.stdin_path == "in.txt"
