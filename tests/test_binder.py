"""Tests for binding parsed commands to typed command instances."""

from __future__ import annotations

from enum import Enum
from typing import Any

import pytest

from pipeterm.builtins import EchoCommand, register_builtins
from pipeterm.core.binder import Binder
from pipeterm.core.cancellation import CancellationToken
from pipeterm.core.command import Command, CommandContext
from pipeterm.core.models import BoundCommand, BoundPipeline
from pipeterm.core.options import OptionType, option
from pipeterm.core.parser import Parser
from pipeterm.core.registry import CommandRegistry
from pipeterm.exceptions import BindError
from pipeterm.utils.exit_code import ExitCode


class Level(Enum):
    LOW = "low"
    HIGH = "high"


class ToolCommand(Command):
    name = "tool"
    description = "Binder test double"

    verbose = option("verbose", "v", type=bool)
    quiet = option("quiet", "q", type=bool)
    name_ = option("name", "N")
    count = option("count", "c", type=int)
    ratio = option("ratio", type=float)
    precise = option("precise", type=OptionType.DOUBLE)
    level = option("level", "l", type=Level)
    tags = option("tags", "t", multiple=True)
    sizes = option("sizes", type=int, multiple=True)

    async def execute(self, context: CommandContext, token: CancellationToken) -> int:
        return ExitCode.SUCCESS


class NeedsCommand(Command):
    name = "needs"
    description = "Has required options"

    first = option("first", required=True)
    second = option("second", required=True)

    async def execute(self, context: CommandContext, token: CancellationToken) -> int:
        return ExitCode.SUCCESS


def _registry() -> CommandRegistry:
    registry = CommandRegistry([ToolCommand, NeedsCommand])
    register_builtins(registry)
    return registry


def _bind(text: str) -> BoundPipeline:
    return Binder(_registry()).bind(Parser().parse(text))


def _bind_one(text: str) -> BoundCommand:
    bound = _bind(text)
    assert len(bound) == 1
    return bound.commands[0]


def _tool(text: str) -> Any:
    return _bind_one(text).command


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

class TestCommandResolution:
    def test_stages_bind_in_order(self) -> None:
        bound = _bind("echo hi | grep -p h | head")
        assert [c.name for c in bound.commands] == ["echo", "grep", "head"]

    def test_each_occurrence_gets_a_fresh_instance(self) -> None:
        bound = _bind("echo a | echo b")
        assert bound.commands[0].command is not bound.commands[1].command

    def test_command_name_is_case_insensitive(self) -> None:
        assert isinstance(_bind_one("ECHO hi").command, EchoCommand)

    def test_unknown_command_carries_global_help(self) -> None:
        with pytest.raises(BindError, match="command not found: nope") as exc_info:
            _bind("nope")
        assert exc_info.value.command_name == "nope"
        assert exc_info.value.help_text is not None
        assert exc_info.value.help_text.startswith("Available commands:")

    def test_empty_pipeline_binds_to_empty(self) -> None:
        assert not _bind("")


# ---------------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------------

class TestOptions:
    def test_unknown_long_option(self) -> None:
        with pytest.raises(BindError) as exc_info:
            _bind("echo hello --times=2")
        rendered = exc_info.value.render()
        assert "unknown option: --times" in rendered
        assert "echo - Echo arguments to stdout" in rendered
        assert exc_info.value.exit_code == ExitCode.USAGE_ERROR

    def test_unknown_short_option(self) -> None:
        with pytest.raises(BindError, match="unknown option: -z"):
            _bind("tool -z")

    def test_option_lookup_is_case_insensitive(self) -> None:
        assert _tool("tool --COUNT=3").count == 3

    def test_string_value_passes_through(self) -> None:
        assert _tool("tool --name '  spaced  '").name_ == "  spaced  "

    def test_missing_value_on_non_boolean(self) -> None:
        with pytest.raises(BindError, match="option --count requires a value"):
            _bind("tool --count")

    def test_repeated_scalar_option_last_wins(self) -> None:
        assert _tool("tool -c 1 -c 2").count == 2

    def test_repeated_list_option_fails(self) -> None:
        with pytest.raises(BindError, match="list option --tags cannot be specified multiple times"):
            _bind("tool --tags=a -t b")

    def test_required_options_report_first_missing(self) -> None:
        with pytest.raises(BindError, match="required option --first is missing"):
            _bind("needs")
        with pytest.raises(BindError, match="required option --second is missing"):
            _bind("needs --first=x")

    def test_required_options_satisfied(self) -> None:
        command: Any = _bind_one("needs --first=a --second b").command
        assert (command.first, command.second) == ("a", "b")


# ---------------------------------------------------------------------------
# Booleans and positional recovery
# ---------------------------------------------------------------------------

class TestBooleans:
    def test_flag_sets_true(self) -> None:
        assert _tool("tool -v").verbose is True

    def test_unset_flag_is_false(self) -> None:
        assert _tool("tool").verbose is False

    def test_equals_value_on_boolean_fails(self) -> None:
        with pytest.raises(BindError, match="boolean option --verbose does not accept a value"):
            _bind("tool --verbose=true")

    def test_space_separated_value_becomes_positional(self) -> None:
        bound = _bind_one("tool --verbose foo")
        assert bound.command.verbose is True  # type: ignore[attr-defined]
        assert bound.positional_arguments == ("foo",)

    def test_recovered_arguments_precede_parsed_ones(self) -> None:
        bound = _bind_one("tool first -v second -q third")
        # "second" and "third" were attached to -v / -q by the parser.
        assert bound.positional_arguments == ("second", "third", "first")

    def test_bundled_flags(self) -> None:
        command = _tool("tool -vq")
        assert (command.verbose, command.quiet) == (True, True)


# ---------------------------------------------------------------------------
# Conversion
# ---------------------------------------------------------------------------

class TestConversion:
    def test_int(self) -> None:
        assert _tool("tool --count=-7").count == -7

    @pytest.mark.parametrize("raw", ["abc", "1.5", "1_000", "0x10"])
    def test_invalid_int(self, raw: str) -> None:
        with pytest.raises(BindError, match=f"failed to convert value '{raw}' for option --count"):
            _bind(f"tool --count={raw}")

    def test_float_and_double(self) -> None:
        command = _tool("tool --ratio=0.25 --precise=1e3")
        assert command.ratio == pytest.approx(0.25)
        assert command.precise == pytest.approx(1000.0)

    def test_enum_is_case_insensitive(self) -> None:
        assert _tool("tool --level=hIgH").level is Level.HIGH

    def test_invalid_enum_lists_valid_names(self) -> None:
        with pytest.raises(BindError, match="Valid values: LOW, HIGH"):
            _bind("tool -l medium")

    def test_unquoted_list_splits_on_commas(self) -> None:
        assert _tool("tool --tags=a,b,c").tags == ["a", "b", "c"]

    def test_quoted_list_is_a_single_element(self) -> None:
        assert _tool("tool --tags='a,b,c'").tags == ["a,b,c"]

    def test_list_elements_are_converted(self) -> None:
        assert _tool("tool --sizes=1,2,3").sizes == [1, 2, 3]

    def test_bad_list_element_fails(self) -> None:
        with pytest.raises(BindError, match="failed to convert value '1,x'"):
            _bind("tool --sizes=1,x")


# ---------------------------------------------------------------------------
# Redirection placement
# ---------------------------------------------------------------------------

class TestRedirectionPlacement:
    def test_duplicate_stdin(self) -> None:
        with pytest.raises(BindError, match="stdin can only be redirected once"):
            _bind("cat < a.txt < b.txt")

    def test_duplicate_stdout(self) -> None:
        with pytest.raises(BindError, match="stdout can only be redirected once"):
            _bind("echo hi > a.txt > b.txt")

    def test_stdin_on_later_stage(self) -> None:
        with pytest.raises(BindError, match="only allowed on the first command") as exc_info:
            _bind("echo hi | cat < a.txt")
        assert exc_info.value.command_name == "cat"

    def test_redirections_are_carried_over(self) -> None:
        bound = _bind_one("cat < a.txt")
        assert bound.redirections.stdin_path == "a.txt"
