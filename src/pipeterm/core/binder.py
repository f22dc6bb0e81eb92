"""Bind parsed pipelines to fresh, fully configured command instances."""

from __future__ import annotations

from dataclasses import dataclass, field

from pipeterm.core.command import Command
from pipeterm.core.converters import convert_value
from pipeterm.core.metadata import CommandMetadata
from pipeterm.core.models import (
    BoundCommand,
    BoundPipeline,
    ParsedCommand,
    ParsedOptionOccurrence,
    ParsedPipeline,
)
from pipeterm.core.options import OptionMetadata
from pipeterm.core.registry import CommandRegistry
from pipeterm.exceptions import BindError


class Binder:
    """Resolve each stage of a :class:`ParsedPipeline` against a registry.

    Binding is all-or-nothing: the first failing stage raises and no
    :class:`BoundPipeline` is produced.
    """

    def __init__(self, registry: CommandRegistry) -> None:
        self._registry: CommandRegistry = registry

    def bind(self, pipeline: ParsedPipeline) -> BoundPipeline:
        """Bind every stage of *pipeline*, in order.

        Raises
        ------
        BindError
            On an unknown command or option, a malformed or unconvertible
            option value, a missing required option, or a misplaced or
            repeated redirection.
        """
        return BoundPipeline(
            tuple(
                self.bind_command(parsed, index=index)
                for index, parsed in enumerate(pipeline.commands)
            )
        )

    def bind_command(self, parsed: ParsedCommand, *, index: int = 0) -> BoundCommand:
        """Bind a single stage; *index* is its position in the pipeline."""
        metadata = self._registry.try_get_command(parsed.name)
        if metadata is None:
            raise BindError(
                f"command not found: {parsed.name}",
                command_name=parsed.name,
                help_text=self._registry.generate_global_help(),
            )
        return _StageBinding(parsed, metadata, index).run()


@dataclass(slots=True)
class _StageBinding:
    """Per-stage binding state: the instance, the options set so far and
    the positional arguments recovered from boolean flags."""

    parsed: ParsedCommand
    metadata: CommandMetadata
    index: int
    command: Command = field(init=False)
    set_options: set[str] = field(init=False, default_factory=set)
    recovered: list[str] = field(init=False, default_factory=list)

    def __post_init__(self) -> None:
        self.command = self.metadata.create_instance()

    def run(self) -> BoundCommand:
        self._check_redirections()

        for occurrence in self.parsed.options:
            opt = self._resolve(occurrence)
            if opt.is_list and opt.long_name.lower() in self.set_options:
                raise self._error(
                    f"list option --{opt.long_name} cannot be specified multiple times"
                )
            if opt.is_bool:
                self._bind_flag(occurrence, opt)
            else:
                self._bind_value(occurrence, opt)

        for opt in self.metadata.options:
            if opt.required and opt.long_name.lower() not in self.set_options:
                raise self._error(f"required option --{opt.long_name} is missing")

        return BoundCommand(
            command=self.command,
            metadata=self.metadata,
            positional_arguments=(*self.recovered, *self.parsed.positional_arguments),
            redirections=self.parsed.redirections,
        )

    # ------------------------------------------------------------------
    # Options
    # ------------------------------------------------------------------

    def _resolve(self, occurrence: ParsedOptionOccurrence) -> OptionMetadata:
        if occurrence.is_long:
            opt = self.metadata.get_option_by_long_name(occurrence.name)
            if opt is None:
                raise self._error(f"unknown option: --{occurrence.name}")
        else:
            opt = self.metadata.get_option_by_short_name(occurrence.name)
            if opt is None:
                raise self._error(f"unknown option: -{occurrence.name}")
        return opt

    def _bind_flag(self, occurrence: ParsedOptionOccurrence, opt: OptionMetadata) -> None:
        if occurrence.has_value and not occurrence.space_separated:
            raise self._error(f"boolean option --{opt.long_name} does not accept a value")
        # The parser attached the following word tentatively; flags never
        # consume it, so it flows back as a positional argument.
        if occurrence.has_value and occurrence.raw_value is not None:
            self.recovered.append(occurrence.raw_value)
        opt.setter(self.command, True)
        self.set_options.add(opt.long_name.lower())

    def _bind_value(self, occurrence: ParsedOptionOccurrence, opt: OptionMetadata) -> None:
        if not occurrence.has_value or occurrence.raw_value is None:
            raise self._error(f"option --{opt.long_name} requires a value")
        raw = occurrence.raw_value
        try:
            value = convert_value(raw, opt, quoted=occurrence.quoted)
        except ValueError as exc:
            raise self._error(
                f"failed to convert value '{raw}' for option --{opt.long_name}: {exc}"
            ) from exc
        opt.setter(self.command, value)
        self.set_options.add(opt.long_name.lower())

    # ------------------------------------------------------------------
    # Redirections
    # ------------------------------------------------------------------

    def _check_redirections(self) -> None:
        redirections = self.parsed.redirections
        if redirections.stdin_count > 1:
            raise self._error("stdin can only be redirected once per command")
        if redirections.stdout_count > 1:
            raise self._error("stdout can only be redirected once per command")
        if redirections.stdin_path is not None and self.index > 0:
            raise self._error(
                "stdin redirection (<) is only allowed on the first command of a pipeline"
            )

    def _error(self, message: str) -> BindError:
        return BindError(
            message,
            command_name=self.parsed.name,
            help_text=self.metadata.generate_help(),
        )
