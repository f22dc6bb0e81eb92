"""Per-command metadata collected once at registration."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

from pipeterm.core.options import OptionMetadata, OptionSpec
from pipeterm.exceptions import RegistrationError

if TYPE_CHECKING:
    from pipeterm.core.command import Command


@dataclass(frozen=True, slots=True)
class CommandMetadata:
    """Read-only description of a command type.

    Option lookup by long or short name is case-insensitive.
    """

    name: str
    description: str
    factory: Callable[[], Command] = field(repr=False, compare=False)
    options: tuple[OptionMetadata, ...] = ()
    _by_long: Mapping[str, OptionMetadata] = field(
        default_factory=lambda: MappingProxyType({}), repr=False, compare=False
    )
    _by_short: Mapping[str, OptionMetadata] = field(
        default_factory=lambda: MappingProxyType({}), repr=False, compare=False
    )

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_command_type(cls, command_type: type[Command]) -> CommandMetadata:
        """Collect the ``option(...)`` descriptors of *command_type*.

        Options are ordered base classes first, then by definition order
        within each class.  A subclass redefining an attribute replaces
        the inherited option in place.

        Raises
        ------
        RegistrationError
            When the type has no name, is abstract, or declares two
            options with the same long or short name.
        """
        name = getattr(command_type, "name", "")
        if not isinstance(name, str) or not name.strip():
            raise RegistrationError(
                f"command type {command_type.__qualname__} does not declare a name",
                hint="Set the `name` class attribute.",
            )
        if getattr(command_type, "__abstractmethods__", None):
            raise RegistrationError(
                f"command type {command_type.__qualname__} is abstract",
                hint="Implement `execute` before registering the command.",
            )

        specs: dict[str, OptionSpec] = {}
        for klass in reversed(command_type.__mro__):
            for attribute, value in vars(klass).items():
                if isinstance(value, OptionSpec):
                    specs[attribute] = value

        options = tuple(OptionMetadata.from_spec(spec) for spec in specs.values())

        by_long: dict[str, OptionMetadata] = {}
        by_short: dict[str, OptionMetadata] = {}
        for opt in options:
            key = opt.long_name.lower()
            if key in by_long:
                raise RegistrationError(
                    f"command '{name}' declares option --{opt.long_name} more than once"
                )
            by_long[key] = opt
            if opt.short_name is not None:
                short_key = opt.short_name.lower()
                if short_key in by_short:
                    raise RegistrationError(
                        f"command '{name}' declares short option -{opt.short_name} more than once"
                    )
                by_short[short_key] = opt

        return cls(
            name=name,
            description=getattr(command_type, "description", "") or "",
            factory=command_type,
            options=options,
            _by_long=MappingProxyType(by_long),
            _by_short=MappingProxyType(by_short),
        )

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get_option_by_long_name(self, long_name: str) -> OptionMetadata | None:
        return self._by_long.get(long_name.lower())

    def get_option_by_short_name(self, short_name: str) -> OptionMetadata | None:
        return self._by_short.get(short_name.lower())

    def create_instance(self) -> Command:
        """Return a fresh command instance; instances are never shared."""
        return self.factory()

    # ------------------------------------------------------------------
    # Help
    # ------------------------------------------------------------------

    def generate_help(self) -> str:
        """Return ``name - description`` followed by an ``Options:`` table."""
        lines = [f"{self.name} - {self.description}" if self.description else self.name]
        if self.options:
            lines.append("")
            lines.append("Options:")
            for opt in self.options:
                short_part = f"-{opt.short_name}, " if opt.short_name else "    "
                entry = f"  {short_part}--{opt.long_name}"
                if not opt.is_bool:
                    entry += f" <{opt.type_name}>"
                if opt.required:
                    entry += " (required)"
                if opt.description:
                    entry += f"  {opt.description}"
                lines.append(entry)
        return "\n".join(lines)
