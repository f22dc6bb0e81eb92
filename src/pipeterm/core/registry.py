"""Process-wide command lookup.

Commands are registered once at startup; afterwards the registry is
only read, so concurrent lookups need no locking.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING

from pipeterm.core.metadata import CommandMetadata
from pipeterm.exceptions import RegistrationError

if TYPE_CHECKING:
    from pipeterm.core.command import Command

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Case-insensitive map of command name to :class:`CommandMetadata`."""

    def __init__(self, command_types: Iterable[type[Command]] = ()) -> None:
        self._commands: dict[str, CommandMetadata] = {}
        self._types: dict[str, type[Command]] = {}
        for command_type in command_types:
            self.register_command(command_type)

    def register_command(self, command_type: type[Command]) -> CommandMetadata:
        """Register *command_type* and return its metadata.

        Registering the same type again returns the cached metadata.

        Raises
        ------
        RegistrationError
            When another type already uses the same name, or the type's
            option declarations are invalid.
        """
        key = str(getattr(command_type, "name", "")).lower()
        existing = self._types.get(key)
        if existing is command_type:
            return self._commands[key]
        if existing is not None:
            raise RegistrationError(
                f"duplicate command name '{command_type.name}': "
                f"{existing.__qualname__} and {command_type.__qualname__}",
                hint="Give each command type a unique `name`.",
            )

        metadata = CommandMetadata.from_command_type(command_type)
        self._commands[key] = metadata
        self._types[key] = command_type
        logger.debug(
            "Registered command %s (%s) with %d option(s)",
            metadata.name,
            command_type.__qualname__,
            len(metadata.options),
        )
        return metadata

    def try_get_command(self, name: str) -> CommandMetadata | None:
        return self._commands.get(name.lower())

    def command_names(self) -> list[str]:
        """Registered command names, sorted case-insensitively."""
        return sorted((meta.name for meta in self._commands.values()), key=str.lower)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._commands

    def __len__(self) -> int:
        return len(self._commands)

    def __iter__(self) -> Iterator[CommandMetadata]:
        for name in self.command_names():
            yield self._commands[name.lower()]

    def generate_global_help(self) -> str:
        """Return ``Available commands:`` followed by one line per command."""
        lines = ["Available commands:", ""]
        lines.extend(f"  {meta.name:<20} {meta.description}".rstrip() for meta in self)
        return "\n".join(lines)
