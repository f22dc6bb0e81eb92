"""Domain models for pipeterm.

All models are **frozen** dataclasses, immutable value objects with no
behaviour beyond data access.  The parser produces the ``Parsed*``
family, the binder turns it into the ``Bound*`` family and the executor
reports an :class:`ExecutionResult`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from pipeterm.utils.exit_code import ExitCode

if TYPE_CHECKING:
    from pipeterm.core.command import Command
    from pipeterm.core.metadata import CommandMetadata


# ---------------------------------------------------------------------------
# Redirections
# ---------------------------------------------------------------------------

class RedirectMode(Enum):
    """How a stage's stdout is redirected to a file."""

    NONE = "none"
    OVERWRITE = "overwrite"
    APPEND = "append"


@dataclass(frozen=True, slots=True)
class ParsedRedirections:
    """File redirections attached to a single stage."""

    stdin_path: str | None = None
    """Path after ``<``, or ``None``."""

    stdout_path: str | None = None
    """Path after ``>`` / ``>>``, or ``None``."""

    stdout_mode: RedirectMode = RedirectMode.NONE

    stdin_count: int = 0
    """How many ``<`` operators the stage contained (the last one wins)."""

    stdout_count: int = 0
    """How many ``>`` / ``>>`` operators the stage contained (the last one wins)."""


# ---------------------------------------------------------------------------
# Parsed structures
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ParsedOptionOccurrence:
    """One option as written on the command line, not yet bound to a type."""

    name: str
    """Option name without the leading dashes."""

    is_long: bool
    """``True`` for ``--name``, ``False`` for ``-n``."""

    raw_value: str | None = None
    """Raw value text; ``None`` when absent, ``""`` for ``--name=``."""

    has_value: bool = False

    quoted: bool = False
    """Whether the value (or the token carrying it) contained quotes."""

    space_separated: bool = False
    """``True`` when the value came from the following token, not ``=``."""

    def __str__(self) -> str:
        prefix = "--" if self.is_long else "-"
        if self.has_value:
            return f"{prefix}{self.name}={self.raw_value or ''}"
        return f"{prefix}{self.name}"


@dataclass(frozen=True, slots=True)
class ParsedCommand:
    """A single stage of a parsed pipeline."""

    name: str
    options: tuple[ParsedOptionOccurrence, ...] = ()
    positional_arguments: tuple[str, ...] = ()
    redirections: ParsedRedirections = field(default_factory=ParsedRedirections)


@dataclass(frozen=True, slots=True)
class ParsedPipeline:
    """Ordered stages connected by ``|``.  Empty for blank input."""

    commands: tuple[ParsedCommand, ...] = ()

    @property
    def is_empty(self) -> bool:
        return len(self.commands) == 0

    def __len__(self) -> int:
        return len(self.commands)


# ---------------------------------------------------------------------------
# Bound structures
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class BoundCommand:
    """A freshly constructed command instance with its options applied."""

    command: Command
    metadata: CommandMetadata
    positional_arguments: tuple[str, ...]
    """Recovered boolean-consumed tokens followed by parsed positionals."""

    redirections: ParsedRedirections

    @property
    def name(self) -> str:
        return self.metadata.name


@dataclass(frozen=True, slots=True)
class BoundPipeline:
    """Immutable ordered sequence of :class:`BoundCommand` entries."""

    commands: tuple[BoundCommand, ...] = ()

    def __len__(self) -> int:
        return len(self.commands)

    def __bool__(self) -> bool:
        return len(self.commands) > 0


# ---------------------------------------------------------------------------
# Execution result
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ExecutionResult:
    """Outcome of running a pipeline."""

    exit_code: int = ExitCode.SUCCESS

    @property
    def success(self) -> bool:
        return self.exit_code == ExitCode.SUCCESS


SUCCESSFUL_RESULT = ExecutionResult(ExitCode.SUCCESS)
"""Shared result for runs that finish cleanly (including empty pipelines)."""
