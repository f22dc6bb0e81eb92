"""Exit classification shared by every layer.

Centralised here so that every exit path uses a well-known, tested
value rather than magic integers scattered across the codebase.
Commands may return additional integers as domain-specific codes;
anything other than :attr:`ExitCode.SUCCESS` counts as a failure.
"""

from __future__ import annotations

from enum import IntEnum


class ExitCode(IntEnum):
    """Categorical outcome of a command or pipeline run."""

    SUCCESS = 0
    """The only success value."""

    RUNTIME_ERROR = 1
    """Failure during execution (missing file, command crash, …)."""

    USAGE_ERROR = 2
    """Parse- or bind-time user error."""


def is_success(code: int) -> bool:
    """Return ``True`` when *code* is the success classification."""
    return code == ExitCode.SUCCESS
