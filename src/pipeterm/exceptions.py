"""Custom exception hierarchy for pipeterm.

All exceptions that cross layer boundaries must inherit from
:class:`PipetermError`.  Raw exceptions raised by commands or by the
filesystem must NEVER escape the executor; they are caught there and
reported as a runtime-error classification.

Cancellation is *outside* this hierarchy:
:class:`OperationCancelledError` derives from
:class:`asyncio.CancelledError` so that it propagates through every
``except Exception`` boundary untouched.

Hierarchy
---------
PipetermError
├── ParseError
├── BindError
├── CommandRuntimeError
├── RegistrationError
└── DependencyError
"""

from __future__ import annotations

import asyncio

from pipeterm.utils.exit_code import ExitCode


class PipetermError(Exception):
    """Base exception for all pipeterm errors.

    Every user-visible error condition must map to a subclass of this
    exception so that an error boundary can render a clean message
    without leaking internal stack traces.
    """

    exit_code: ExitCode = ExitCode.RUNTIME_ERROR
    """Classification reported when this error ends a run."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Parsing ---------------------------------------------------------------

class ParseError(PipetermError):
    """Raised when an input line is syntactically malformed."""

    exit_code = ExitCode.USAGE_ERROR

    def __init__(
        self,
        message: str,
        *,
        fragment: str | None = None,
        position: int | None = None,
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.fragment: str | None = fragment
        """The offending piece of input, when one can be isolated."""
        self.position: int | None = position
        """Zero-based offset of *fragment* in the input line."""


# --- Binding ---------------------------------------------------------------

class BindError(PipetermError):
    """Raised when a parsed command cannot be bound to its options.

    The generated help text of the offending command (or the global
    command list for an unknown command) travels in :attr:`hint`.
    """

    exit_code = ExitCode.USAGE_ERROR

    def __init__(
        self,
        message: str,
        *,
        command_name: str | None = None,
        help_text: str | None = None,
    ) -> None:
        super().__init__(message, hint=help_text)
        self.command_name: str | None = command_name

    @property
    def help_text(self) -> str | None:
        """Help text generated for the offending command."""
        return self.hint

    def render(self) -> str:
        """Return the message followed by the help text, blank-line separated."""
        if not self.hint:
            return str(self)
        return f"{self}\n\n{self.hint}"


# --- Execution -------------------------------------------------------------

class CommandRuntimeError(PipetermError):
    """Raised when a pipeline fails while executing."""

    exit_code = ExitCode.RUNTIME_ERROR


# --- Configuration ---------------------------------------------------------

class RegistrationError(PipetermError):
    """Raised when a command type cannot be registered.

    This is a startup configuration error (duplicate command names,
    conflicting option names, unsupported option declarations).
    """


# --- Cancellation ----------------------------------------------------------

class OperationCancelledError(asyncio.CancelledError):
    """Raised when a :class:`~pipeterm.core.cancellation.CancellationToken` fires."""


# --- Environment -----------------------------------------------------------

class DependencyError(PipetermError):
    """Raised when an optional UI dependency (rich, questionary) is missing."""
