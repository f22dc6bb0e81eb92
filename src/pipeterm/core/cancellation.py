"""Cooperative cancellation for pipeline runs.

A :class:`CancellationToken` is a plain flag shared between the host
that wants to stop a run and the code doing the work.  Nothing is
interrupted forcibly: stream operations and the executor call
:meth:`CancellationToken.raise_if_cancelled` before doing work, and a
command is expected to do the same inside its own long-running loops.
"""

from __future__ import annotations

from pipeterm.exceptions import OperationCancelledError


class CancellationToken:
    """Flag that, once set, makes every check raise :class:`OperationCancelledError`."""

    __slots__ = ("_cancelled",)

    def __init__(self) -> None:
        self._cancelled: bool = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        """Signal cancellation.  Calling it more than once is harmless."""
        self._cancelled = True

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise OperationCancelledError("operation was cancelled")

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self._cancelled})"


def raise_if_cancelled(token: CancellationToken | None) -> None:
    """Check *token*, treating ``None`` as a token that never fires."""
    if token is not None:
        token.raise_if_cancelled()
