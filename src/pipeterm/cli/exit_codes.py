"""Process exit codes decided by the CLI itself.

A `-c` run exits with the line's own
:class:`~pipeterm.utils.exit_code.ExitCode`; these values cover exits
that happen outside any line.
"""

from __future__ import annotations

SUCCESS: int = 0
"""The session ended normally."""

GENERAL_ERROR: int = 1
"""A PipetermError reached the process boundary and was reported."""

KEYBOARD_INTERRUPT: int = 130
"""Ctrl+C outside a running line (128 + SIGINT)."""

UNEXPECTED_ERROR: int = 2
"""Any other exception reached the process boundary."""
