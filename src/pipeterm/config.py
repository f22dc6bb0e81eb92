"""Terminal configuration.

Configuration is plain constructor data; the CLI fills it from its
command-line flags.  There are no configuration files.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from pipeterm.utils.paths import normalize_to_slash

DEFAULT_MAX_HISTORY: int = 1000


@dataclass(frozen=True, slots=True)
class TerminalConfig:
    """Settings for one :class:`~pipeterm.terminal.Terminal`.

    Attributes
    ----------
    home_directory : str | None
        Target of ``~``.  Defaults to the user's home directory.
    working_directory : str | None
        Initial working directory.  Defaults to the home directory.
    max_history : int
        Oldest history entries are dropped beyond this many.
    register_builtins : bool
        Register the built-in commands (``echo``, ``cat``, ``grep``...).
    """

    home_directory: str | None = None
    working_directory: str | None = None
    max_history: int = DEFAULT_MAX_HISTORY
    register_builtins: bool = True

    def __post_init__(self) -> None:
        if self.max_history < 0:
            raise ValueError(f"max_history must not be negative, got {self.max_history}")

    def resolved_home(self) -> str:
        return normalize_to_slash(self.home_directory or os.path.expanduser("~"))

    def resolved_working_directory(self) -> str:
        return normalize_to_slash(self.working_directory or self.resolved_home())
