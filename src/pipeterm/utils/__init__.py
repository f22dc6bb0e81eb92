"""Shared utilities: exit classification and path helpers.

Rules
-----
* Pure functions and constants only.
* Never touches the filesystem.
* May be imported from every other layer.
"""

from pipeterm.utils.exit_code import ExitCode, is_success
from pipeterm.utils.paths import normalize_to_slash, resolve_path

__all__: list[str] = ["ExitCode", "is_success", "normalize_to_slash", "resolve_path"]
