"""Pure path helpers used to resolve redirection and command paths.

Every function here is a string transformation; nothing touches the
filesystem, so results are deterministic for a given input.
"""

from __future__ import annotations

import os
import posixpath
import re

_REPEATED_SLASHES = re.compile(r"/{2,}")


def normalize_to_slash(path: str) -> str:
    """Convert backslashes to ``/`` and collapse repeated slashes.

    A leading ``//`` is kept so UNC-style paths survive.
    """
    if not path:
        return path
    normalized = path.replace("\\", "/")
    if normalized.startswith("//"):
        return "//" + _REPEATED_SLASHES.sub("/", normalized[2:])
    return _REPEATED_SLASHES.sub("/", normalized)


def resolve_path(path: str, working_directory: str, home_directory: str) -> str:
    """Resolve *path* against the working and home directories.

    Rules
    -----
    * Empty input resolves to the working directory.
    * ``~`` is the home directory; ``~/rest`` is joined to it.
      ``~user`` is not supported and is treated as a relative path.
    * Absolute paths are kept as-is.
    * Everything else is joined to the working directory.

    ``.`` and ``..`` segments are collapsed and the result always uses
    forward slashes.
    """
    if not path:
        return normalize_to_slash(working_directory)

    path = normalize_to_slash(path)
    if path == "~":
        return normalize_to_slash(home_directory)
    if path.startswith("~/"):
        joined = posixpath.join(normalize_to_slash(home_directory), path[2:])
    elif _is_rooted(path):
        joined = path
    else:
        joined = posixpath.join(normalize_to_slash(working_directory), path)

    return normalize_to_slash(_collapse(joined))


def _is_rooted(path: str) -> bool:
    """Return ``True`` for ``/x``, ``//host/x`` and drive paths like ``C:/x``."""
    return path.startswith("/") or bool(re.match(r"^[A-Za-z]:/", path)) or os.path.isabs(path)


def _collapse(path: str) -> str:
    """Collapse ``.`` / ``..`` segments while preserving a drive prefix."""
    drive = ""
    match = re.match(r"^([A-Za-z]:)(/.*)$", path)
    if match:
        drive, path = match.group(1), match.group(2)
    collapsed = posixpath.normpath(path)
    # normpath keeps a leading "//" (POSIX) and collapses "///" to "/".
    return drive + collapsed
