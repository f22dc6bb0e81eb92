"""Infrastructure layer: operating-system integration.

This layer owns every file handle the interpreter opens.  Raw
``OSError`` instances are left to the caller (the executor turns them
into a runtime-error classification).

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
* Must satisfy the protocols in :mod:`pipeterm.core.protocols`.
"""

from pipeterm.infra.file_streams import FileTextReader, FileTextWriter, LocalFileSystem

__all__: list[str] = ["FileTextReader", "FileTextWriter", "LocalFileSystem"]
