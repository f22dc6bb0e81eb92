"""CLI layer: argument parsing, the interactive loop, and error boundary.

This package is the outermost layer of the application.  It may import
from ``core``, ``infra``, ``builtins`` and ``utils``, but no other layer
may import from ``cli``.
"""
