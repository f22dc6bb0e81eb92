"""pipeterm: embeddable shell-like command interpreter.

Parses a command line into a pipeline, binds each stage to a typed
command object and executes the stages with buffered text piping,
file redirection and cooperative cancellation.
"""

from pipeterm.version import __version__

__all__: list[str] = ["__version__"]
