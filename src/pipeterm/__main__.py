"""``python -m pipeterm``: same as the ``pipeterm`` console script."""

from __future__ import annotations

from pipeterm.cli.app import cli

if __name__ == "__main__":
    cli()
