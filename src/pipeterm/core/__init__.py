"""Core layer: parsing, binding and pipeline execution.

Rules
-----
* No ``print()`` calls.
* No direct filesystem access; redirections go through the
  :class:`~pipeterm.core.protocols.FileSystem` protocol.
* No imports from ``cli``, ``infra`` or ``builtins``.
* Every awaited stream operation honours a cancellation token.
"""

from pipeterm.core.binder import Binder
from pipeterm.core.cancellation import CancellationToken
from pipeterm.core.command import Command, CommandContext, CompletionContext
from pipeterm.core.executor import PipelineExecutor
from pipeterm.core.metadata import CommandMetadata
from pipeterm.core.models import (
    BoundCommand,
    BoundPipeline,
    ExecutionResult,
    ParsedCommand,
    ParsedOptionOccurrence,
    ParsedPipeline,
    ParsedRedirections,
    RedirectMode,
)
from pipeterm.core.options import OptionMetadata, OptionType, option
from pipeterm.core.parser import Parser
from pipeterm.core.protocols import (
    ClosableTextReader,
    ClosableTextWriter,
    FileSystem,
    TextReader,
    TextWriter,
)
from pipeterm.core.registry import CommandRegistry
from pipeterm.core.streams import (
    EmptyTextReader,
    ListTextReader,
    ListTextWriter,
    StringTextWriter,
)
from pipeterm.core.tokenizer import Token, TokenKind, Tokenizer

__all__: list[str] = [
    "Binder",
    "BoundCommand",
    "BoundPipeline",
    "CancellationToken",
    "ClosableTextReader",
    "ClosableTextWriter",
    "Command",
    "CommandContext",
    "CommandMetadata",
    "CommandRegistry",
    "CompletionContext",
    "EmptyTextReader",
    "ExecutionResult",
    "FileSystem",
    "ListTextReader",
    "ListTextWriter",
    "OptionMetadata",
    "OptionType",
    "ParsedCommand",
    "ParsedOptionOccurrence",
    "ParsedPipeline",
    "ParsedRedirections",
    "Parser",
    "PipelineExecutor",
    "RedirectMode",
    "StringTextWriter",
    "TextReader",
    "TextWriter",
    "Token",
    "TokenKind",
    "Tokenizer",
    "option",
]
