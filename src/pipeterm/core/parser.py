"""Turn a command line into a :class:`~pipeterm.core.models.ParsedPipeline`.

Grammar::

    pipeline  := stage ( "|" stage )*
    stage     := NAME ( option | positional | redirect )*
    option    := "--" LONG [ "=" VALUE | VALUE ]
               | "-" SHORTS [ "=" VALUE | VALUE ]
    redirect  := ( "<" | ">" | ">>" ) PATH

Option values written after a space are attached *tentatively*: the
following word is taken unless it starts with ``-``.  The binder hands
such a word back as a positional argument when the option turns out to
be a boolean flag.

Duplicate redirections and a ``<`` on a later stage are accepted here
and counted; the binder rejects them with the command's help text.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass, field

from pipeterm.core.models import (
    ParsedCommand,
    ParsedOptionOccurrence,
    ParsedPipeline,
    ParsedRedirections,
    RedirectMode,
)
from pipeterm.core.tokenizer import Token, TokenKind, Tokenizer
from pipeterm.exceptions import ParseError

_NUMBER = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)$")

_REDIRECT_KINDS: frozenset[TokenKind] = frozenset(
    {TokenKind.REDIRECT_IN, TokenKind.REDIRECT_OUT, TokenKind.REDIRECT_APPEND}
)


@dataclass(slots=True)
class _StageBuilder:
    """Mutable accumulator for one stage while its tokens are consumed."""

    name: str | None = None
    options: list[ParsedOptionOccurrence] = field(default_factory=list)
    positional: list[str] = field(default_factory=list)
    after_end_of_options: bool = False
    stdin_path: str | None = None
    stdout_path: str | None = None
    stdout_mode: RedirectMode = RedirectMode.NONE
    stdin_count: int = 0
    stdout_count: int = 0

    def build(self) -> ParsedCommand:
        if self.name is None:
            raise ParseError("Command name is missing")
        return ParsedCommand(
            name=self.name,
            options=tuple(self.options),
            positional_arguments=tuple(self.positional),
            redirections=ParsedRedirections(
                stdin_path=self.stdin_path,
                stdout_path=self.stdout_path,
                stdout_mode=self.stdout_mode,
                stdin_count=self.stdin_count,
                stdout_count=self.stdout_count,
            ),
        )


class Parser:
    """Parse command lines into pipelines.

    Parameters
    ----------
    tokenizer:
        Optional tokenizer; a default :class:`Tokenizer` is used otherwise.
    """

    def __init__(self, tokenizer: Tokenizer | None = None) -> None:
        self._tokenizer: Tokenizer = tokenizer or Tokenizer()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def parse(self, text: str) -> ParsedPipeline:
        """Parse *text*.  Blank input yields an empty pipeline.

        Raises
        ------
        ParseError
            On unterminated quotes, dangling redirections, empty stages
            or a pipe after a stdout redirection.
        """
        if not text or text.isspace():
            return ParsedPipeline()
        return self.parse_tokens(self._tokenizer.tokenize(text))

    def parse_tokens(self, tokens: Sequence[Token]) -> ParsedPipeline:
        """Parse an already tokenized line."""
        if not tokens:
            return ParsedPipeline()

        commands: list[ParsedCommand] = []
        stage: list[Token] = []

        for token in tokens:
            if token.kind is not TokenKind.PIPE:
                stage.append(token)
                continue

            if not stage:
                raise ParseError("Empty command before pipe", fragment="|", position=token.span.start)
            command = self._parse_stage(stage)
            if command.redirections.stdout_mode is not RedirectMode.NONE:
                raise ParseError(
                    "Cannot use pipe after stdout redirection (>)",
                    fragment="|",
                    position=token.span.start,
                )
            commands.append(command)
            stage = []

        if not stage:
            last = tokens[-1]
            raise ParseError("Empty command after pipe", fragment="|", position=last.span.start)
        commands.append(self._parse_stage(stage))

        return ParsedPipeline(commands=tuple(commands))

    # ------------------------------------------------------------------
    # Stage parsing
    # ------------------------------------------------------------------

    def _parse_stage(self, tokens: Sequence[Token]) -> ParsedCommand:
        builder = _StageBuilder()
        i = 0
        while i < len(tokens):
            i = self._consume(tokens, i, builder)
        return builder.build()

    def _consume(self, tokens: Sequence[Token], i: int, builder: _StageBuilder) -> int:
        """Consume the token at *i* (and any value it takes); return the next index."""
        token = tokens[i]

        if token.kind in _REDIRECT_KINDS:
            path = self._redirect_path(tokens, i)
            if token.kind is TokenKind.REDIRECT_IN:
                builder.stdin_path = path
                builder.stdin_count += 1
            else:
                builder.stdout_path = path
                builder.stdout_mode = (
                    RedirectMode.APPEND
                    if token.kind is TokenKind.REDIRECT_APPEND
                    else RedirectMode.OVERWRITE
                )
                builder.stdout_count += 1
            return i + 2

        if token.kind is TokenKind.END_OF_OPTIONS:
            builder.after_end_of_options = True
            return i + 1

        # Only words remain.
        if builder.name is None:
            builder.name = token.value
            return i + 1

        if builder.after_end_of_options:
            builder.positional.append(token.value)
            return i + 1

        if token.value.startswith("--"):
            return self._long_option(tokens, i, builder)

        if token.value.startswith("-") and len(token.value) > 1 and not _NUMBER.match(token.value):
            return self._short_options(tokens, i, builder)

        builder.positional.append(token.value)
        return i + 1

    @staticmethod
    def _redirect_path(tokens: Sequence[Token], i: int) -> str:
        operator = tokens[i]
        if i + 1 >= len(tokens) or not tokens[i + 1].is_word:
            raise ParseError(
                f"Expected file path after {operator.value}",
                fragment=operator.value,
                position=operator.span.start,
            )
        return tokens[i + 1].value

    # ------------------------------------------------------------------
    # Options
    # ------------------------------------------------------------------

    def _long_option(self, tokens: Sequence[Token], i: int, builder: _StageBuilder) -> int:
        token = tokens[i]
        body = token.value[2:]
        name, sep, raw_value = body.partition("=")

        if sep:
            builder.options.append(
                ParsedOptionOccurrence(name, True, raw_value, True, token.quoted)
            )
            return i + 1

        following = self._tentative_value(tokens, i + 1)
        if following is not None:
            builder.options.append(
                ParsedOptionOccurrence(
                    name, True, following.value, True, following.quoted, space_separated=True
                )
            )
            return i + 2

        builder.options.append(ParsedOptionOccurrence(name, True))
        return i + 1

    def _short_options(self, tokens: Sequence[Token], i: int, builder: _StageBuilder) -> int:
        token = tokens[i]
        body = token.value[1:]
        names, sep, raw_value = body.partition("=")

        if sep:
            if not names:
                raise ParseError(
                    "Invalid option format: -=",
                    fragment=token.value,
                    position=token.span.start,
                )
            # -abc=value: only the last short option receives the value.
            builder.options.extend(ParsedOptionOccurrence(n, False) for n in names[:-1])
            builder.options.append(
                ParsedOptionOccurrence(names[-1], False, raw_value, True, token.quoted)
            )
            return i + 1

        if len(names) == 1:
            following = self._tentative_value(tokens, i + 1)
            if following is not None:
                builder.options.append(
                    ParsedOptionOccurrence(
                        names, False, following.value, True, following.quoted, space_separated=True
                    )
                )
                return i + 2

        builder.options.extend(ParsedOptionOccurrence(n, False) for n in names)
        return i + 1

    @staticmethod
    def _tentative_value(tokens: Sequence[Token], i: int) -> Token | None:
        """Return the word at *i* if it may serve as an option value."""
        if i >= len(tokens):
            return None
        candidate = tokens[i]
        if candidate.is_word and not candidate.value.startswith("-"):
            return candidate
        return None
