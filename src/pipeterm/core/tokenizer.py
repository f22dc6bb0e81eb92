"""Split a command line into words and operator tokens.

Quoting rules
-------------
* Whitespace separates words; ``|``, ``<``, ``>`` and ``>>`` are
  operators and also terminate a word.
* ``'single'`` quotes keep everything literally.
* ``"double"`` quotes keep whitespace; only ``\\"`` and ``\\\\`` are
  escapes inside them, any other backslash is literal.
* Outside quotes a backslash escapes the next character.
* A word containing any quoted span is flagged ``quoted``.
* An unquoted bare ``--`` is the end-of-options marker.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pipeterm.exceptions import ParseError

_OPERATOR_CHARS: frozenset[str] = frozenset("|<>")


class TokenKind(Enum):
    """Kinds of token produced by :class:`Tokenizer`."""

    WORD = "word"
    PIPE = "|"
    REDIRECT_IN = "<"
    REDIRECT_OUT = ">"
    REDIRECT_APPEND = ">>"
    END_OF_OPTIONS = "--"


@dataclass(frozen=True, slots=True)
class SourceSpan:
    """Half-open ``[start, end)`` range in the input line."""

    start: int
    length: int

    @property
    def end(self) -> int:
        return self.start + self.length

    def __str__(self) -> str:
        return f"[{self.start}..{self.end})"


@dataclass(frozen=True, slots=True)
class Token:
    """A single token; ``value`` is the unescaped text for words."""

    kind: TokenKind
    value: str
    span: SourceSpan
    quoted: bool = False

    @property
    def is_word(self) -> bool:
        return self.kind is TokenKind.WORD

    def __str__(self) -> str:
        return f'{self.kind.name}: "{self.value}" {self.span}'


class Tokenizer:
    """Stateless tokenizer; one instance can be reused for any number of lines."""

    def tokenize(self, text: str) -> list[Token]:
        """Return the tokens of *text*.

        Raises
        ------
        ParseError
            On an unterminated quote or a trailing escape character.
        """
        tokens: list[Token] = []
        i = 0
        length = len(text)

        while i < length:
            char = text[i]

            if char.isspace():
                i += 1
                continue

            if char == "|":
                tokens.append(Token(TokenKind.PIPE, "|", SourceSpan(i, 1)))
                i += 1
            elif char == "<":
                tokens.append(Token(TokenKind.REDIRECT_IN, "<", SourceSpan(i, 1)))
                i += 1
            elif char == ">":
                if i + 1 < length and text[i + 1] == ">":
                    tokens.append(Token(TokenKind.REDIRECT_APPEND, ">>", SourceSpan(i, 2)))
                    i += 2
                else:
                    tokens.append(Token(TokenKind.REDIRECT_OUT, ">", SourceSpan(i, 1)))
                    i += 1
            else:
                token, i = self._read_word(text, i)
                tokens.append(token)

        return tokens

    # ------------------------------------------------------------------
    # Words
    # ------------------------------------------------------------------

    def _read_word(self, text: str, start: int) -> tuple[Token, int]:
        parts: list[str] = []
        quoted = False
        i = start
        length = len(text)

        while i < length:
            char = text[i]

            if char.isspace() or char in _OPERATOR_CHARS:
                break

            if char == "\\":
                if i + 1 >= length:
                    raise ParseError(
                        f"Escape character at end of input at position {i}",
                        fragment="\\",
                        position=i,
                    )
                parts.append(text[i + 1])
                i += 2
            elif char == '"':
                quoted = True
                i = self._read_double_quoted(text, i + 1, parts)
            elif char == "'":
                quoted = True
                i = self._read_single_quoted(text, i + 1, parts)
            else:
                parts.append(char)
                i += 1

        value = "".join(parts)
        span = SourceSpan(start, i - start)

        if value == "--" and not quoted:
            return Token(TokenKind.END_OF_OPTIONS, "--", span), i
        return Token(TokenKind.WORD, value, span, quoted), i

    @staticmethod
    def _read_double_quoted(text: str, start: int, parts: list[str]) -> int:
        """Consume up to and including the closing ``"``; return the next index."""
        i = start
        length = len(text)

        while i < length:
            char = text[i]
            if char == '"':
                return i + 1
            if char == "\\" and i + 1 < length and text[i + 1] in ('"', "\\"):
                parts.append(text[i + 1])
                i += 2
                continue
            parts.append(char)
            i += 1

        raise ParseError(
            f"Unclosed double quote starting at position {start - 1}",
            fragment=text[start - 1:],
            position=start - 1,
        )

    @staticmethod
    def _read_single_quoted(text: str, start: int, parts: list[str]) -> int:
        """Consume up to and including the closing ``'``; no escapes apply."""
        end = text.find("'", start)
        if end < 0:
            raise ParseError(
                f"Unclosed single quote starting at position {start - 1}",
                fragment=text[start - 1:],
                position=start - 1,
            )
        parts.append(text[start:end])
        return end + 1
