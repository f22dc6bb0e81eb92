"""Conversion of raw option text into typed values.

Numbers are parsed locale-independently.  Failures raise
:class:`ValueError` with a message naming the attempted literal; the
binder wraps it into a :class:`~pipeterm.exceptions.BindError`.
"""

from __future__ import annotations

import re
from typing import Any

from pipeterm.core.options import OptionMetadata, OptionType

_INTEGER = re.compile(r"^\s*[+-]?\d+\s*$", re.ASCII)


def convert_scalar(raw: str, metadata: OptionMetadata) -> Any:
    """Convert one scalar *raw* value according to *metadata*'s type tag."""
    tag = metadata.option_type

    if tag is OptionType.STRING:
        return raw

    if tag is OptionType.INT:
        # int() would also accept "1_000" and non-ASCII digits.
        if not _INTEGER.match(raw):
            raise ValueError(f"Cannot convert '{raw}' to int")
        return int(raw)

    if tag in (OptionType.FLOAT, OptionType.DOUBLE):
        if "_" in raw or not raw.strip():
            raise ValueError(f"Cannot convert '{raw}' to {tag.value}")
        try:
            return float(raw)
        except ValueError:
            raise ValueError(f"Cannot convert '{raw}' to {tag.value}") from None

    if tag is OptionType.ENUM:
        member = metadata.enum_members.get(raw.strip().lower())
        if member is None:
            enum_name = metadata.enum_type.__name__ if metadata.enum_type else "enum"
            valid = ", ".join(m.name for m in metadata.enum_members.values())
            raise ValueError(f"Cannot convert '{raw}' to {enum_name}. Valid values: {valid}")
        return member

    raise ValueError(f"Unsupported option type: {tag.value}")


def convert_value(raw: str, metadata: OptionMetadata, *, quoted: bool = False) -> Any:
    """Convert *raw* for *metadata*, splitting list values on commas.

    A quoted list value is a single element and is never split.
    """
    if not metadata.is_list:
        return convert_scalar(raw, metadata)
    parts = [raw] if quoted else raw.split(",")
    return [convert_scalar(part, metadata) for part in parts]
