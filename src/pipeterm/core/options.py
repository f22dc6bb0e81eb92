"""Declarative option descriptors for commands.

A command declares its options as class attributes::

    class GrepCommand(Command):
        name = "grep"
        pattern = option("pattern", "p", required=True, description="Regex pattern")
        ignore_case = option("ignorecase", "i", type=bool)

Each :func:`option` call creates an :class:`OptionSpec` descriptor.
At registration :class:`~pipeterm.core.metadata.CommandMetadata`
collects the descriptors once and freezes them into
:class:`OptionMetadata` records whose getter/setter closures address the
attribute directly, so binding never inspects the class again.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

from pipeterm.exceptions import RegistrationError


class OptionType(Enum):
    """Scalar value tags an option (or a list option's elements) may carry."""

    STRING = "string"
    INT = "int"
    FLOAT = "float"
    DOUBLE = "double"
    ENUM = "enum"
    BOOL = "bool"


_PYTHON_TYPES: dict[type, OptionType] = {
    str: OptionType.STRING,
    int: OptionType.INT,
    float: OptionType.FLOAT,
    bool: OptionType.BOOL,
}


def _resolve_type(value_type: Any) -> tuple[OptionType, type[Enum] | None]:
    """Map a declared ``type=`` to its tag and, for enums, the enum class."""
    if isinstance(value_type, OptionType):
        if value_type is OptionType.ENUM:
            raise RegistrationError(
                "OptionType.ENUM needs the enum class itself",
                hint="Pass type=MyEnum instead of type=OptionType.ENUM.",
            )
        return value_type, None
    if isinstance(value_type, type) and issubclass(value_type, Enum):
        return OptionType.ENUM, value_type
    # bool is checked by identity so it never degrades to int.
    tag = _PYTHON_TYPES.get(value_type)
    if tag is None:
        raise RegistrationError(f"unsupported option type: {value_type!r}")
    return tag, None


# ---------------------------------------------------------------------------
# Descriptor
# ---------------------------------------------------------------------------

class OptionSpec:
    """Class-level option declaration; also serves the instance value.

    Instance values live in the instance ``__dict__`` under the
    attribute name.  Unset options read back their default; list options
    default to a fresh empty list per instance.
    """

    def __init__(
        self,
        long_name: str | None = None,
        short_name: str | None = None,
        *,
        type: Any = str,
        multiple: bool = False,
        required: bool = False,
        description: str = "",
        default: Any = None,
    ) -> None:
        self.long_name: str | None = long_name
        self.short_name: str | None = short_name or None
        self.option_type, self.enum_type = _resolve_type(type)
        self.multiple: bool = multiple
        self.required: bool = required
        self.description: str = description
        self.default: Any = default
        self.attribute: str = ""

        if self.option_type is OptionType.BOOL and self.multiple:
            raise RegistrationError("list options cannot be boolean")
        if self.short_name is not None and len(self.short_name) != 1:
            raise RegistrationError(
                f"short option name must be a single character: {self.short_name!r}"
            )

    def __set_name__(self, owner: type, name: str) -> None:
        self.attribute = name
        if not self.long_name:
            self.long_name = name.replace("_", "-")

    def __get__(self, instance: object | None, owner: type | None = None) -> Any:
        if instance is None:
            return self
        try:
            return instance.__dict__[self.attribute]
        except KeyError:
            value = self.initial_value()
            if self.multiple:
                # Mutable default: keep it so in-place edits stick.
                instance.__dict__[self.attribute] = value
            return value

    def __set__(self, instance: object, value: Any) -> None:
        instance.__dict__[self.attribute] = value

    def initial_value(self) -> Any:
        if self.multiple:
            return list(self.default) if self.default is not None else []
        if self.default is None and self.option_type is OptionType.BOOL:
            return False
        return self.default

    def __repr__(self) -> str:
        return f"OptionSpec(--{self.long_name}, type={self.option_type.value})"


def option(
    long_name: str | None = None,
    short_name: str | None = None,
    *,
    type: Any = str,
    multiple: bool = False,
    required: bool = False,
    description: str = "",
    default: Any = None,
) -> Any:
    """Declare a command option.

    Parameters
    ----------
    long_name:
        Name used as ``--long-name``.  Defaults to the attribute name
        with underscores replaced by hyphens.
    short_name:
        Optional single-character name used as ``-s``.
    type:
        ``str``, ``int``, ``float``, ``bool``, an :class:`~enum.Enum`
        subclass, or an :class:`OptionType` tag such as
        ``OptionType.DOUBLE``.
    multiple:
        Accept a comma-separated list of *type* values.
    required:
        Binding fails when the option is absent.
    """
    return OptionSpec(
        long_name,
        short_name,
        type=type,
        multiple=multiple,
        required=required,
        description=description,
        default=default,
    )


# ---------------------------------------------------------------------------
# Frozen metadata
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class OptionMetadata:
    """Immutable view of one declared option, built at registration."""

    long_name: str
    short_name: str | None
    required: bool
    description: str
    option_type: OptionType
    is_list: bool
    attribute: str
    getter: Callable[[object], Any] = field(repr=False, compare=False)
    setter: Callable[[object, Any], None] = field(repr=False, compare=False)
    enum_type: type[Enum] | None = None
    enum_members: Mapping[str, Enum] = field(
        default_factory=lambda: MappingProxyType({}), repr=False, compare=False
    )
    """Lower-cased member name -> member, precomputed for enum options."""

    @property
    def is_bool(self) -> bool:
        return self.option_type is OptionType.BOOL and not self.is_list

    @property
    def type_name(self) -> str:
        """Friendly type label used in help text (``int``, ``list<enum>``...)."""
        scalar = self.option_type.value
        return f"list<{scalar}>" if self.is_list else scalar

    @classmethod
    def from_spec(cls, spec: OptionSpec) -> OptionMetadata:
        attribute = spec.attribute

        def getter(instance: object) -> Any:
            return getattr(instance, attribute)

        def setter(instance: object, value: Any) -> None:
            setattr(instance, attribute, value)

        members: Mapping[str, Enum] = MappingProxyType({})
        if spec.enum_type is not None:
            members = MappingProxyType(
                {member.name.lower(): member for member in spec.enum_type}
            )

        return cls(
            long_name=spec.long_name or attribute,
            short_name=spec.short_name,
            required=spec.required,
            description=spec.description,
            option_type=spec.option_type,
            is_list=spec.multiple,
            attribute=attribute,
            getter=getter,
            setter=setter,
            enum_type=spec.enum_type,
            enum_members=members,
        )
