from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


@dataclass(frozen=True)
class FundamentalType:
    name: str


@dataclass(frozen=True)
class UserType:
    name: str


Type = FundamentalType | UserType


@dataclass(frozen=True)
class NormalPointer:
    text: str = "*"


@dataclass(frozen=True)
class DoublePointer:
    text: str = "**"


Pointer = NormalPointer | DoublePointer


@dataclass(frozen=True)
class OpaqueType:
    name: str


@dataclass(frozen=True)
class Constant:
    name: str
    value: str


@dataclass(frozen=True)
class Flag:
    name: str
    value: str


@dataclass(frozen=True)
class Flags:
    flags_type: Type
    name: str
    flags: tuple[Flag, ...] = ()


@dataclass(frozen=True)
class Enumerator:
    name: str
    value: Optional[str] = None


@dataclass(frozen=True)
class Enumeration:
    name: str
    enumerators: tuple[Enumerator, ...] = ()


@dataclass(frozen=True)
class Field:
    field_type: Type
    name: str
    as_const: Optional[str] = None
    as_array: Optional[str] = None
    pointer: Optional[Pointer] = None


@dataclass(frozen=True)
class Union:
    fields: tuple[Field, ...] = ()


@dataclass(frozen=True)
class Structure:
    name: str
    fields: tuple[Field, ...] = ()
    union: Optional[Union] = None


@dataclass(frozen=True)
class Argument:
    argument_type: Type
    name: str
    as_const: Optional[str] = None
    pointer: Optional[Pointer] = None


@dataclass(frozen=True)
class Function:
    return_type: Type
    name: str
    arguments: tuple[Argument, ...] = ()


@dataclass(frozen=True)
class Callback:
    return_type: Type
    name: str
    arguments: tuple[Argument, ...] = ()
    pointer: Optional[Pointer] = None
    varargs: Optional[str] = None


@dataclass(frozen=True)
class TypeAlias:
    base_type: Type
    name: str


@dataclass(frozen=True)
class Preset:
    name: str
    values: tuple[str, ...] = ()


@dataclass(frozen=True)
class ErrorString:
    name: str
    string: str


class ParameterModifier(Enum):
    NONE = "none"
    OPTIONAL = "optional"
    OUTPUT = "output"


def modifier_key(function: str, argument: str) -> str:
    return f"{function}+{argument}"


@dataclass(frozen=True)
class Header:
    """Everything one header file contributes to the API."""

    opaque_types: tuple[OpaqueType, ...] = ()
    constants: tuple[Constant, ...] = ()
    flags: tuple[Flags, ...] = ()
    enumerations: tuple[Enumeration, ...] = ()
    structures: tuple[Structure, ...] = ()
    callbacks: tuple[Callback, ...] = ()
    type_aliases: tuple[TypeAlias, ...] = ()
    functions: tuple[Function, ...] = ()
    presets: tuple[Preset, ...] = ()
    errors: tuple[ErrorString, ...] = ()

    def is_empty(self) -> bool:
        return not any(getattr(self, name) for name in self.__dataclass_fields__)


@dataclass(frozen=True)
class FunctionGroup:
    link: str
    functions: tuple[Function, ...] = field(default_factory=tuple)
