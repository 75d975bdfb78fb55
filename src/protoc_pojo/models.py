from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union


def simple_name(name: str) -> str:
    """Return the part of a dot-qualified name after the last '.'."""
    return name.rsplit(".", 1)[-1]


class ScalarType(Enum):
    DOUBLE = "double"
    FLOAT = "float"
    INT32 = "int32"
    INT64 = "int64"
    UINT32 = "uint32"
    UINT64 = "uint64"
    SINT32 = "sint32"
    SINT64 = "sint64"
    FIXED32 = "fixed32"
    FIXED64 = "fixed64"
    SFIXED32 = "sfixed32"
    SFIXED64 = "sfixed64"
    BOOL = "bool"
    STRING = "string"
    BYTES = "bytes"


@dataclass(frozen=True)
class Scalar:
    kind: ScalarType


@dataclass(frozen=True)
class Reference:
    """A message or enum type referenced by name, simple or dot-qualified."""

    name: str


FieldType = Union[Scalar, Reference]


@dataclass(frozen=True)
class Field:
    name: str
    type: FieldType
    tag: int


@dataclass(frozen=True)
class MessageType:
    name: str
    fields: Tuple[Field, ...] = ()

    @property
    def simple_name(self) -> str:
        return simple_name(self.name)


@dataclass(frozen=True)
class EnumValue:
    name: str
    number: int


@dataclass(frozen=True)
class EnumType:
    name: str
    values: Tuple[EnumValue, ...] = ()

    @property
    def simple_name(self) -> str:
        return simple_name(self.name)


TypeDeclaration = Union[MessageType, EnumType]


@dataclass(frozen=True)
class Schema:
    """A parsed .proto file: its package and every declaration, flattened.

    Nested messages and enums appear as independent entries whose names are
    qualified with the names of their enclosing messages.
    """

    package: Optional[str] = None
    types: Tuple[TypeDeclaration, ...] = ()
