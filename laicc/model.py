"""Syntax tree for `.laic` interface definitions."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Optional, Tuple, Union


class TensorElementType(enum.Enum):
    """Element type of a tensor field."""

    F32 = "f32"
    F64 = "f64"
    I8 = "i8"
    I16 = "i16"
    I32 = "i32"
    I64 = "i64"
    U8 = "u8"
    BOOL = "bool"

    def as_str(self) -> str:
        """The dtype name as written in metadata."""
        return self.value


class ScalarType(enum.Enum):
    """Built-in scalar field types."""

    STRING = "string"
    BYTES = "bytes"
    BOOL = "bool"
    I8 = "i8"
    I16 = "i16"
    I32 = "i32"
    I64 = "i64"
    U8 = "u8"
    F32 = "f32"
    F64 = "f64"


@dataclass(frozen=True)
class FixedDim:
    """A tensor dimension of known size."""

    size: int


@dataclass(frozen=True)
class DynamicDim:
    """A tensor dimension whose size is only known at run time."""

    name: Optional[str] = None


Dimension = Union[FixedDim, DynamicDim]


@dataclass(frozen=True)
class ListType:
    """`list<T>`."""

    element: "LaicType"


@dataclass(frozen=True)
class OptionalType:
    """`optional<T>`."""

    inner: "LaicType"


@dataclass(frozen=True)
class MapType:
    """`map<K, V>`."""

    key: "LaicType"
    value: "LaicType"


@dataclass(frozen=True)
class TensorType:
    """`tensor<dtype>[dims]`."""

    dtype: TensorElementType
    dims: Tuple[Dimension, ...] = ()


LaicType = Union[ScalarType, ListType, OptionalType, MapType, TensorType]

# Default values are plain Python values: str, int, float or bool.
Literal = Union[str, bool, int, float]


@dataclass(frozen=True)
class FieldDef:
    """A named, typed field with an optional default value."""

    name: str
    ty: LaicType
    default: Optional[Literal] = None


@dataclass(frozen=True)
class StructDef:
    """An input or output struct of a skill."""

    name: str
    fields: Tuple[FieldDef, ...] = ()


@dataclass(frozen=True)
class ErrorVariant:
    """A named error code of a skill."""

    name: str
    code: int


@dataclass(frozen=True)
class SkillDef:
    """A skill contract: identifier, input, output and error codes."""

    name: str
    id: str
    input: StructDef
    output: StructDef
    errors: Tuple[ErrorVariant, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class LaicFile:
    """A whole `.laic` file."""

    version: str
    skills: Tuple[SkillDef, ...] = ()