"""Mapping of LAIC types and literals onto Rust source and Arrow names."""

from __future__ import annotations

import math
from decimal import Decimal

from ..errors import CodegenError
from ..model import (
    LaicType,
    ListType,
    Literal,
    MapType,
    OptionalType,
    ScalarType,
    TensorType,
)

__all__ = [
    "rust_type",
    "arrow_datatype",
    "arrow_array_type",
    "arrow_builder_type",
    "needs_deref",
    "literal_to_rust",
    "rust_string_literal",
]

_RUST_SCALARS = {
    ScalarType.STRING: "String",
    ScalarType.BYTES: "Vec<u8>",
    ScalarType.BOOL: "bool",
    ScalarType.I8: "i8",
    ScalarType.I16: "i16",
    ScalarType.I32: "i32",
    ScalarType.I64: "i64",
    ScalarType.U8: "u8",
    ScalarType.F32: "f32",
    ScalarType.F64: "f64",
}

_ARROW_DATATYPES = {
    ScalarType.STRING: "DataType::Utf8",
    ScalarType.BYTES: "DataType::Binary",
    ScalarType.BOOL: "DataType::Boolean",
    ScalarType.I8: "DataType::Int8",
    ScalarType.I16: "DataType::Int16",
    ScalarType.I32: "DataType::Int32",
    ScalarType.I64: "DataType::Int64",
    ScalarType.U8: "DataType::UInt8",
    ScalarType.F32: "DataType::Float32",
    ScalarType.F64: "DataType::Float64",
}

_ARRAY_TYPES = {
    ScalarType.STRING: "StringArray",
    ScalarType.BYTES: "BinaryArray",
    ScalarType.BOOL: "BooleanArray",
    ScalarType.I8: "Int8Array",
    ScalarType.I16: "Int16Array",
    ScalarType.I32: "Int32Array",
    ScalarType.I64: "Int64Array",
    ScalarType.U8: "UInt8Array",
    ScalarType.F32: "Float32Array",
    ScalarType.F64: "Float64Array",
}

_BUILDER_TYPES = {
    ScalarType.STRING: "StringBuilder",
    ScalarType.BYTES: "BinaryBuilder",
    ScalarType.BOOL: "BooleanBuilder",
    ScalarType.I8: "Int8Builder",
    ScalarType.I16: "Int16Builder",
    ScalarType.I32: "Int32Builder",
    ScalarType.I64: "Int64Builder",
    ScalarType.U8: "UInt8Builder",
    ScalarType.F32: "Float32Builder",
    ScalarType.F64: "Float64Builder",
}

_SIMPLE_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\0": "\\0",
}


def rust_type(ty: LaicType) -> str:
    """The Rust type a field of this LAIC type is declared with."""
    match ty:
        case ScalarType():
            return _RUST_SCALARS[ty]
        case TensorType():
            return "Vec<u8>"
        case ListType(element=element):
            return f"Vec<{rust_type(element)}>"
        case OptionalType(inner=inner):
            return f"Option<{rust_type(inner)}>"
        case MapType(key=key, value=value):
            return f"HashMap<{rust_type(key)}, {rust_type(value)}>"
    raise CodegenError(f"unsupported type: {ty!r}")


def arrow_datatype(ty: LaicType) -> str:
    """The Rust expression that builds the Arrow `DataType` for this type."""
    match ty:
        case ScalarType():
            return _ARROW_DATATYPES[ty]
        case TensorType():
            return "DataType::Binary"
        case ListType(element=element):
            # ListBuilder always produces a nullable inner field.
            return (
                'DataType::List(Arc::new(Field::new("item", '
                f"{arrow_datatype(element)}, true)))"
            )
        case OptionalType(inner=inner):
            return arrow_datatype(inner)
        case MapType(key=key, value=value):
            # MapBuilder names its fields "keys"/"values", with nullable values.
            return (
                'DataType::Map(Arc::new(Field::new("entries", '
                "DataType::Struct(Fields::from(vec!["
                f'Field::new("keys", {arrow_datatype(key)}, false), '
                f'Field::new("values", {arrow_datatype(value)}, true)'
                "])), false)), false)"
            )
    raise CodegenError(f"unsupported type: {ty!r}")


def arrow_array_type(ty: LaicType) -> str:
    """The Arrow array type name for a leaf type, e.g. `StringArray`."""
    if isinstance(ty, TensorType):
        return "BinaryArray"
    if isinstance(ty, ScalarType):
        return _ARRAY_TYPES[ty]
    raise CodegenError(f"arrow_array_type called with unsupported type: {ty!r}")


def arrow_builder_type(ty: LaicType) -> str:
    """The Arrow builder type name for a leaf type, e.g. `StringBuilder`."""
    if isinstance(ty, TensorType):
        return "BinaryBuilder"
    if isinstance(ty, ScalarType):
        return _BUILDER_TYPES[ty]
    raise CodegenError(f"arrow_builder_type called with unsupported type: {ty!r}")


def needs_deref(ty: LaicType) -> bool:
    """Whether a borrowed value of this type needs `*` before appending to a builder."""
    if isinstance(ty, TensorType):
        return False
    return ty not in (ScalarType.STRING, ScalarType.BYTES)


def _escape_body(value: str) -> str:
    parts = []
    for char in value:
        escaped = _SIMPLE_ESCAPES.get(char)
        if escaped is not None:
            parts.append(escaped)
        elif ord(char) < 0x20 or ord(char) == 0x7F:
            parts.append(f"\\u{{{ord(char):x}}}")
        else:
            parts.append(char)
    return "".join(parts)


def rust_string_literal(value: str) -> str:
    """A quoted Rust string literal holding `value`."""
    return f'"{_escape_body(value)}"'


def _render_float(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    rendered = format(Decimal(repr(value)), "f")
    if "." in rendered:
        return rendered
    return f"{rendered}.0"


def literal_to_rust(value: Literal) -> str:
    """Rust source for a default value."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return f'"{_escape_body(value)}".to_string()'
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _render_float(value)
    raise CodegenError(f"unsupported literal: {value!r}")