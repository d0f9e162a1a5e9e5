"""Mapping of LAIC types and literals onto TypeScript source and Arrow JS types."""

from __future__ import annotations

import math
from decimal import Decimal
from typing import Iterable

from ..errors import CodegenError
from ..model import (
    Dimension,
    FixedDim,
    LaicType,
    ListType,
    Literal,
    MapType,
    OptionalType,
    ScalarType,
    TensorType,
)

__all__ = [
    "ts_type",
    "ts_arrow_datatype",
    "literal_to_ts",
    "format_ts_dims",
    "escape_string_literal",
    "typescript_string_literal",
]

_TS_SCALARS = {
    ScalarType.STRING: "string",
    ScalarType.BYTES: "Uint8Array",
    ScalarType.BOOL: "boolean",
    ScalarType.I8: "number",
    ScalarType.I16: "number",
    ScalarType.I32: "number",
    ScalarType.I64: "bigint",
    ScalarType.U8: "number",
    ScalarType.F32: "number",
    ScalarType.F64: "number",
}

_ARROW_SCALARS = {
    ScalarType.STRING: "new arrow.Utf8()",
    ScalarType.BYTES: "new arrow.Binary()",
    ScalarType.BOOL: "new arrow.Bool()",
    ScalarType.I8: "new arrow.Int8()",
    ScalarType.I16: "new arrow.Int16()",
    ScalarType.I32: "new arrow.Int32()",
    ScalarType.I64: "new arrow.Int64()",
    ScalarType.U8: "new arrow.Uint8()",
    ScalarType.F32: "new arrow.Float32()",
    ScalarType.F64: "new arrow.Float64()",
}

_SIMPLE_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


def ts_type(ty: LaicType) -> str:
    """The TypeScript type annotation for a LAIC type."""
    match ty:
        case ScalarType():
            return _TS_SCALARS[ty]
        case TensorType():
            return "Uint8Array"
        case ListType(element=element):
            inner = ts_type(element)
            if "|" in inner or "<" in inner:
                return f"Array<{inner}>"
            return f"{inner}[]"
        case OptionalType(inner=inner):
            return f"{ts_type(inner)} | null"
        case MapType(key=key, value=value):
            return f"Map<{ts_type(key)}, {ts_type(value)}>"
    raise CodegenError(f"unsupported type: {ty!r}")


def ts_arrow_datatype(ty: LaicType) -> str:
    """The Arrow JS datatype constructor expression for a LAIC type."""
    match ty:
        case ScalarType():
            return _ARROW_SCALARS[ty]
        case TensorType():
            return "new arrow.Binary()"
        case ListType(element=element):
            nullable = "true" if isinstance(element, OptionalType) else "false"
            return (
                f'new arrow.List(new arrow.Field("item", '
                f"{ts_arrow_datatype(element)}, {nullable}))"
            )
        case OptionalType(inner=inner):
            return ts_arrow_datatype(inner)
        case MapType(key=key, value=value):
            # Arrow JS types `Map_` more strictly than the runtime accepts; the casts
            # stay confined to the generated datatype expression.
            return (
                'new arrow.Map_(new arrow.Field("entries", new arrow.Struct(['
                f'new arrow.Field("key", {ts_arrow_datatype(key)}, false) as any, '
                f'new arrow.Field("value", {ts_arrow_datatype(value)}, false) as any'
                "]) as any, false), false) as any"
            )
    raise CodegenError(f"unsupported type: {ty!r}")


def escape_string_literal(value: str) -> str:
    """Escape text for the body of a double-quoted TypeScript or Python string."""
    parts = []
    for char in value:
        escaped = _SIMPLE_ESCAPES.get(char)
        if escaped is not None:
            parts.append(escaped)
        elif ord(char) < 0x20 or ord(char) == 0x7F:
            parts.append(f"\\u{ord(char):04x}")
        else:
            parts.append(char)
    return "".join(parts)


def typescript_string_literal(value: str) -> str:
    """A double-quoted TypeScript string literal holding `value`."""
    return f'"{escape_string_literal(value)}"'


def _render_float(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    rendered = format(Decimal(repr(value)), "f")
    if "." in rendered:
        return rendered
    return f"{rendered}.0"


def literal_to_ts(value: Literal) -> str:
    """TypeScript source for a default value."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return typescript_string_literal(value)
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _render_float(value)
    raise CodegenError(f"unsupported literal: {value!r}")


def format_ts_dims(dims: Iterable[Dimension]) -> str:
    """Shape metadata such as `[768,0]`; dynamic dimensions are written as 0."""
    parts = [str(dim.size) if isinstance(dim, FixedDim) else "0" for dim in dims]
    return f"[{','.join(parts)}]"