"""Generate the static `fromIpc()` method of a TypeScript contract class."""

from __future__ import annotations

from typing import Iterable, List

from ..model import (
    Dimension,
    FieldDef,
    ListType,
    MapType,
    OptionalType,
    StructDef,
    TensorElementType,
    TensorType,
)
from .typescript_types import format_ts_dims, literal_to_ts, ts_type, typescript_string_literal

__all__ = ["generate_from_ipc"]


def generate_from_ipc(
    struct: StructDef, skill_id: str, version: str, direction: str
) -> str:
    """TypeScript source of `fromIpc()`, which re-asserts the contract on decode."""
    out: List[str] = [
        f"  static fromIpc(data: Uint8Array): {struct.name} {{\n",
        "    const table = arrow.tableFromIPC(data);\n",
        # Contracts carry exactly one record, in exactly one batch.
        "    if (table.numRows === 0) {\n",
        '      throw new Error("cardinality error: RecordBatch has 0 rows, expected 1");\n',
        "    }\n",
        "    if (table.numRows > 1) {\n",
        "      throw new Error(`cardinality error: RecordBatch has ${table.numRows} rows, expected 1`);\n",
        "    }\n",
        "    if (table.batches.length > 1) {\n",
        '      throw new Error("cardinality error: stream contains more than one RecordBatch");\n',
        "    }\n",
        "    const batch = table.batches[0]!;\n",
        "    const schemaMetadata = laicSchemaMetadata(table.schema);\n",
        f'    laicAssertMetadata(schemaMetadata, "laic.skill_id", {typescript_string_literal(skill_id)});\n',
        f'    laicAssertMetadata(schemaMetadata, "laic.version", {typescript_string_literal(version)});\n',
        f'    laicAssertMetadata(schemaMetadata, "laic.direction", "{direction}");\n\n',
    ]
    out.extend(_field_extraction(field) for field in struct.fields)
    out.append(f"    return new {struct.name}(\n")
    out.extend(f"      {field.name},\n" for field in struct.fields)
    out.append("    );\n")
    out.append("  }\n")
    return "".join(out)


def _field_extraction(field: FieldDef) -> str:
    name = field.name
    ty = field.ty
    if isinstance(ty, TensorType):
        # dtype and shape metadata are part of the wire contract.
        return _tensor_assertion(name, ty.dtype, ty.dims) + (
            f'    const {name} = batch.getChild("{name}")!.get(0) as Uint8Array;\n'
        )
    if isinstance(ty, ListType):
        element = ty.element
        if isinstance(element, TensorType):
            return _tensor_assertion(name, element.dtype, element.dims) + (
                f'    const {name} = Array.from(batch.getChild("{name}")!.get(0) '
                "as Iterable<Uint8Array>);\n"
            )
        return (
            f'    const {name} = Array.from(batch.getChild("{name}")!.get(0) '
            f"as Iterable<{ts_type(element)}>);\n"
        )
    if isinstance(ty, OptionalType):
        inner = ty.inner
        prefix = ""
        cast = ts_type(inner)
        if isinstance(inner, TensorType):
            # Metadata is checked before the null test, so a null row keeps the check.
            prefix = _tensor_assertion(name, inner.dtype, inner.dims)
            cast = "Uint8Array"
        return prefix + (
            f'    const {name}_column = batch.getChild("{name}")!;\n'
            f"    const {name} = {name}_column.isValid(0) ? "
            f"({name}_column.get(0) as {cast}) : null;\n"
        )
    if isinstance(ty, MapType):
        return (
            f'    const {name} = batch.getChild("{name}")!.get(0) '
            f"as Map<{ts_type(ty.key)}, {ts_type(ty.value)}>;\n"
        )
    if field.default is not None:
        return (
            f'    const {name}_column = batch.getChild("{name}");\n'
            f"    const {name} = {name}_column === null ? {literal_to_ts(field.default)} : "
            f"({name}_column.get(0) as {ts_type(ty)});\n"
        )
    return f'    const {name} = batch.getChild("{name}")!.get(0) as {ts_type(ty)};\n'


def _tensor_assertion(
    field_name: str, dtype: TensorElementType, dims: Iterable[Dimension]
) -> str:
    return (
        f"    const {field_name}_field = table.schema.fields.find("
        f'(candidate) => candidate.name === "{field_name}")!;\n'
        f'    laicAssertTensorMetadata({field_name}_field, "{field_name}", '
        f'"{dtype.as_str()}", {format_ts_dims(dims)});\n'
    )