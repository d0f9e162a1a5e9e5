"""Generate the `toIpc()` method of a TypeScript contract class."""

from __future__ import annotations

from typing import Iterable, List

from ..model import (
    Dimension,
    FieldDef,
    ListType,
    OptionalType,
    SkillDef,
    StructDef,
    TensorElementType,
    TensorType,
)
from .typescript_types import format_ts_dims, ts_arrow_datatype, typescript_string_literal

__all__ = ["generate_to_ipc"]


def generate_to_ipc(
    skill: SkillDef, struct: StructDef, direction: str, version: str
) -> str:
    """TypeScript source of `toIpc()` for one input or output class."""
    out: List[str] = ["  toIpc(): Uint8Array {\n", "    const schema = new arrow.Schema([\n"]
    out.extend(_schema_field(field) for field in struct.fields)
    out.append("    ], new Map([\n")
    out.append(f'      ["laic.skill_id", {typescript_string_literal(skill.id)}],\n')
    out.append(f'      ["laic.version", {typescript_string_literal(version)}],\n')
    out.append(f'      ["laic.direction", "{direction}"],\n')
    out.append("    ]));\n\n")

    out.append("    const data: Record<string, unknown[]> = {\n")
    out.extend(f'      "{field.name}": [this.{field.name}],\n' for field in struct.fields)
    out.append("    };\n\n")

    out.extend(
        [
            "    const columns: Record<string, arrow.Vector> = {};\n",
            "    for (const field of schema.fields) {\n",
            "      columns[field.name] = arrow.vectorFromArray(data[field.name], field.type);\n",
            "    }\n",
            # Arrow JS accepts this construction at run time; its typings are stricter.
            "    const table = new arrow.Table(schema, columns as any);\n",
            "    return arrow.tableToIPC(table);\n",
            "  }\n\n",
        ]
    )
    return "".join(out)


def _schema_field(field: FieldDef) -> str:
    ty = field.ty
    if isinstance(ty, TensorType):
        return _tensor_schema_field(field.name, "new arrow.Binary()", False, ty.dtype, ty.dims)
    if isinstance(ty, ListType) and isinstance(ty.element, TensorType):
        # Tensor metadata sits on the outer field so the whole list is checked at once.
        return _tensor_schema_field(
            field.name,
            'new arrow.List(new arrow.Field("item", new arrow.Binary(), false))',
            False,
            ty.element.dtype,
            ty.element.dims,
        )
    if isinstance(ty, OptionalType) and isinstance(ty.inner, TensorType):
        return _tensor_schema_field(
            field.name, "new arrow.Binary()", True, ty.inner.dtype, ty.inner.dims
        )
    nullable = "true" if isinstance(ty, OptionalType) else "false"
    return f'      new arrow.Field("{field.name}", {ts_arrow_datatype(ty)}, {nullable}),\n'


def _tensor_schema_field(
    field_name: str,
    arrow_type: str,
    nullable: bool,
    dtype: TensorElementType,
    dims: Iterable[Dimension],
) -> str:
    flag = "true" if nullable else "false"
    return (
        f'      new arrow.Field("{field_name}", {arrow_type}, {flag}, new Map([\n'
        f'        ["laic.tensor.dtype", "{dtype.as_str()}"],\n'
        f'        ["laic.tensor.shape", "{format_ts_dims(dims)}"],\n'
        '        ["laic.tensor.version", "1"],\n'
        "      ])),\n"
    )