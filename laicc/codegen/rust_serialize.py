"""Generate the `to_arrow_ipc()` method of a Rust contract struct."""

from __future__ import annotations

from typing import Iterable, List

from ..model import (
    Dimension,
    FieldDef,
    FixedDim,
    LaicType,
    ListType,
    MapType,
    OptionalType,
    ScalarType,
    SkillDef,
    StructDef,
    TensorElementType,
    TensorType,
)
from .rust_types import arrow_builder_type, arrow_datatype, needs_deref, rust_string_literal

__all__ = ["generate_to_arrow_ipc", "format_dims_as_shape"]

_SCALAR_ARRAYS = {
    ScalarType.BOOL: "BooleanArray",
    ScalarType.I8: "Int8Array",
    ScalarType.I16: "Int16Array",
    ScalarType.I32: "Int32Array",
    ScalarType.I64: "Int64Array",
    ScalarType.U8: "UInt8Array",
    ScalarType.F32: "Float32Array",
    ScalarType.F64: "Float64Array",
}

_OPTIONAL_NUMERIC_ARRAYS = {
    ScalarType.I8: "Int8Array",
    ScalarType.I16: "Int16Array",
    ScalarType.I32: "Int32Array",
    ScalarType.I64: "Int64Array",
    ScalarType.U8: "UInt8Array",
    ScalarType.F32: "Float32Array",
    ScalarType.F64: "Float64Array",
}

_BORROWED = (ScalarType.STRING, ScalarType.BYTES)


def format_dims_as_shape(dims: Iterable[Dimension]) -> str:
    """Shape metadata such as `[768,0]`; dynamic dimensions are written as 0."""
    parts = [str(dim.size) if isinstance(dim, FixedDim) else "0" for dim in dims]
    return f"[{','.join(parts)}]"


def generate_to_arrow_ipc(
    skill: SkillDef, struct: StructDef, direction: str, version: str
) -> str:
    """Rust source of `to_arrow_ipc(&self)` for one input or output struct."""
    out: List[str] = [
        "    pub fn to_arrow_ipc(&self) -> Result<Vec<u8>, Box<dyn std::error::Error>> {\n",
        "        let schema = Schema::new_with_metadata(\n",
        "            vec![\n",
    ]
    out.extend(_schema_field(field) for field in struct.fields)
    out.append("            ],\n")

    out.append("            HashMap::from([\n")
    out.append(
        f'                ("laic.skill_id".into(), {rust_string_literal(skill.id)}.into()),\n'
    )
    out.append(
        f'                ("laic.version".into(), {rust_string_literal(version)}.into()),\n'
    )
    out.append(f'                ("laic.direction".into(), "{direction}".into()),\n')
    out.append("            ]),\n")
    out.append("        );\n")

    out.append("        let batch = RecordBatch::try_new(Arc::new(schema), vec![\n")
    for field in struct.fields:
        out.append(f"            {_column(field.name, field.ty)},\n")
    out.append("        ])?;\n")

    out.extend(
        [
            "        let mut buf = Vec::new();\n",
            "        {\n",
            "            let mut writer = arrow_ipc::writer::StreamWriter::try_new(&mut buf, &batch.schema())?;\n",
            "            writer.write(&batch)?;\n",
            "            writer.finish()?;\n",
            "        }\n",
            "        Ok(buf)\n",
            "    }\n",
        ]
    )
    return "".join(out)


def _schema_field(field: FieldDef) -> str:
    ty = field.ty
    if isinstance(ty, TensorType):
        return (
            f'                Field::new("{field.name}", DataType::Binary, false)\n'
            + _tensor_metadata(ty.dtype, ty.dims)
        )
    if isinstance(ty, ListType) and isinstance(ty.element, TensorType):
        # ListBuilder produces a nullable inner field; the schema must match.
        return (
            f'                Field::new("{field.name}", DataType::List(Arc::new('
            'Field::new("item", DataType::Binary, true))), false)\n'
            + _tensor_metadata(ty.element.dtype, ty.element.dims)
        )
    if isinstance(ty, OptionalType) and isinstance(ty.inner, TensorType):
        return (
            f'                Field::new("{field.name}", DataType::Binary, true)\n'
            + _tensor_metadata(ty.inner.dtype, ty.inner.dims)
        )
    nullable = "true" if isinstance(ty, OptionalType) else "false"
    return f'                Field::new("{field.name}", {arrow_datatype(ty)}, {nullable}),\n'


def _tensor_metadata(dtype: TensorElementType, dims: Iterable[Dimension]) -> str:
    return (
        "                    .with_metadata(HashMap::from([\n"
        f'                        ("laic.tensor.dtype".into(), "{dtype.as_str()}".into()),\n'
        f'                        ("laic.tensor.shape".into(), "{format_dims_as_shape(dims)}".into()),\n'
        '                        ("laic.tensor.version".into(), "1".into()),\n'
        "                    ])),\n"
    )


def _column(name: str, ty: LaicType) -> str:
    if ty is ScalarType.STRING:
        return f"Arc::new(StringArray::from(vec![self.{name}.as_str()]))"
    if ty is ScalarType.BYTES or isinstance(ty, TensorType):
        return f"Arc::new(BinaryArray::from(vec![self.{name}.as_slice()]))"
    if isinstance(ty, ScalarType):
        return f"Arc::new({_SCALAR_ARRAYS[ty]}::from(vec![self.{name}]))"
    if isinstance(ty, ListType):
        return _list_column(name, ty.element)
    if isinstance(ty, OptionalType):
        return _optional_column(name, ty.inner)
    return _map_column(name, ty)


def _list_block(builder: str, name: str, append: str) -> str:
    return (
        "{\n"
        f"            let mut builder = ListBuilder::new({builder}::new());\n"
        "            let values = builder.values();\n"
        f"            for item in &self.{name} {{\n"
        f"                {append}\n"
        "            }\n"
        "            builder.append(true);\n"
        "            Arc::new(builder.finish())\n"
        "        }"
    )


def _list_column(name: str, inner: LaicType) -> str:
    if isinstance(inner, OptionalType):
        opt_inner = inner.inner
        if opt_inner in _BORROWED:
            opt_append = "values.append_value(v)"
        else:
            deref = "*" if needs_deref(opt_inner) else ""
            opt_append = f"values.append_value({deref}v)"
        append = f"match item {{ Some(v) => {opt_append}, None => values.append_null() }};"
        return _list_block(arrow_builder_type(opt_inner), name, append)

    if inner in _BORROWED or isinstance(inner, TensorType):
        append = "values.append_value(item);"
    else:
        deref = "*" if needs_deref(inner) else ""
        append = f"values.append_value({deref}item);"
    return _list_block(arrow_builder_type(inner), name, append)


def _optional_column(name: str, inner: LaicType) -> str:
    if inner is ScalarType.STRING:
        return f"Arc::new(StringArray::from(vec![self.{name}.as_deref()]))"
    if inner is ScalarType.BYTES or isinstance(inner, TensorType):
        return f"Arc::new(BinaryArray::from(vec![self.{name}.as_deref()]))"
    if inner is ScalarType.BOOL:
        return f"Arc::new(BooleanArray::from(vec![self.{name}]))"
    if isinstance(inner, ListType):
        element = inner.element
        if element in _BORROWED:
            append = "values.append_value(item);"
        else:
            deref = "*" if needs_deref(element) else ""
            append = f"values.append_value({deref}item);"
        return (
            "{\n"
            f"            let mut builder = ListBuilder::new({arrow_builder_type(element)}::new());\n"
            f"            match &self.{name} {{\n"
            "                Some(list) => {\n"
            "                    let values = builder.values();\n"
            "                    for item in list {\n"
            f"                        {append}\n"
            "                    }\n"
            "                    builder.append(true);\n"
            "                }\n"
            "                None => builder.append(false),\n"
            "            }\n"
            "            Arc::new(builder.finish())\n"
            "        }"
        )
    array = _OPTIONAL_NUMERIC_ARRAYS.get(inner, "Int32Array")
    return f"Arc::new({array}::from(vec![self.{name}]))"


def _map_append(ty: LaicType, var: str) -> str:
    if ty in _BORROWED:
        return f"append_value({var})"
    return f"append_value(*{var})"


def _map_column(name: str, ty: MapType) -> str:
    key_builder = arrow_builder_type(ty.key)
    value_builder = arrow_builder_type(ty.value)
    return (
        "{\n"
        f"            let mut builder = MapBuilder::new(None, {key_builder}::new(), {value_builder}::new());\n"
        f"            for (k, v) in &self.{name} {{\n"
        f"                builder.keys().{_map_append(ty.key, 'k')};\n"
        f"                builder.values().{_map_append(ty.value, 'v')};\n"
        "            }\n"
        "            builder.append(true).map_err(|e| Box::new(e) as Box<dyn std::error::Error>)?;\n"
        "            Arc::new(builder.finish())\n"
        "        }"
    )