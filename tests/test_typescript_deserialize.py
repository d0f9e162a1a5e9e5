from laicc.codegen.typescript_deserialize import generate_from_ipc
from laicc.codegen.typescript_types import (
    format_ts_dims,
    literal_to_ts,
    ts_type,
    typescript_string_literal,
)
from laicc.model import (
    DynamicDim,
    FieldDef,
    FixedDim,
    ListType,
    MapType,
    OptionalType,
    ScalarType,
    StructDef,
    TensorElementType,
    TensorType,
)


def _gen(fields, skill_id="echo", version="1.0.0", direction="input"):
    return generate_from_ipc(StructDef("EchoInput", tuple(fields)), skill_id, version, direction)


def test_method_frame_and_cardinality_checks():
    code = _gen([FieldDef("text", ScalarType.STRING)])
    assert code.startswith("  static fromIpc(data: Uint8Array): EchoInput {\n")
    assert code.endswith("    );\n  }\n")
    assert "cardinality error: RecordBatch has 0 rows, expected 1" in code
    assert "cardinality error: stream contains more than one RecordBatch" in code


def test_schema_metadata_assertions():
    code = _gen([FieldDef("x", ScalarType.I32)], skill_id='a"b', version="9", direction="output")
    skill_literal = typescript_string_literal('a"b')
    version_literal = typescript_string_literal("9")
    assert (
        f'laicAssertMetadata(schemaMetadata, "laic.skill_id", {skill_literal});'
        in code
    )
    assert f'"laic.version", {version_literal});' in code
    assert 'laicAssertMetadata(schemaMetadata, "laic.direction", "output");' in code


def test_plain_scalar_extraction():
    code = _gen([FieldDef("text", ScalarType.STRING)])
    assert (
        f'    const text = batch.getChild("text")!.get(0) as {ts_type(ScalarType.STRING)};\n'
        in code
    )


def test_default_scalar_falls_back_when_column_missing():
    code = _gen([FieldDef("count", ScalarType.I64, 5)])
    assert '    const count_column = batch.getChild("count");\n' in code
    assert f"count_column === null ? {literal_to_ts(5)} :" in code


def test_optional_uses_validity():
    code = _gen([FieldDef("maybe", OptionalType(ScalarType.F32))])
    assert "maybe_column.isValid(0)" in code
    assert f"(maybe_column.get(0) as {ts_type(ScalarType.F32)}) : null;" in code


def test_tensor_fields_assert_metadata():
    dims = (FixedDim(2), DynamicDim("n"))
    tensor = TensorType(TensorElementType.U8, dims)
    code = _gen(
        [
            FieldDef("t", tensor),
            FieldDef("ts", ListType(TensorType(TensorElementType.U8, (FixedDim(3),)))),
            FieldDef("ot", OptionalType(TensorType(TensorElementType.BOOL, (FixedDim(1),)))),
        ]
    )
    assert f'laicAssertTensorMetadata(t_field, "t", "u8", {format_ts_dims(dims)});' in code
    assert 'laicAssertTensorMetadata(ts_field, "ts", "u8", [3]);' in code
    assert 'laicAssertTensorMetadata(ot_field, "ot", "bool", [1]);' in code
    assert "as Iterable<Uint8Array>" in code
    # The assertion precedes the value read.
    assert code.index("laicAssertTensorMetadata(ot_field") < code.index("ot_column.isValid(0)")


def test_list_and_map_extraction():
    code = _gen(
        [
            FieldDef("names", ListType(ScalarType.STRING)),
            FieldDef("table", MapType(ScalarType.STRING, ScalarType.BOOL)),
        ]
    )
    assert f"as Iterable<{ts_type(ScalarType.STRING)}>);" in code
    assert (
        f"as Map<{ts_type(ScalarType.STRING)}, {ts_type(ScalarType.BOOL)}>;" in code
    )


def test_constructor_arguments_follow_field_order():
    code = _gen([FieldDef("b", ScalarType.BOOL), FieldDef("a", ScalarType.I8)])
    tail = code[code.index("    return new EchoInput(\n"):]
    assert tail.index("      b,\n") < tail.index("      a,\n")