from laicc.codegen.typescript_serialize import generate_to_ipc
from laicc.codegen.typescript_types import (
    format_ts_dims,
    ts_arrow_datatype,
    typescript_string_literal,
)
from laicc.model import (
    DynamicDim,
    FieldDef,
    FixedDim,
    ListType,
    OptionalType,
    ScalarType,
    SkillDef,
    StructDef,
    TensorElementType,
    TensorType,
)


def _skill(fields, skill_id="echo"):
    struct = StructDef("EchoInput", tuple(fields))
    out = StructDef("EchoOutput", (FieldDef("y", ScalarType.I32),))
    return SkillDef("echo", skill_id, struct, out), struct


def test_method_frame():
    skill, struct = _skill([FieldDef("text", ScalarType.STRING)])
    code = generate_to_ipc(skill, struct, "input", "1.0.0")
    assert code.startswith("  toIpc(): Uint8Array {\n")
    assert code.endswith("    return arrow.tableToIPC(table);\n  }\n\n")


def test_scalar_field_schema_and_data():
    skill, struct = _skill(
        [FieldDef("text", ScalarType.STRING), FieldDef("maybe", OptionalType(ScalarType.I32))]
    )
    code = generate_to_ipc(skill, struct, "input", "1.0.0")
    assert (
        f'      new arrow.Field("text", {ts_arrow_datatype(ScalarType.STRING)}, false),\n'
        in code
    )
    assert (
        f'      new arrow.Field("maybe", {ts_arrow_datatype(ScalarType.I32)}, true),\n'
        in code
    )
    assert '      "text": [this.text],\n' in code
    assert '      "maybe": [this.maybe],\n' in code


def test_schema_metadata():
    skill, struct = _skill([FieldDef("x", ScalarType.I8)], skill_id='we"ird')
    code = generate_to_ipc(skill, struct, "output", "2.0")
    assert f'["laic.skill_id", {typescript_string_literal(skill.id)}]' in code
    assert f'["laic.version", {typescript_string_literal("2.0")}]' in code
    assert '["laic.direction", "output"]' in code


def test_tensor_field_metadata():
    dims = (DynamicDim(), FixedDim(768))
    skill, struct = _skill([FieldDef("emb", TensorType(TensorElementType.F32, dims))])
    code = generate_to_ipc(skill, struct, "input", "1")
    assert '      new arrow.Field("emb", new arrow.Binary(), false, new Map([\n' in code
    assert '["laic.tensor.dtype", "f32"]' in code
    assert f'["laic.tensor.shape", "{format_ts_dims(dims)}"]' in code
    assert '["laic.tensor.version", "1"]' in code


def test_list_and_optional_tensor_fields():
    tensor = TensorType(TensorElementType.I8, (FixedDim(4),))
    skill, struct = _skill(
        [FieldDef("many", ListType(tensor)), FieldDef("one", OptionalType(tensor))]
    )
    code = generate_to_ipc(skill, struct, "input", "1")
    assert (
        'new arrow.Field("many", new arrow.List(new arrow.Field("item", '
        "new arrow.Binary(), false)), false, new Map([" in code
    )
    assert 'new arrow.Field("one", new arrow.Binary(), true, new Map([' in code
    assert code.count('["laic.tensor.dtype", "i8"]') == 2


def test_fields_keep_declaration_order():
    skill, struct = _skill(
        [FieldDef("b", ScalarType.BOOL), FieldDef("a", ScalarType.F64)]
    )
    code = generate_to_ipc(skill, struct, "input", "1")
    assert code.index('new arrow.Field("b"') < code.index('new arrow.Field("a"')
    assert code.index('"b": [this.b]') < code.index('"a": [this.a]')