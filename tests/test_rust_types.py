import pytest

from laicc.codegen.rust_types import (
    arrow_array_type,
    arrow_builder_type,
    arrow_datatype,
    literal_to_rust,
    needs_deref,
    rust_string_literal,
    rust_type,
)
from laicc.errors import CodegenError
from laicc.model import (
    FixedDim,
    ListType,
    MapType,
    OptionalType,
    ScalarType,
    TensorElementType,
    TensorType,
)


def test_scalar_rust_types():
    assert rust_type(ScalarType.STRING) == "String"
    assert rust_type(ScalarType.I32) == "i32"
    assert rust_type(ScalarType.F64) == "f64"
    assert rust_type(ScalarType.BYTES) == "Vec<u8>"


def test_container_rust_types():
    assert rust_type(ListType(ScalarType.STRING)) == "Vec<String>"
    assert rust_type(OptionalType(ScalarType.I32)) == "Option<i32>"
    assert (
        rust_type(MapType(ScalarType.STRING, ScalarType.F64))
        == "HashMap<String, f64>"
    )


def test_tensor_rust_type():
    ty = TensorType(TensorElementType.F32, (FixedDim(768),))
    assert rust_type(ty) == "Vec<u8>"


def test_scalar_arrow_datatypes():
    assert arrow_datatype(ScalarType.STRING) == "DataType::Utf8"
    assert arrow_datatype(ScalarType.BOOL) == "DataType::Boolean"
    assert arrow_datatype(ScalarType.I32) == "DataType::Int32"


def test_list_arrow_datatype_nullable_item():
    assert (
        arrow_datatype(ListType(ScalarType.I32))
        == 'DataType::List(Arc::new(Field::new("item", DataType::Int32, true)))'
    )


def test_optional_arrow_datatype_is_inner():
    assert arrow_datatype(OptionalType(ScalarType.U8)) == arrow_datatype(ScalarType.U8)


def test_map_arrow_datatype():
    expected = (
        'DataType::Map(Arc::new(Field::new("entries", DataType::Struct(Fields::from(vec!['
        'Field::new("keys", DataType::Utf8, false), '
        'Field::new("values", DataType::Float64, true)'
        "])), false)), false)"
    )
    assert arrow_datatype(MapType(ScalarType.STRING, ScalarType.F64)) == expected


def test_array_and_builder_types():
    tensor = TensorType(TensorElementType.I8, (FixedDim(4),))
    assert arrow_array_type(ScalarType.STRING) == "StringArray"
    assert arrow_array_type(tensor) == "BinaryArray"
    assert arrow_builder_type(ScalarType.U8) == "UInt8Builder"
    assert arrow_builder_type(tensor) == "BinaryBuilder"


@pytest.mark.parametrize(
    "ty",
    [ListType(ScalarType.I32), OptionalType(ScalarType.I32), MapType(ScalarType.I32, ScalarType.I32)],
)
def test_container_has_no_array_or_builder(ty):
    with pytest.raises(CodegenError):
        arrow_array_type(ty)
    with pytest.raises(CodegenError):
        arrow_builder_type(ty)


def test_needs_deref():
    assert needs_deref(ScalarType.I64) is True
    assert needs_deref(ScalarType.BOOL) is True
    assert needs_deref(ScalarType.STRING) is False
    assert needs_deref(ScalarType.BYTES) is False
    assert needs_deref(TensorType(TensorElementType.F32, (FixedDim(2),))) is False


def test_literal_to_rust_values():
    assert literal_to_rust(42) == "42"
    assert literal_to_rust(-7) == "-7"
    assert literal_to_rust(True) == "true"
    assert literal_to_rust(False) == "false"
    assert literal_to_rust(1.5) == "1.5"
    assert literal_to_rust(2.0) == "2.0"


def test_literal_to_rust_large_float_has_no_exponent():
    rendered = literal_to_rust(1e20)
    assert "e" not in rendered
    assert rendered.endswith(".0")
    assert float(rendered) == 1e20


def test_literal_to_rust_string():
    assert literal_to_rust("hi") == '"hi".to_string()'
    assert literal_to_rust('a"b\nc') == '"a\\"b\\nc".to_string()'


def test_rust_string_literal_escapes():
    assert rust_string_literal("echo") == '"echo"'
    assert rust_string_literal("a\\b") == '"a\\\\b"'
    assert rust_string_literal("tab\there") == '"tab\\there"'