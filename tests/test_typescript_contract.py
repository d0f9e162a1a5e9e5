from laicc.codegen.typescript_contract import generate_typescript, to_pascal_case
from laicc.codegen.typescript_deserialize import generate_from_ipc
from laicc.codegen.typescript_serialize import generate_to_ipc
from laicc.model import (
    ErrorVariant,
    FieldDef,
    LaicFile,
    ScalarType,
    SkillDef,
    StructDef,
)


def _skill(errors=()):
    return SkillDef(
        name="echo",
        id="echo",
        input=StructDef("EchoInput", (FieldDef("text", ScalarType.STRING, "hi"),)),
        output=StructDef("EchoOutput", (FieldDef("count", ScalarType.I32),)),
        errors=tuple(errors),
    )


def test_header_comes_first():
    code = generate_typescript(LaicFile("1.0.0", (_skill(),)))
    assert code.startswith("// Generated by laicc - DO NOT EDIT.\n\n")
    assert 'import * as arrow from "apache-arrow";' in code


def test_helpers_emitted_once():
    skill_b = SkillDef(
        "other", "other", StructDef("A", (FieldDef("x", ScalarType.I32),)),
        StructDef("B", (FieldDef("y", ScalarType.I32),)),
    )
    code = generate_typescript(LaicFile("1.0.0", (_skill(), skill_b)))
    assert code.count("function laicAssertTensorMetadata(") == 1
    assert code.count("function laicSchemaMetadata(") == 1


def test_classes_include_ipc_methods():
    skill = _skill()
    code = generate_typescript(LaicFile("2.0", (skill,)))
    assert "export class EchoInput {\n" in code
    assert "export class EchoOutput {\n" in code
    assert generate_to_ipc(skill, skill.input, "input", "2.0") in code
    assert generate_from_ipc(skill.output, "echo", "2.0", "output") in code
    assert code.index("export class EchoInput") < code.index("export class EchoOutput")


def test_static_metadata_and_constructor():
    code = generate_typescript(LaicFile("2.0", (_skill(),)))
    assert '  static readonly SKILL_ID = "echo";\n' in code
    assert '  static readonly VERSION = "2.0";\n' in code
    assert '  static readonly DIRECTION = "input";\n' in code
    assert '    public readonly text: string = "hi",\n' in code
    assert "    public readonly count: number,\n" in code


def test_error_enum_only_with_errors():
    without = generate_typescript(LaicFile("1", (_skill(),)))
    assert "export enum" not in without
    with_errors = generate_typescript(
        LaicFile("1", (_skill([ErrorVariant("Timeout", 1), ErrorVariant("Busy", 2)]),))
    )
    assert "export enum EchoError {\n  Timeout = 1,\n  Busy = 2,\n}\n" in with_errors


def test_to_pascal_case():
    assert to_pascal_case("echo") == "Echo"
    assert to_pascal_case("text_embed") == "TextEmbed"
    assert to_pascal_case("Echo") == "Echo"