"""Generate a self-contained TypeScript contract module for a `.laic` file."""

from __future__ import annotations

from typing import List

from ..model import LaicFile, SkillDef, StructDef
from .typescript_deserialize import generate_from_ipc
from .typescript_serialize import generate_to_ipc
from .typescript_types import literal_to_ts, ts_type, typescript_string_literal

__all__ = ["generate_typescript", "to_pascal_case"]

_HEADER = '// Generated by laicc - DO NOT EDIT.\n\nimport * as arrow from "apache-arrow";\n\n'

# The helpers live inside the generated file so it needs no extra runtime package.
# Dynamic tensor dimensions are encoded as 0 in shape metadata and stay that way.
_FILE_HELPERS = """\
function laicSchemaMetadata(schema: any): Map<string, string> {
  return (schema.metadata ?? new Map()) as Map<string, string>;
}

function laicFieldMetadata(field: any): Map<string, string> {
  return (field.metadata ?? new Map()) as Map<string, string>;
}

function laicAssertMetadata(metadata: Map<string, string>, key: string, expected: string): void {
  const actual = metadata.get(key);
  if (actual === undefined) {
    throw new Error(`missing required metadata key '${key}'`);
  }
  if (actual !== expected) {
    throw new Error(`metadata '${key}' mismatch: expected '${expected}', got '${actual}'`);
  }
}

function laicParseTensorShape(fieldName: string, metadata: Map<string, string>): number[] {
  const raw = metadata.get("laic.tensor.shape");
  if (raw === undefined) {
    throw new Error(`field '${fieldName}': missing tensor shape metadata`);
  }
  const body = raw.trim().slice(1, -1).trim();
  if (body.length === 0) {
    return [];
  }
  return body.split(",").map((part) => {
    const value = Number.parseInt(part.trim(), 10);
    if (Number.isNaN(value)) {
      throw new Error(`field '${fieldName}': invalid tensor shape metadata '${raw}'`);
    }
    return value;
  });
}

function laicAssertTensorMetadata(field: any, fieldName: string, expectedDtype: string, expectedShape: number[]): void {
  const metadata = laicFieldMetadata(field);
  laicAssertMetadata(metadata, "laic.tensor.dtype", expectedDtype);
  const actualShape = laicParseTensorShape(fieldName, metadata);
  if (actualShape.length !== expectedShape.length) {
    throw new Error(`field '${fieldName}': expected ${expectedShape.length} dimensions, got ${actualShape.length}`);
  }
  for (let index = 0; index < expectedShape.length; index += 1) {
    const expectedDim = expectedShape[index]!;
    if (expectedDim !== 0 && actualShape[index] !== expectedDim) {
      throw new Error(`field '${fieldName}': dim ${index} expected ${expectedDim}, got ${actualShape[index]}`);
    }
  }
}

"""


def to_pascal_case(name: str) -> str:
    """Turn a snake_case identifier into PascalCase."""
    return "".join(part[:1].upper() + part[1:] for part in name.split("_") if part)


def generate_typescript(file: LaicFile) -> str:
    """TypeScript source for every skill of a validated file."""
    out: List[str] = [_HEADER, _FILE_HELPERS]
    for skill in file.skills:
        out.append(_class(skill, skill.input, "input", file.version))
        out.append("\n")
        out.append(_class(skill, skill.output, "output", file.version))
        out.append("\n")
        if skill.errors:
            out.append(_error_enum(skill))
            out.append("\n")
    return "".join(out)


def _class(skill: SkillDef, struct: StructDef, direction: str, version: str) -> str:
    out: List[str] = [
        f"export class {struct.name} {{\n",
        f"  static readonly SKILL_ID = {typescript_string_literal(skill.id)};\n",
        f"  static readonly VERSION = {typescript_string_literal(version)};\n",
        f'  static readonly DIRECTION = "{direction}";\n\n',
        "  constructor(\n",
    ]
    for field in struct.fields:
        if field.default is not None:
            out.append(
                f"    public readonly {field.name}: {ts_type(field.ty)} = "
                f"{literal_to_ts(field.default)},\n"
            )
        else:
            out.append(f"    public readonly {field.name}: {ts_type(field.ty)},\n")
    out.append("  ) {}\n\n")
    out.append(generate_to_ipc(skill, struct, direction, version))
    out.append(generate_from_ipc(struct, skill.id, version, direction))
    out.append("}\n")
    return "".join(out)


def _error_enum(skill: SkillDef) -> str:
    lines = [f"export enum {to_pascal_case(skill.name)}Error {{\n"]
    lines.extend(f"  {variant.name} = {variant.code},\n" for variant in skill.errors)
    lines.append("}\n")
    return "".join(lines)