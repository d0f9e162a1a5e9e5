# laicc

`laicc` compiles `.laic` skill contract definitions into TypeScript
contract bindings that serialize through Arrow IPC streams. Every record
carries skill id, version and direction metadata. Tensor fields also
carry dtype and shape metadata, and decoding checks all of it.

## Installation

```
pip install laicc
```

The package itself has no runtime dependencies. The TypeScript it
generates imports the `apache-arrow` npm package.

## The `.laic` language

```
version "1.0.0";

// One skill: an input struct, an output struct, optional error codes.
skill embed {
    id = "embed";
    input EmbedInput {
        text: string;
        temperature: f64 = 0.5;
        tags: list<string>;
        hint: optional<string>;
        attrs: map<string, i32>;
    }
    output EmbedOutput {
        vector: tensor<f32>[768];
    }
    error {
        TooLong = 1;
        Unavailable = 2;
    }
}
```

These scalar types are supported:

- `string`, `bytes`, `bool`
- `i8`, `i16`, `i32`, `i64`, `u8`
- `f32`, `f64`

These compound types are supported:

- `list<T>`
- `optional<T>`
- `map<K, V>`
- `tensor<dtype>[dims]`

A tensor dimension may be a fixed integer, `_`, or a named dynamic
dimension. Both `//` line comments and `/* ... */` block comments are
allowed.

Validation rejects definitions that would break the generated code.
It rejects:

- an empty version
- a file with no skills
- duplicate skill names or ids
- empty ids
- empty structs
- duplicate fields
- zero or duplicate error codes, and duplicate error names
- defaults on types that cannot have them (bytes, tensors, lists, optionals, maps)
- defaults that do not fit the field type or its integer range
- tensors without dimensions
- unsupported nesting, such as `list<list<T>>`, `optional<optional<T>>`,
  `list<map<...>>`, or containers of tensors with dynamic dimensions
- map keys that are not string, bool or integer, and map values that are not scalar
- identifiers that are reserved words in Rust, Python or TypeScript

## Command line

```
laicc contract.laic --lang typescript --output generated/
```

`--lang` defaults to `typescript`, the only target the command accepts.
`--output` (or `-o`) defaults to the current directory, which is created
if it is missing. The output file is named after the input file: this
command writes `generated/contract_laic.ts` and reports the path on
stderr. On failure, `laicc` prints `laicc: <error>` on stderr and exits
with status 1.

## Generated TypeScript

For each skill the generated module holds:

- one class for the input struct and one for the output struct. Each
  class has `SKILL_ID`, `VERSION` and `DIRECTION` constants and a
  constructor with the fields, using defaults where they are declared.
  It also has `toIpc()` and a static `fromIpc(data)`.
- an `export enum <Skill>Error` with the error codes, when the skill has
  any. The skill name is turned into PascalCase.

`fromIpc` rejects streams that do not hold exactly one row in one
record batch. It rejects schema metadata that does not match the skill
id, version and direction. It rejects tensor metadata whose dtype or
fixed dimensions do not match.

## Library use

```python
from pathlib import Path

from laicc.compiler import compile_source, generate_typescript_source

contract = compile_source(Path("contract.laic").read_text())
print(generate_typescript_source(contract))
```

`compile_source` parses and validates the source. It returns a
`laicc.model.LaicFile`. The steps are also available on their own:

- `laicc.parser.parse`
- `laicc.validate.validate`
- `laicc.codegen.typescript_contract.generate_typescript`

Failures raise subclasses of `laicc.errors.CompileError`:

- `ParseError`
- `ValidationError`
- `CodegenError`
- `CompileIOError`

`laicc.codegen` also holds the lower-level pieces:

- `typescript_types`: type, datatype and literal mappings
- `typescript_serialize.generate_to_ipc`
- `typescript_deserialize.generate_from_ipc`
- `rust_types`: Rust type names, Arrow datatype, array and builder names,
  and literals
- `rust_serialize.generate_to_arrow_ipc`: emits the Rust
  `to_arrow_ipc()` method for one struct

## What it does not do

`laicc` writes complete contract modules only for TypeScript. It has no
generator for a complete Rust contract module: the Rust helpers above
emit only types, literals and the serialization method. It generates no
Python bindings. The command line offers no language other than
`typescript`.