"""Semantic checks on a parsed `.laic` file."""

from __future__ import annotations

from typing import Iterable, Optional, Tuple

from .errors import ValidationError
from .model import (
    DynamicDim,
    ErrorVariant,
    FieldDef,
    LaicFile,
    LaicType,
    ListType,
    Literal,
    MapType,
    OptionalType,
    ScalarType,
    StructDef,
    TensorType,
)

__all__ = ["validate", "is_leaf_type", "is_reserved_identifier"]

# One identifier is emitted into Rust, Python and TypeScript alike, so the union of
# their keywords is rejected instead of mangling names differently per target.
_RESERVED = frozenset(
    """
    abstract as async await become box break const continue crate do dyn else enum extern
    false final fn for gen if impl in let loop macro match mod move mut override priv pub ref
    return Self self static struct super trait true try type typeof union unsafe unsized use
    virtual where while yield False None True and assert class def del elif except finally from
    global import is lambda nonlocal not or pass raise with any arguments boolean case catch
    constructor debugger declare default delete eval export extends function get implements
    infer instanceof interface keyof module namespace new never null number object of package
    private protected public readonly require set string switch symbol this throw undefined
    unique unknown var void
    """.split()
)

_INTEGER_BOUNDS = {
    ScalarType.I8: ("i8", -(2**7), 2**7 - 1),
    ScalarType.I16: ("i16", -(2**15), 2**15 - 1),
    ScalarType.I32: ("i32", -(2**31), 2**31 - 1),
    ScalarType.U8: ("u8", 0, 2**8 - 1),
}

_NUMERIC = frozenset(
    {
        ScalarType.I8,
        ScalarType.I16,
        ScalarType.I32,
        ScalarType.I64,
        ScalarType.U8,
        ScalarType.F32,
        ScalarType.F64,
    }
)
_FLOATS = frozenset({ScalarType.F32, ScalarType.F64})

_MAP_KEYS = frozenset(
    {
        ScalarType.STRING,
        ScalarType.BOOL,
        ScalarType.I8,
        ScalarType.I16,
        ScalarType.I32,
        ScalarType.I64,
        ScalarType.U8,
    }
)


def is_reserved_identifier(identifier: str) -> bool:
    """Whether the identifier is a keyword in any generated target language."""
    return identifier in _RESERVED


def is_leaf_type(ty: LaicType) -> bool:
    """Whether codegen maps the type directly onto a single Arrow array."""
    return isinstance(ty, (ScalarType, TensorType))


def _has_dynamic_dim(ty: TensorType) -> bool:
    return any(isinstance(dim, DynamicDim) for dim in ty.dims)


def _check_identifier(skill_name: str, context: str, identifier: str) -> None:
    if is_reserved_identifier(identifier):
        raise ValidationError(
            f"skill '{skill_name}': {context} '{identifier}' is a reserved codegen identifier"
        )


def validate(file: LaicFile) -> LaicFile:
    """Check a parsed file against the IDL rules and return it unchanged.

    Raises :class:`ValidationError` on the first rule that is broken.
    """
    if not file.version:
        raise ValidationError("version string must not be empty")
    if not file.skills:
        raise ValidationError("file must contain at least one skill definition")

    names = set()
    ids = set()
    for skill in file.skills:
        if skill.name in names:
            raise ValidationError(f"duplicate skill name: '{skill.name}'")
        names.add(skill.name)
        if skill.id in ids:
            raise ValidationError(f"duplicate skill id: '{skill.id}'")
        ids.add(skill.id)
        if not skill.id:
            raise ValidationError(f"skill '{skill.name}': id must not be empty")

        _check_identifier(skill.name, "skill name", skill.name)
        _validate_struct(skill.name, "input", skill.input)
        _validate_struct(skill.name, "output", skill.output)
        _validate_errors(skill.name, skill.errors)
    return file


def _validate_struct(skill_name: str, direction: str, struct: StructDef) -> None:
    if not struct.name:
        raise ValidationError(
            f"skill '{skill_name}': {direction} struct name must not be empty"
        )
    if not struct.fields:
        raise ValidationError(
            f"skill '{skill_name}': {direction} struct '{struct.name}' "
            "must have at least one field"
        )
    _check_identifier(skill_name, f"{direction} struct name", struct.name)

    seen = set()
    for field in struct.fields:
        if field.name in seen:
            raise ValidationError(
                f"skill '{skill_name}': duplicate field '{field.name}' "
                f"in {direction} struct '{struct.name}'"
            )
        seen.add(field.name)
        _validate_field(skill_name, field)


def _validate_field(skill_name: str, field: FieldDef) -> None:
    _check_identifier(skill_name, "field name", field.name)
    if field.default is not None:
        _validate_default(skill_name, field.name, field.ty, field.default)
    _validate_field_type(skill_name, field.name, field.ty)


def _validate_field_type(skill_name: str, field_name: str, ty: LaicType) -> None:
    prefix = f"skill '{skill_name}': field '{field_name}'"
    if isinstance(ty, TensorType):
        if not ty.dims:
            raise ValidationError(
                f"skill '{skill_name}': tensor field '{field_name}' "
                "must have at least one dimension"
            )
    elif isinstance(ty, ListType):
        inner = ty.element
        if isinstance(inner, ListType):
            raise ValidationError(f"{prefix}: nested list<list<T>> is not supported")
        if isinstance(inner, TensorType) and _has_dynamic_dim(inner):
            raise ValidationError(
                f"{prefix}: list<tensor<...>> with dynamic dimensions is not supported"
            )
        if isinstance(inner, MapType):
            raise ValidationError(f"{prefix}: list<map<...>> is not supported")
        if isinstance(inner, OptionalType) and not is_leaf_type(inner.inner):
            raise ValidationError(
                f"{prefix}: list<optional<T>> requires T to be a scalar, string, "
                "bytes, or tensor type"
            )
        _validate_field_type(skill_name, field_name, inner)
    elif isinstance(ty, OptionalType):
        inner = ty.inner
        if isinstance(inner, OptionalType):
            raise ValidationError(
                f"{prefix}: nested optional<optional<T>> is not supported"
            )
        if isinstance(inner, TensorType) and _has_dynamic_dim(inner):
            raise ValidationError(
                f"{prefix}: optional<tensor<...>> with dynamic dimensions is not supported"
            )
        if isinstance(inner, MapType):
            raise ValidationError(f"{prefix}: optional<map<...>> is not supported")
        if isinstance(inner, ListType) and not is_leaf_type(inner.element):
            raise ValidationError(
                f"{prefix}: optional<list<T>> requires T to be a scalar, string, "
                "bytes, or tensor type"
            )
        _validate_field_type(skill_name, field_name, inner)
    elif isinstance(ty, MapType):
        if ty.key not in _MAP_KEYS:
            raise ValidationError(
                f"{prefix}: map key must be string, bool, or integer type"
            )
        if not isinstance(ty.value, ScalarType):
            raise ValidationError(f"{prefix}: map value must be a scalar type")


def _integer_bounds(ty: LaicType) -> Optional[Tuple[str, int, int]]:
    if isinstance(ty, ScalarType):
        return _INTEGER_BOUNDS.get(ty)
    return None


def _default_compatible(ty: LaicType, default: Literal) -> bool:
    if isinstance(default, bool):
        return ty is ScalarType.BOOL
    if isinstance(default, str):
        return ty is ScalarType.STRING
    if isinstance(default, int):
        return ty in _NUMERIC
    if isinstance(default, float):
        return ty in _FLOATS
    return False


def _validate_default(
    skill_name: str, field_name: str, ty: LaicType, default: Literal
) -> None:
    if not isinstance(ty, ScalarType) or ty is ScalarType.BYTES:
        raise ValidationError(
            f"skill '{skill_name}': field '{field_name}' of type {ty!r} "
            "cannot have a default value"
        )
    if not _default_compatible(ty, default):
        raise ValidationError(
            f"skill '{skill_name}': field '{field_name}' has incompatible default value type"
        )
    if isinstance(default, int) and not isinstance(default, bool):
        bounds = _integer_bounds(ty)
        if bounds is not None:
            type_name, low, high = bounds
            if not low <= default <= high:
                raise ValidationError(
                    f"skill '{skill_name}': field '{field_name}' default value {default} "
                    f"is out of range for {type_name} ({low}..={high})"
                )


def _validate_errors(skill_name: str, errors: Iterable[ErrorVariant]) -> None:
    names = set()
    codes = set()
    for variant in errors:
        _check_identifier(skill_name, "error name", variant.name)
        if variant.name in names:
            raise ValidationError(
                f"skill '{skill_name}': duplicate error name '{variant.name}'"
            )
        names.add(variant.name)
        if variant.code == 0:
            raise ValidationError(
                f"skill '{skill_name}': error code must be positive, "
                f"got 0 for '{variant.name}'"
            )
        if variant.code in codes:
            raise ValidationError(
                f"skill '{skill_name}': duplicate error code {variant.code} "
                f"for '{variant.name}'"
            )
        codes.add(variant.code)