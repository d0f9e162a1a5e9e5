"""Entry points of the compiler: parse, validate, generate."""

from __future__ import annotations

from .codegen.typescript_contract import generate_typescript
from .model import LaicFile
from .parser import parse
from .validate import validate

__all__ = ["compile_source", "generate_typescript_source"]


def compile_source(source: str) -> LaicFile:
    """Parse and validate `.laic` source text.

    Raises :class:`ParseError` on syntax errors and :class:`ValidationError`
    on semantic errors.
    """
    return validate(parse(source))


def generate_typescript_source(file: LaicFile) -> str:
    """TypeScript contract bindings for a validated file."""
    return generate_typescript(file)