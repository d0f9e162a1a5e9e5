"""Parse `.laic` source text into a syntax tree."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, List, Optional

from .errors import ParseError
from .model import (
    Dimension,
    DynamicDim,
    ErrorVariant,
    FieldDef,
    FixedDim,
    LaicFile,
    LaicType,
    ListType,
    Literal,
    MapType,
    OptionalType,
    ScalarType,
    SkillDef,
    StructDef,
    TensorElementType,
    TensorType,
)

__all__ = ["parse"]

_TOKEN_RE = re.compile(
    r"""
    (?P<ws>\s+)
    |(?P<line_comment>//[^\n]*)
    |(?P<block_comment>/\*.*?\*/)
    |(?P<string>"[^"]*")
    |(?P<float>-?\d+\.\d+(?:[eE][+-]?\d+)?|-?\d+[eE][+-]?\d+)
    |(?P<integer>-?\d+)
    |(?P<ident>[A-Za-z_][A-Za-z0-9_]*)
    |(?P<punct>[{}<>\[\],;:=])
    """,
    re.VERBOSE | re.DOTALL,
)

_SKIPPED = {"ws", "line_comment", "block_comment"}
_I64_MIN = -(2**63)
_I64_MAX = 2**63 - 1
_U64_MAX = 2**64 - 1
_U16_MAX = 2**16 - 1


@dataclass(frozen=True)
class _Token:
    kind: str
    text: str
    line: int
    column: int

    def describe(self) -> str:
        return "end of input" if self.kind == "eof" else repr(self.text)


def _tokenize(source: str) -> Iterator[_Token]:
    pos = 0
    line = 1
    line_start = 0
    while pos < len(source):
        match = _TOKEN_RE.match(source, pos)
        if match is None:
            column = pos - line_start + 1
            raise ParseError(
                f"{line}:{column}: unexpected character {source[pos]!r}"
            )
        kind = match.lastgroup or ""
        text = match.group()
        if kind not in _SKIPPED:
            yield _Token(kind, text, line, pos - line_start + 1)
        newlines = text.count("\n")
        if newlines:
            line += newlines
            line_start = pos + text.rindex("\n") + 1
        pos = match.end()
    yield _Token("eof", "", line, pos - line_start + 1)


def _strip_quotes(text: str) -> str:
    return text.strip('"')


def _normalize_newlines(text: str) -> str:
    # Multiline defaults keep the same logical text whether the file uses LF or CRLF.
    return text.replace("\r\n", "\n").replace("\r", "\n")


class _Parser:
    def __init__(self, source: str) -> None:
        self._tokens: List[_Token] = list(_tokenize(source))
        self._pos = 0

    # -- token helpers -------------------------------------------------

    def _peek(self) -> _Token:
        return self._tokens[self._pos]

    def _advance(self) -> _Token:
        token = self._tokens[self._pos]
        if token.kind != "eof":
            self._pos += 1
        return token

    def _at(self, kind: str, text: Optional[str] = None) -> bool:
        token = self._peek()
        return token.kind == kind and (text is None or token.text == text)

    def _error(self, token: _Token, expected: str) -> ParseError:
        return ParseError(
            f"{token.line}:{token.column}: expected {expected}, found {token.describe()}"
        )

    def _expect(self, kind: str, text: Optional[str], expected: str) -> _Token:
        token = self._peek()
        if token.kind != kind or (text is not None and token.text != text):
            raise self._error(token, expected)
        return self._advance()

    def _punct(self, symbol: str) -> _Token:
        return self._expect("punct", symbol, f"'{symbol}'")

    def _keyword(self, word: str) -> _Token:
        return self._expect("ident", word, f"'{word}'")

    def _ident(self, expected: str) -> str:
        return self._expect("ident", None, expected).text

    def _string(self, expected: str) -> str:
        return _strip_quotes(self._expect("string", None, expected).text)

    # -- file ----------------------------------------------------------

    def file(self) -> LaicFile:
        version = ""
        if self._at("ident", "version"):
            self._advance()
            version = self._string("version string literal")
            self._punct(";")
        skills = []
        while self._at("ident", "skill"):
            skills.append(self._skill())
        self._expect("eof", None, "'skill' or end of input")
        return LaicFile(version, tuple(skills))

    def _skill(self) -> SkillDef:
        self._keyword("skill")
        name = self._ident("skill name")
        self._punct("{")
        self._keyword("id")
        self._punct("=")
        skill_id = self._string("id string literal")
        self._punct(";")
        self._keyword("input")
        input_def = self._struct()
        self._keyword("output")
        output_def = self._struct()
        errors: tuple = ()
        if self._at("ident", "error"):
            errors = self._errors()
        self._punct("}")
        return SkillDef(name, skill_id, input_def, output_def, errors)

    # -- structs -------------------------------------------------------

    def _struct(self) -> StructDef:
        name = self._ident("struct name")
        self._punct("{")
        fields = []
        while not self._at("punct", "}"):
            fields.append(self._field())
        self._punct("}")
        return StructDef(name, tuple(fields))

    def _field(self) -> FieldDef:
        name = self._ident("field name or '}'")
        self._punct(":")
        ty = self._type()
        default = None
        if self._at("punct", "="):
            self._advance()
            default = self._literal()
        self._punct(";")
        return FieldDef(name, ty, default)

    # -- types ---------------------------------------------------------

    def _type(self) -> LaicType:
        name = self._ident("type")
        if self._at("punct", "<"):
            if name == "map":
                self._advance()
                key = self._type()
                self._punct(",")
                value = self._type()
                self._punct(">")
                return MapType(key, value)
            if name == "list":
                self._advance()
                element = self._type()
                self._punct(">")
                return ListType(element)
            if name == "optional":
                self._advance()
                inner = self._type()
                self._punct(">")
                return OptionalType(inner)
            if name == "tensor":
                self._advance()
                return self._tensor()
        try:
            return ScalarType(name)
        except ValueError:
            raise ParseError(f"unknown type: '{name}'") from None

    def _tensor(self) -> TensorType:
        dtype_name = self._ident("tensor dtype")
        try:
            dtype = TensorElementType(dtype_name)
        except ValueError:
            raise ParseError(f"unknown tensor dtype: '{dtype_name}'") from None
        self._punct(">")
        self._punct("[")
        dims = []
        if not self._at("punct", "]"):
            dims.append(self._dimension())
            while self._at("punct", ","):
                self._advance()
                dims.append(self._dimension())
        self._punct("]")
        return TensorType(dtype, tuple(dims))

    def _dimension(self) -> Dimension:
        token = self._peek()
        if token.kind == "ident":
            self._advance()
            return DynamicDim(None if token.text == "_" else token.text)
        if token.kind == "integer":
            self._advance()
            value = int(token.text)
            if value < 0 or value > _U64_MAX:
                raise ParseError(f"invalid dimension integer: '{token.text}'")
            return FixedDim(value)
        raise self._error(token, "tensor dimension")

    # -- error variants ------------------------------------------------

    def _errors(self) -> tuple:
        self._keyword("error")
        self._punct("{")
        variants = []
        while not self._at("punct", "}"):
            name = self._ident("error variant name or '}'")
            self._punct("=")
            code_text = self._expect("integer", None, "error variant code").text
            code = int(code_text)
            if code < 0 or code > _U16_MAX:
                raise ParseError(
                    f"invalid error code '{code_text}': out of range for u16"
                )
            self._punct(";")
            variants.append(ErrorVariant(name, code))
        self._punct("}")
        return tuple(variants)

    # -- literals ------------------------------------------------------

    def _literal(self) -> Literal:
        token = self._peek()
        if token.kind == "string":
            self._advance()
            return _normalize_newlines(_strip_quotes(token.text))
        if token.kind == "float":
            self._advance()
            return float(token.text)
        if token.kind == "integer":
            self._advance()
            value = int(token.text)
            if not _I64_MIN <= value <= _I64_MAX:
                raise ParseError(
                    f"invalid integer literal: '{token.text}' does not fit in i64"
                )
            return value
        if token.kind == "ident" and token.text in ("true", "false"):
            self._advance()
            return token.text == "true"
        raise self._error(token, "literal value")


def parse(source: str) -> LaicFile:
    """Parse `.laic` source into a :class:`LaicFile`.

    Raises :class:`ParseError` on syntax errors.
    """
    return _Parser(source).file()