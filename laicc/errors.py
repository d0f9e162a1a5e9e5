"""Exceptions raised by the compiler pipeline."""

from __future__ import annotations


class CompileError(Exception):
    """Base class for every error the compiler reports."""

    prefix = "compile error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.prefix}: {self.message}"


class ParseError(CompileError):
    """The source text does not match the grammar."""

    prefix = "parse error"


class ValidationError(CompileError):
    """The parsed file breaks a semantic rule."""

    prefix = "validation error"


class CodegenError(CompileError):
    """Code generation could not be carried out."""

    prefix = "codegen error"


class CompileIOError(CompileError):
    """Reading or writing a file failed."""

    prefix = "I/O error"

    def __init__(self, error: OSError) -> None:
        super().__init__(str(error))
        self.error = error
        self.__cause__ = error