"""Command line front end: compile a `.laic` file into contract bindings."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Callable, Dict, Optional, Sequence, Tuple

from .compiler import compile_source, generate_typescript_source
from .errors import CodegenError, CompileError, CompileIOError
from .model import LaicFile

__all__ = ["main", "run"]

_TARGETS: Dict[str, Tuple[Callable[[LaicFile], str], str]] = {
    "typescript": (generate_typescript_source, "ts"),
}


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="laicc",
        description="LAIC IDL compiler: compiles .laic skill contracts to contract bindings.",
    )
    parser.add_argument("input", type=Path, help="input .laic file")
    parser.add_argument(
        "--lang", default="typescript", help="target language (typescript)"
    )
    parser.add_argument(
        "-o", "--output", type=Path, default=Path("."), help="output directory"
    )
    return parser


def run(argv: Optional[Sequence[str]] = None) -> Path:
    """Compile the file named on the command line and return the path written."""
    args = _parser().parse_args(argv)

    try:
        source = args.input.read_text(encoding="utf-8")
    except OSError as error:
        raise CompileIOError(error) from error
    file = compile_source(source)

    target = _TARGETS.get(args.lang)
    if target is None:
        available = ", ".join(_TARGETS)
        raise CodegenError(
            f"unsupported target language: '{args.lang}' (available: {available})"
        )
    generate, extension = target
    code = generate(file)

    stem = args.input.stem or "output"
    out_path = args.output / f"{stem}_laic.{extension}"
    try:
        args.output.mkdir(parents=True, exist_ok=True)
        out_path.write_text(code, encoding="utf-8", newline="")
    except OSError as error:
        raise CompileIOError(error) from error
    print(f"wrote {out_path}", file=sys.stderr)
    return out_path


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the compiler; report errors on stderr and return the exit status."""
    try:
        run(argv)
    except CompileError as error:
        print(f"laicc: {error}", file=sys.stderr)
        return 1
    return 0