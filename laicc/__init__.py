"""Compiler for .laic skill contract definitions into TypeScript bindings."""

__version__ = "0.2.0"