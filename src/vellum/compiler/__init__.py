"""Vellum compiler: node tree to Python code objects."""

from vellum.compiler.core import CompiledTemplate, Compiler

__all__ = ["CompiledTemplate", "Compiler"]
