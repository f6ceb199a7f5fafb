"""Basic statement compilation for the Vellum compiler.

Provides mixin for compiling basic output statements (data, output).
"""

from __future__ import annotations

import ast
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from vellum.nodes import Data, Expr, Output


class BasicStatementMixin:
    """Mixin for compiling basic output statements."""

    if TYPE_CHECKING:
        # From ExpressionCompilationMixin
        def _compile_expr(self, node: Expr) -> ast.expr: ...

        # From Compiler core
        def _emit_output(self, value_expr: ast.expr) -> ast.stmt: ...

    def _compile_data(self, node: Data) -> list[ast.stmt]:
        """Compile raw text: _append("literal text")"""
        if not node.value:
            return []
        return [self._emit_output(ast.Constant(value=node.value))]

    def _compile_output(self, node: Output) -> list[ast.stmt]:
        """Compile {{ expression }}: _append(_str(expr))

        ``None`` and missing values print as the empty string. Output is not
        escaped; use the ``e`` filter.
        """
        return [
            self._emit_output(
                ast.Call(
                    func=ast.Name(id="_str", ctx=ast.Load()),
                    args=[self._compile_expr(node.expr)],
                    keywords=[],
                )
            )
        ]
