"""Control flow statement compilation for the Vellum compiler.

Provides mixin for compiling control flow statements (if, each).
"""

from __future__ import annotations

import ast
from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from vellum.nodes import Each, Expr, If, Node, Path


class ControlFlowMixin:
    """Mixin for compiling control flow statements."""

    if TYPE_CHECKING:
        # From ExpressionCompilationMixin
        def _compile_expr(self, node: Expr) -> ast.expr: ...

        def _compile_path(self, node: Path) -> ast.expr: ...

        # From Compiler core
        def _compile_node(self, node: Node) -> list[ast.stmt]: ...

        def _emit_output(self, value_expr: ast.expr) -> ast.stmt: ...

    def _compile_branch(self, nodes: Sequence[Node]) -> list[ast.stmt]:
        stmts: list[ast.stmt] = []
        for child in nodes:
            stmts.extend(self._compile_node(child))
        return stmts or [ast.Pass()]

    def _compile_if(self, node: If) -> list[ast.stmt]:
        """Compile {{if}} with any number of elseif branches.

        Generates a plain if/elif/else chain; truthiness is Python's, and
        missing values are falsy.
        """
        orelse: list[ast.stmt] = []
        if node.else_:
            orelse = self._compile_branch(node.else_)

        # Build elif chain from the inside out
        for test, body in reversed(node.elif_):
            orelse = [
                ast.If(
                    test=self._compile_expr(test),
                    body=self._compile_branch(body),
                    orelse=orelse,
                )
            ]

        return [
            ast.If(
                test=self._compile_expr(node.test),
                body=self._compile_branch(node.body),
                orelse=orelse,
            )
        ]

    def _compile_each(self, node: Each) -> list[ast.stmt]:
        """Compile {{each item in items using 'row'}}.

        Generates: _append(_each(_session, _resolve(ctx, ...), 'item', 'row'))
        """
        return [
            self._emit_output(
                ast.Call(
                    func=ast.Name(id="_each", ctx=ast.Load()),
                    args=[
                        ast.Name(id="_session", ctx=ast.Load()),
                        self._compile_path(node.iter),
                        ast.Constant(value=node.target),
                        ast.Constant(value=node.template),
                    ],
                    keywords=[],
                )
            )
        ]
