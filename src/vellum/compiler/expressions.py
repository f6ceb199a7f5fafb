"""Expression compilation for the Vellum compiler.

Provides mixin for compiling expression nodes to Python AST expressions.

Generated forms:
    ```
    user.name                  -> _resolve(ctx, ('user', 'name'))
    'text'                     -> 'text'
    title | upper | truncate:5 -> _chain(_resolve(ctx, ('title',)), (('upper', None), ('truncate', '5')))
    a > 3                      -> _compare('>', a, 3)
    not a / a and b            -> not a / a and b
    ```
"""

from __future__ import annotations

import ast
from typing import Any

from vellum.nodes import BoolOp, Compare, Const, FilterChain, Not, Path


def _call(func: str, *args: ast.expr) -> ast.Call:
    return ast.Call(func=ast.Name(id=func, ctx=ast.Load()), args=list(args), keywords=[])


class ExpressionCompilationMixin:
    """Mixin for compiling expressions."""

    def _compile_expr(self, node: Any) -> ast.expr:
        """Compile an expression node. Complexity: O(1) type dispatch."""
        if isinstance(node, Const):
            return ast.Constant(value=node.value)

        if isinstance(node, Path):
            return self._compile_path(node)

        if isinstance(node, FilterChain):
            steps = ast.Tuple(
                elts=[
                    ast.Tuple(
                        elts=[ast.Constant(value=step.name), ast.Constant(value=step.arg)],
                        ctx=ast.Load(),
                    )
                    for step in node.steps
                ],
                ctx=ast.Load(),
            )
            return _call("_chain", self._compile_expr(node.value), steps)

        if isinstance(node, Compare):
            return _call(
                "_compare",
                ast.Constant(value=node.op),
                self._compile_expr(node.left),
                self._compile_expr(node.right),
            )

        if isinstance(node, Not):
            return ast.UnaryOp(op=ast.Not(), operand=self._compile_expr(node.operand))

        if isinstance(node, BoolOp):
            op = ast.And() if node.op == "and" else ast.Or()
            return ast.BoolOp(op=op, values=[self._compile_expr(v) for v in node.values])

        raise TypeError(f"Cannot compile expression node {type(node).__name__}")

    def _compile_path(self, node: Path) -> ast.expr:
        segments = ast.Tuple(
            elts=[ast.Constant(value=segment) for segment in node.segments],
            ctx=ast.Load(),
        )
        return _call("_resolve", ast.Name(id="ctx", ctx=ast.Load()), segments)
