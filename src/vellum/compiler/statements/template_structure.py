"""Template structure statement compilation for the Vellum compiler.

Provides mixin for compiling fill, include and embed. ``extends`` and
``section`` produce no code in place; the compiler core hoists them to
the top of ``render``.
"""

from __future__ import annotations

import ast
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from vellum.nodes import Embed, Extends, Fill, Include, Path, Section


def _session_call(method: str, *args: ast.expr) -> ast.Call:
    return ast.Call(
        func=ast.Attribute(
            value=ast.Name(id="_session", ctx=ast.Load()),
            attr=method,
            ctx=ast.Load(),
        ),
        args=list(args),
        keywords=[],
    )


class TemplateStructureMixin:
    """Mixin for compiling template structure statements."""

    if TYPE_CHECKING:
        # From ExpressionCompilationMixin
        def _compile_path(self, node: Path) -> ast.expr: ...

        # From Compiler core
        def _emit_output(self, value_expr: ast.expr) -> ast.stmt: ...

    def _compile_extends(self, node: Extends) -> list[ast.stmt]:
        return []

    def _compile_section(self, node: Section) -> list[ast.stmt]:
        return []

    def _compile_fill(self, node: Fill) -> list[ast.stmt]:
        """Compile {{fill 'name'}}: _append(_session.resolve_fill('name'))"""
        return [self._emit_output(_session_call("resolve_fill", ast.Constant(value=node.name)))]

    def _compile_include(self, node: Include) -> list[ast.stmt]:
        """Compile {{include 'name'}}: _append(_include(_session, 'name'))"""
        return [
            self._emit_output(
                ast.Call(
                    func=ast.Name(id="_include", ctx=ast.Load()),
                    args=[
                        ast.Name(id="_session", ctx=ast.Load()),
                        ast.Constant(value=node.template),
                    ],
                    keywords=[],
                )
            )
        ]

    def _compile_embed(self, node: Embed) -> list[ast.stmt]:
        """Compile {{embed 'name' with ['k' => a.b]}}.

        Generates: _append(_embed(_session, 'name', {'k': _resolve(ctx, ('a', 'b'))}))
        """
        bindings = ast.Dict(
            keys=[ast.Constant(value=key) for key, _ in node.bindings],
            values=[self._compile_path(path) for _, path in node.bindings],
        )
        return [
            self._emit_output(
                ast.Call(
                    func=ast.Name(id="_embed", ctx=ast.Load()),
                    args=[
                        ast.Name(id="_session", ctx=ast.Load()),
                        ast.Constant(value=node.template),
                        bindings,
                    ],
                    keywords=[],
                )
            )
        ]

    def _make_declare_layout(self, node: Extends) -> ast.stmt:
        """_session.declare_layout('layout.html')"""
        return ast.Expr(value=_session_call("declare_layout", ast.Constant(value=node.template)))

    def _make_capture_section(self, name: str, func_name: str) -> ast.stmt:
        """_session.capture_section('name', _section_N(ctx, _session))"""
        rendered = ast.Call(
            func=ast.Name(id=func_name, ctx=ast.Load()),
            args=[ast.Name(id="ctx", ctx=ast.Load()), ast.Name(id="_session", ctx=ast.Load())],
            keywords=[],
        )
        return ast.Expr(
            value=_session_call("capture_section", ast.Constant(value=name), rendered)
        )
