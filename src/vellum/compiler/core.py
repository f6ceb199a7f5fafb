"""Vellum Compiler Core: main Compiler class.

The Compiler transforms the Vellum node tree into a Python ``ast.Module``,
then compiles it to an executable code object. Uses a mixin-based design
like the parser.

Design Principles:
1. **AST-to-AST**: Generate ``ast.Module``, not source strings
2. **StringBuilder**: Output via ``buf.append()``, join at end
3. **Hoisting**: Layout declarations and section captures run before the
   template body, wherever they appear in the source
4. **O(1) dispatch**: Dict-based node type → handler lookup

Generated module for ``{{extends 'base'}}{{section 'body'}}Hi {{name}}{{endsection}}``:

    ```python
    def _section_0(ctx, _session):
        buf = []
        _append = buf.append
        _append('Hi ')
        _session.line = 1
        _append(_str(_resolve(ctx, ('name',))))
        return ''.join(buf)

    def render(ctx, _session):
        _session.declare_layout('base')
        _session.capture_section('body', _section_0(ctx, _session))
        buf = []
        _append = buf.append
        return ''.join(buf)
    ```

The unparsed module (``ast.unparse``) is the compiled form reported by
``TemplateExecutionError``.

"""

from __future__ import annotations

import ast
import logging
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, NamedTuple

from vellum.compiler.expressions import ExpressionCompilationMixin
from vellum.compiler.statements import StatementCompilationMixin
from vellum.nodes import Extends, If, Section

if TYPE_CHECKING:
    import types

    from vellum.nodes import Node
    from vellum.nodes import Template as TemplateNode

logger = logging.getLogger(__name__)


class CompiledTemplate(NamedTuple):
    """Result of compiling one template."""

    code: types.CodeType
    module: ast.Module


class Compiler(
    ExpressionCompilationMixin,
    StatementCompilationMixin,
):
    """Compile a Vellum node tree to a Python code object.

    The generated code defines ``render(ctx, _session)`` plus one
    ``_section_N(ctx, _session)`` function per section.

    Line Tracking:
        For nodes that can fail at runtime (Output, If, Each, Include,
        Embed), generates ``_session.line = N`` before the node's code so
        execution errors can point at the template line.

    Example:
            >>> from vellum.compiler import Compiler
            >>> from vellum.parser import Parser
            >>> from vellum.lexer import tokenize
            >>> node = Parser(tokenize("Hello, {{ name }}!")).parse()
            >>> code, module = Compiler().compile(node, name="greeting.html")

    """

    __slots__ = ("_name", "_node_dispatch", "_section_counter", "_sections")

    # Node types that can cause runtime errors and should track line numbers
    _LINE_TRACKED_NODES = frozenset({"Output", "If", "Each", "Include", "Embed"})

    def __init__(self) -> None:
        self._name: str | None = None
        self._sections: list[Section] = []
        self._section_counter = 0
        self._node_dispatch: dict[str, Callable[[Node], list[ast.stmt]]] = {
            "Data": self._compile_data,
            "Output": self._compile_output,
            "If": self._compile_if,
            "Each": self._compile_each,
            "Include": self._compile_include,
            "Embed": self._compile_embed,
            "Fill": self._compile_fill,
            "Extends": self._compile_extends,
            "Section": self._compile_section,
        }

    def compile(
        self,
        node: TemplateNode,
        name: str | None = None,
        filename: str | None = None,
    ) -> CompiledTemplate:
        """Compile a template tree.

        Args:
            node: Root Template node
            name: Template name for error messages
            filename: Source filename passed to ``compile()``

        Returns:
            The code object and the Python module it was compiled from
        """
        self._name = name
        self._sections = []
        self._section_counter = 0

        module = self._compile_template(node)
        ast.fix_missing_locations(module)
        code = compile(module, filename or "<template>", "exec")
        logger.debug(
            "Compiled %s (%d sections)", name or "<string>", len(self._sections)
        )
        return CompiledTemplate(code=code, module=module)

    # ------------------------------------------------------------------
    # Hoisting
    # ------------------------------------------------------------------

    def _collect(self, nodes: Sequence[Node], layouts: list[Extends]) -> None:
        """Collect every Extends and Section node, sections in post-order.

        Nested sections are registered before the section containing them,
        so an outer section can ``fill`` an inner one.
        """
        for node in nodes:
            if isinstance(node, Extends):
                layouts.append(node)
            elif isinstance(node, Section):
                self._collect(node.body, layouts)
                self._sections.append(node)
            elif isinstance(node, If):
                self._collect(node.body, layouts)
                for _, body in node.elif_:
                    self._collect(body, layouts)
                self._collect(node.else_, layouts)

    # ------------------------------------------------------------------
    # Module generation
    # ------------------------------------------------------------------

    def _compile_template(self, node: TemplateNode) -> ast.Module:
        layouts: list[Extends] = []
        self._collect(node.body, layouts)

        module_body: list[ast.stmt] = []
        prologue: list[ast.stmt] = []

        # The last declared layout wins
        if layouts:
            prologue.append(self._make_declare_layout(layouts[-1]))

        for section in self._sections:
            func_name = f"_section_{self._section_counter}"
            self._section_counter += 1
            module_body.append(self._make_function(func_name, section.body))
            prologue.append(self._make_capture_section(section.name, func_name))

        module_body.append(self._make_function("render", node.body, prologue))
        return ast.Module(body=module_body, type_ignores=[])

    def _make_function(
        self,
        name: str,
        nodes: Sequence[Node],
        prologue: Sequence[ast.stmt] = (),
    ) -> ast.FunctionDef:
        """Generate ``def name(ctx, _session)`` returning the joined buffer."""
        body: list[ast.stmt] = list(prologue)
        body.extend(
            [
                # buf = []
                ast.Assign(
                    targets=[ast.Name(id="buf", ctx=ast.Store())],
                    value=ast.List(elts=[], ctx=ast.Load()),
                ),
                # _append = buf.append
                ast.Assign(
                    targets=[ast.Name(id="_append", ctx=ast.Store())],
                    value=ast.Attribute(
                        value=ast.Name(id="buf", ctx=ast.Load()),
                        attr="append",
                        ctx=ast.Load(),
                    ),
                ),
            ]
        )
        for child in nodes:
            body.extend(self._compile_node(child))

        # return ''.join(buf)
        body.append(
            ast.Return(
                value=ast.Call(
                    func=ast.Attribute(
                        value=ast.Constant(value=""),
                        attr="join",
                        ctx=ast.Load(),
                    ),
                    args=[ast.Name(id="buf", ctx=ast.Load())],
                    keywords=[],
                ),
            )
        )

        return ast.FunctionDef(
            name=name,
            args=ast.arguments(
                posonlyargs=[],
                args=[ast.arg(arg="ctx"), ast.arg(arg="_session")],
                vararg=None,
                kwonlyargs=[],
                kw_defaults=[],
                kwarg=None,
                defaults=[],
            ),
            body=body,
            decorator_list=[],
            returns=None,
            type_params=[],
        )

    def _emit_output(self, value_expr: ast.expr) -> ast.stmt:
        """Generate ``_append(value)``."""
        return ast.Expr(
            value=ast.Call(
                func=ast.Name(id="_append", ctx=ast.Load()),
                args=[value_expr],
                keywords=[],
            ),
        )

    def _make_line_marker(self, lineno: int) -> ast.stmt:
        """Generate ``_session.line = lineno``."""
        return ast.Assign(
            targets=[
                ast.Attribute(
                    value=ast.Name(id="_session", ctx=ast.Load()),
                    attr="line",
                    ctx=ast.Store(),
                )
            ],
            value=ast.Constant(value=lineno),
        )

    def _compile_node(self, node: Node) -> list[ast.stmt]:
        """Compile a single node to Python statements.

        Complexity: O(1) type dispatch using class name lookup.
        """
        node_type = type(node).__name__

        stmts: list[ast.stmt] = []
        if node_type in self._LINE_TRACKED_NODES:
            stmts.append(self._make_line_marker(node.lineno))

        handler = self._node_dispatch.get(node_type)
        if handler is None:
            raise TypeError(f"Cannot compile node {node_type}")
        stmts.extend(handler(node))
        return stmts
