"""Unit tests for the shape of generated code."""

import ast

from vellum.compiler import Compiler
from vellum.lexer import tokenize
from vellum.parser import Parser


def compile_source(source: str) -> ast.Module:
    node = Parser(tokenize(source), source=source).parse()
    return Compiler().compile(node, name="t.html").module


def function_names(module: ast.Module) -> list[str]:
    return [n.name for n in module.body if isinstance(n, ast.FunctionDef)]


def render_source(source: str) -> str:
    module = compile_source(source)
    render = next(n for n in module.body if getattr(n, "name", None) == "render")
    return ast.unparse(render)


class TestModuleShape:
    def test_single_render_function(self):
        assert function_names(compile_source("Hi")) == ["render"]

    def test_section_functions_in_post_order(self):
        module = compile_source(
            "{{section 'outer'}}{{section 'inner'}}i{{endsection}}o{{endsection}}"
        )
        assert function_names(module) == ["_section_0", "_section_1", "render"]
        source = render_source(
            "{{section 'outer'}}{{section 'inner'}}i{{endsection}}o{{endsection}}"
        )
        assert source.index("'inner'") < source.index("'outer'")

    def test_layout_declared_before_sections(self):
        source = render_source("{{section 'a'}}x{{endsection}}{{extends 'L'}}")
        assert source.index("declare_layout('L')") < source.index("capture_section('a'")

    def test_only_last_layout_declared(self):
        source = render_source("{{extends 'A'}}{{extends 'B'}}")
        assert "declare_layout('B')" in source
        assert "'A'" not in source

    def test_compiles_to_code_object(self):
        node = Parser(tokenize("x")).parse()
        compiled = Compiler().compile(node, filename="views/x.html")
        assert compiled.code.co_filename == "views/x.html"


class TestGeneratedStatements:
    def test_line_markers(self):
        source = render_source("a\n{{ b }}\n{{if c}}{{endif}}")
        assert "_session.line = 2" in source
        assert "_session.line = 3" in source

    def test_data_has_no_line_marker(self):
        assert "_session.line" not in render_source("just text")

    def test_output(self):
        assert "_append(_str(_resolve(ctx, ('a', 'b'))))" in render_source("{{ a.b }}")

    def test_comparison(self):
        assert "_compare('>=', _resolve(ctx, ('n',)), 3)" in render_source("{{if n >= 3}}{{endif}}")

    def test_elseif_becomes_elif(self):
        source = render_source("{{if a}}1{{elseif b}}2{{else}}3{{endif}}")
        assert "elif _resolve(ctx, ('b',)):" in source

    def test_empty_branch_is_pass(self):
        assert "pass" in render_source("{{if a}}{{endif}}")

    def test_each(self):
        source = render_source("{{each x in xs using 'row'}}")
        assert "_each(_session, _resolve(ctx, ('xs',)), 'x', 'row')" in source

    def test_embed(self):
        source = render_source("{{embed 'c' with ['t' => p.t]}}")
        assert "_embed(_session, 'c', {'t': _resolve(ctx, ('p', 't'))})" in source

    def test_fill(self):
        assert "_session.resolve_fill('body')" in render_source("{{fill 'body'}}")
