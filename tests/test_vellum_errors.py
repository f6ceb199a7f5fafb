"""Execution error reporting: line numbers, compiled code, template stacks."""

import pytest

from vellum import (
    ErrorCode,
    FragmentRenderError,
    TemplateError,
    TemplateExecutionError,
    TemplateNotFoundError,
    TemplateSyntaxError,
    build_source_snippet,
)


@pytest.fixture
def failing_env(make_env):
    def _make(templates):
        env = make_env(templates)

        def boom(value, arg):
            raise ValueError(f"cannot handle {value!r}")

        env.register_filter("boom", boom)
        return env

    return _make


class TestExecutionError:
    def test_wraps_python_error(self, env):
        tmpl = env.from_string("line1\n{{if a > 1}}x{{endif}}", name="cmp.html")
        with pytest.raises(TemplateExecutionError) as exc_info:
            tmpl.render(a="s")
        error = exc_info.value
        assert isinstance(error.__cause__, TypeError)
        assert error.code is ErrorCode.EXECUTION_ERROR
        assert error.template_name == "cmp.html"
        assert error.lineno == 2
        assert error.message.startswith("TypeError:")
        assert error.suggestion is not None

    def test_message_contents(self, env):
        tmpl = env.from_string("line1\n{{if a > 1}}x{{endif}}", name="cmp.html")
        with pytest.raises(TemplateExecutionError) as exc_info:
            tmpl.render(a="s")
        text = str(exc_info.value)
        assert "Location: cmp.html:2" in text
        assert "{{if a > 1}}" in text
        assert "Compiled code:" in text
        assert "def render(ctx, _session):" in text

    def test_compiled_form_attached(self, env):
        tmpl = env.from_string("{{ x | boom }}")
        env.register_filter("boom", lambda value, arg: 1 / 0)
        with pytest.raises(TemplateExecutionError) as exc_info:
            tmpl.render()
        error = exc_info.value
        assert error.compiled == tmpl.compiled_source
        assert "_chain(_resolve(ctx, ('x',)), (('boom', None),))" in error.compiled
        assert "ZeroDivisionError" in error.message

    def test_format_compact_omits_compiled_code(self, env):
        env.register_filter("boom", lambda value, arg: 1 / 0)
        with pytest.raises(TemplateExecutionError) as exc_info:
            env.from_string("{{ x | boom }}", name="t.html").render()
        compact = exc_info.value.format_compact()
        assert "V-RUN-001" in compact
        assert "t.html:1" in compact
        assert "Compiled code" not in compact

    def test_line_inside_section(self, failing_env):
        env = failing_env(
            {
                "L": "{{fill 'body'}}",
                "P": "{{extends 'L'}}\n{{section 'body'}}\nok\n{{ x | boom }}\n{{endsection}}",
            }
        )
        with pytest.raises(TemplateExecutionError) as exc_info:
            env.render("P", x=1)
        assert exc_info.value.template_name == "P"
        assert exc_info.value.lineno == 4

    def test_error_in_layout_names_layout(self, failing_env):
        env = failing_env({"L": "a\n{{ x | boom }}", "P": "{{extends 'L'}}"})
        with pytest.raises(TemplateExecutionError) as exc_info:
            env.render("P", x=1)
        assert exc_info.value.template_name == "L"
        assert exc_info.value.lineno == 2

    def test_error_in_each_partial_has_stack(self, failing_env):
        env = failing_env(
            {
                "row.html": "{{ item | boom }}",
                "list.html": "header\n{{each item in items using 'row.html'}}",
            }
        )
        with pytest.raises(TemplateExecutionError) as exc_info:
            env.render("list.html", items=[1])
        error = exc_info.value
        assert error.template_name == "row.html"
        assert error.lineno == 1
        assert error.template_stack == [("list.html", 2)]
        assert "Template stack:" in str(error)
        assert "list.html:2" in str(error)

    def test_template_errors_pass_through_unwrapped(self, make_env):
        env = make_env({"list.html": "{{each i in items using 'gone.html'}}"})
        with pytest.raises(TemplateNotFoundError):
            env.render("list.html", items=[1])


class TestErrorHierarchy:
    @pytest.mark.parametrize(
        "cls",
        [TemplateExecutionError, TemplateNotFoundError, TemplateSyntaxError, FragmentRenderError],
    )
    def test_all_are_template_errors(self, cls):
        assert issubclass(cls, TemplateError)

    def test_error_code_categories(self):
        assert ErrorCode.UNCLOSED_STRING.category == "lexer"
        assert ErrorCode.INVALID_BINDING.category == "parser"
        assert ErrorCode.LAYOUT_CYCLE.category == "runtime"
        assert ErrorCode.TEMPLATE_NOT_FOUND.category == "template"

    def test_fragment_marker(self):
        failure = FragmentRenderError("embed", "card.html", ValueError("bad --> input"))
        assert failure.marker() == "<!-- Embed error: bad --&gt; input -->"
        assert "Embed of 'card.html' failed" in str(failure)

    def test_not_found_compact_has_code(self):
        compact = TemplateNotFoundError("x.html").format_compact()
        assert "V-TPL-001" in compact


class TestSourceSnippet:
    def test_context_lines(self):
        source = "\n".join(f"line {i}" for i in range(1, 8))
        snippet = build_source_snippet(source, 4)
        assert [n for n, _ in snippet.lines] == [2, 3, 4, 5, 6]
        assert snippet.error_line == 4

    def test_clamped_at_edges(self):
        snippet = build_source_snippet("one\ntwo", 1, context_lines=3)
        assert [n for n, _ in snippet.lines] == [1, 2]

    def test_format_marks_error_line(self):
        text = build_source_snippet("a\nb\nc", 2, column=0).format()
        assert "b" in text
        assert "^" in text
