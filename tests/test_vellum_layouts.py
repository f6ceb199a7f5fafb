"""Layout tests: extends, section and fill across one or more levels."""

import pytest

from vellum import ErrorCode, TemplateExecutionError, TemplateNotFoundError


class TestSingleLayout:
    def test_section_fills_layout(self, env_with_loader):
        assert env_with_loader.render("page.html", name="Ada") == "<html><body>Hello Ada</body></html>"

    def test_uppercase_body(self, make_env):
        env = make_env(
            {
                "L": "<{{fill 'body'}}>",
                "P": "{{extends 'L'}}{{section 'body'}}{{ text | upper }}{{endsection}}",
            }
        )
        assert env.render("P", text="body") == "<BODY>"

    def test_text_outside_sections_is_discarded(self, make_env):
        env = make_env(
            {
                "L": "[{{fill 'main'}}]",
                "P": "before {{extends 'L'}} between {{section 'main'}}M{{endsection}} after",
            }
        )
        assert env.render("P") == "[M]"

    def test_extends_position_does_not_matter(self, make_env):
        env = make_env(
            {
                "L": "[{{fill 'main'}}]",
                "P": "{{section 'main'}}M{{endsection}}{{extends 'L'}}",
            }
        )
        assert env.render("P") == "[M]"

    def test_unfilled_section_is_empty(self, make_env):
        env = make_env({"L": "[{{fill 'sidebar'}}]", "P": "{{extends 'L'}}"})
        assert env.render("P") == "[]"

    def test_fill_without_layout(self, env):
        tmpl = env.from_string("{{section 'a'}}A{{endsection}}<{{fill 'a'}}>")
        assert tmpl.render() == "<A>"

    def test_section_renders_once_per_fill(self, make_env):
        env = make_env(
            {
                "L": "{{fill 'x'}}{{fill 'x'}}",
                "P": "{{extends 'L'}}{{section 'x'}}ab{{endsection}}",
            }
        )
        assert env.render("P") == "abab"

    def test_layout_sees_context(self, make_env):
        env = make_env(
            {
                "L": "<title>{{ title }}</title>{{fill 'body'}}",
                "P": "{{extends 'L'}}{{section 'body'}}B{{endsection}}",
            }
        )
        assert env.render("P", title="Home") == "<title>Home</title>B"

    def test_last_extends_wins(self, make_env):
        env = make_env(
            {
                "A": "A:{{fill 's'}}",
                "B": "B:{{fill 's'}}",
                "P": "{{extends 'A'}}{{extends 'B'}}{{section 's'}}x{{endsection}}",
            }
        )
        assert env.render("P") == "B:x"

    def test_from_string_with_layout(self, env_with_loader):
        tmpl = env_with_loader.from_string(
            "{{extends 'layout.html'}}{{section 'body'}}X{{endsection}}"
        )
        assert tmpl.render() == "<html><body>X</body></html>"

    def test_section_inside_false_branch_is_still_captured(self, make_env):
        env = make_env(
            {
                "L": "[{{fill 's'}}]",
                "P": "{{extends 'L'}}{{if hide}}{{section 's'}}S{{endsection}}{{endif}}",
            }
        )
        assert env.render("P", hide=False) == "[S]"


class TestNestedSections:
    def test_outer_section_fills_inner(self, make_env):
        env = make_env(
            {
                "L": "{{fill 'outer'}}|{{fill 'inner'}}",
                "P": (
                    "{{extends 'L'}}"
                    "{{section 'outer'}}[{{section 'inner'}}in{{endsection}}{{fill 'inner'}}]"
                    "{{endsection}}"
                ),
            }
        )
        assert env.render("P") == "[in]|in"


class TestMultiLevel:
    @pytest.fixture
    def three_levels(self, make_env):
        return make_env(
            {
                "base.html": (
                    "<html><title>{{section 'title'}}Site{{endsection}}{{fill 'title'}}</title>"
                    "{{fill 'content'}}</html>"
                ),
                "two-col.html": (
                    "{{extends 'base.html'}}"
                    "{{section 'content'}}<main>{{fill 'body'}}</main>"
                    "<aside>{{fill 'sidebar'}}</aside>{{endsection}}"
                ),
                "page.html": (
                    "{{extends 'two-col.html'}}"
                    "{{section 'title'}}Page{{endsection}}"
                    "{{section 'body'}}Hi {{ name }}{{endsection}}"
                ),
                "plain.html": "{{extends 'two-col.html'}}{{section 'body'}}Plain{{endsection}}",
            }
        )

    def test_three_levels(self, three_levels):
        assert three_levels.render("page.html", name="Ada") == (
            "<html><title>Page</title><main>Hi Ada</main><aside></aside></html>"
        )

    def test_layout_section_is_default(self, three_levels):
        assert three_levels.render("plain.html") == (
            "<html><title>Site</title><main>Plain</main><aside></aside></html>"
        )

    def test_renders_are_independent(self, three_levels):
        three_levels.render("page.html", name="Ada")
        assert "Page" not in three_levels.render("plain.html")
        assert three_levels.render("base.html") == "<html><title>Site</title></html>"


class TestLayoutErrors:
    def test_missing_layout(self, make_env):
        env = make_env({"P": "{{extends 'nope.html'}}"})
        with pytest.raises(TemplateNotFoundError, match="nope.html"):
            env.render("P")

    def test_cycle(self, make_env):
        env = make_env({"a": "{{extends 'b'}}", "b": "{{extends 'a'}}"})
        with pytest.raises(TemplateExecutionError) as exc_info:
            env.render("a")
        assert exc_info.value.code is ErrorCode.LAYOUT_CYCLE
        assert "a -> b -> a" in str(exc_info.value)

    def test_self_extension(self, make_env):
        env = make_env({"self.html": "{{extends 'self.html'}}"})
        with pytest.raises(TemplateExecutionError, match="Layout cycle"):
            env.render("self.html")

    def test_syntax_error_in_layout(self, make_env):
        from vellum import TemplateSyntaxError

        env = make_env({"L": "{{if x}}", "P": "{{extends 'L'}}"})
        with pytest.raises(TemplateSyntaxError) as exc_info:
            env.render("P")
        assert exc_info.value.name == "L"
