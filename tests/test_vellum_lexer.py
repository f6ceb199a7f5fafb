"""Tests for the Vellum lexer: tag splitting and in-tag tokenization."""

import pytest

from vellum import TemplateSyntaxError, Token, TokenType
from vellum._types import ExprTokenType
from vellum.environment.exceptions import ErrorCode
from vellum.lexer import tokenize, tokenize_expression, unquote


def _types(tokens):
    return [t.type for t in tokens]


class TestTokenize:
    """Splitting source into DATA and TAG tokens."""

    def test_plain_text(self):
        tokens = tokenize("Hello")
        assert _types(tokens) == [TokenType.DATA, TokenType.EOF]
        assert tokens[0].value == "Hello"

    def test_empty_source(self):
        assert _types(tokenize("")) == [TokenType.EOF]

    def test_text_and_tag(self):
        tokens = tokenize("Hi {{name}}!")
        assert _types(tokens) == [TokenType.DATA, TokenType.TAG, TokenType.DATA, TokenType.EOF]
        assert tokens[1].value == "name"
        assert (tokens[1].lineno, tokens[1].col_offset) == (1, 5)
        assert tokens[2].value == "!"

    def test_tag_whitespace_is_stripped(self):
        tokens = tokenize("{{   user.name   }}")
        assert tokens[0].type is TokenType.TAG
        assert tokens[0].value == "user.name"

    def test_line_numbers(self):
        tokens = tokenize("a\nb\n{{ x }}")
        tag = tokens[1]
        assert tag.type is TokenType.TAG
        assert tag.lineno == 3
        assert tag.col_offset == 3

    def test_adjacent_tags(self):
        tokens = tokenize("{{a}}{{b}}")
        assert [t.value for t in tokens if t.type is TokenType.TAG] == ["a", "b"]

    def test_closing_braces_inside_quotes(self):
        tokens = tokenize("{{ x | default:'}}' }}after")
        assert tokens[0].value == "x | default:'}}'"
        assert tokens[1].value == "after"

    def test_empty_tag_is_text(self):
        tokens = tokenize("a {{ }} b")
        assert _types(tokens) == [TokenType.DATA, TokenType.DATA, TokenType.DATA, TokenType.EOF]
        assert "".join(t.value for t in tokens) == "a {{ }} b"

    def test_single_braces_are_text(self):
        tokens = tokenize("function() { return {a: 1}; }")
        assert _types(tokens) == [TokenType.DATA, TokenType.EOF]


class TestUnclosedDelimiters:
    """A ``{{`` with no ``}}`` is text; a string hiding the ``}}`` is an error."""

    def test_unclosed_tag_is_text(self):
        tokens = tokenize("Hello {{ name", name="greet.html")
        assert _types(tokens) == [TokenType.DATA, TokenType.EOF]
        assert tokens[0].value == "Hello {{ name"

    def test_unclosed_tag_after_real_tags(self):
        tokens = tokenize("{{a}} and {{ b")
        assert _types(tokens) == [TokenType.TAG, TokenType.DATA, TokenType.EOF]
        assert tokens[1].value == " and {{ b"
        assert (tokens[1].lineno, tokens[1].col_offset) == (1, 5)

    def test_stray_braces_with_apostrophe_are_text(self):
        source = "<script>if (a {{ it's fine"
        assert tokenize(source)[0].value == source

    def test_unclosed_string(self):
        with pytest.raises(TemplateSyntaxError) as exc_info:
            tokenize("{{ x | default:'abc }}")
        assert exc_info.value.code is ErrorCode.UNCLOSED_STRING

    def test_unclosed_string_reports_line(self):
        with pytest.raises(TemplateSyntaxError) as exc_info:
            tokenize("one\ntwo\n{{ x | default:'three }}", name="greet.html")
        assert exc_info.value.lineno == 3
        assert "greet.html:3" in str(exc_info.value)


class TestLargeSources:
    """Positions stay correct across long inputs."""

    def test_line_numbers_of_many_tags(self):
        tokens = tokenize("line\n{{x}}" * 5000)
        tags = [t for t in tokens if t.type is TokenType.TAG]
        assert len(tags) == 5000
        assert [t.lineno for t in tags[:3]] == [2, 3, 4]
        assert tags[-1].lineno == 5001
        assert all(t.col_offset == 2 for t in tags)
        assert tokens[-1].lineno == 5001


class TestTokenizeExpression:
    """Tokens inside a single tag."""

    def _tokens(self, text):
        return tokenize_expression(Token(TokenType.TAG, text, 1, 2))

    def test_filter_chain(self):
        tokens = self._tokens("user.name | truncate:'20'")
        assert [t.type for t in tokens] == [
            ExprTokenType.NAME,
            ExprTokenType.PIPE,
            ExprTokenType.NAME,
            ExprTokenType.COLON,
            ExprTokenType.STRING,
            ExprTokenType.END,
        ]
        assert tokens[0].value == "user.name"
        assert tokens[4].value == "'20'"

    def test_hyphenated_filter_name(self):
        tokens = self._tokens("x | only-alpha")
        assert tokens[2].value == "only-alpha"

    def test_numbers(self):
        tokens = self._tokens("count >= 10")
        assert [t.type for t in tokens[:3]] == [
            ExprTokenType.NAME,
            ExprTokenType.OPERATOR,
            ExprTokenType.NUMBER,
        ]
        assert tokens[1].value == ">="

    def test_negative_and_float_numbers(self):
        tokens = self._tokens("-3 1.5")
        assert [t.value for t in tokens[:2]] == ["-3", "1.5"]
        assert all(t.type is ExprTokenType.NUMBER for t in tokens[:2])

    def test_embed_bindings(self):
        tokens = self._tokens("embed 'card' with ['title' => post.title]")
        values = [t.value for t in tokens[:-1]]
        assert values == ["embed", "'card'", "with", "[", "'title'", "=>", "post.title", "]"]

    def test_double_quoted_string(self):
        tokens = self._tokens('include "nav.html"')
        assert tokens[1].type is ExprTokenType.STRING
        assert unquote(tokens[1].value) == "nav.html"

    def test_column_offsets(self):
        tokens = self._tokens("a | b")
        assert [t.col_offset for t in tokens[:3]] == [2, 4, 6]

    def test_unexpected_character(self):
        with pytest.raises(TemplateSyntaxError) as exc_info:
            self._tokens("a + b")
        assert exc_info.value.code is ErrorCode.INVALID_EXPRESSION
        assert "'+'" in str(exc_info.value)


class TestUnquote:
    def test_single_quotes(self):
        assert unquote("'abc'") == "abc"

    def test_escaped_quote(self):
        assert unquote(r"'it\'s'") == "it's"

    def test_escaped_backslash(self):
        assert unquote(r"'a\\b'") == "a\\b"
