"""Template structure block parsing for the Vellum parser.

Provides mixin for parsing layout and fragment tags (extends, section,
fill, include, embed).
"""

from __future__ import annotations

from vellum._types import ExprToken, ExprTokenType, Token
from vellum.environment.exceptions import ErrorCode
from vellum.lexer import unquote
from vellum.nodes import Embed, Extends, Fill, Include, Path, Section
from vellum.parser.blocks.core import BlockStackMixin

_SECTION_END = frozenset({"endsection"})

_EMBED_USAGE = "{{embed 'card.html' with ['title' => post.title, 'url' => post.url]}}"


class TemplateStructureBlockParsingMixin(BlockStackMixin):
    """Mixin for parsing template structure tags.

    Required Host Attributes:
        - All from BlockStackMixin
        - All from ExpressionParsingMixin
        - _parse_body, _advance, _current
    """

    def _parse_extends(self, start: Token) -> Extends:
        """Parse {{extends 'layout.html'}}."""
        name = self._parse_named_tag(start)
        return Extends(lineno=start.lineno, col_offset=start.col_offset, template=name)

    def _parse_fill(self, start: Token) -> Fill:
        """Parse {{fill 'name'}}."""
        name = self._parse_named_tag(start)
        return Fill(lineno=start.lineno, col_offset=start.col_offset, name=name)

    def _parse_include(self, start: Token) -> Include:
        """Parse {{include 'partial.html'}}."""
        name = self._parse_named_tag(start)
        return Include(lineno=start.lineno, col_offset=start.col_offset, template=name)

    def _parse_section(self, start: Token) -> Section:
        """Parse {{section 'name'}}...{{endsection}}."""
        name = self._parse_named_tag(start)
        self._push_block("section", start)
        body = self._parse_body(_SECTION_END)
        self._advance()  # consume endsection
        self._pop_block()
        return Section(
            lineno=start.lineno,
            col_offset=start.col_offset,
            name=name,
            body=tuple(body),
        )

    def _parse_embed(self, start: Token) -> Embed:
        """Parse {{embed 'name' with ['key' => dotted.path, ...]}}.

        Binding values are restricted to dotted paths resolved against the
        current context; keys must be quoted.
        """
        self._begin_tag(start)
        template = self._parse_template_name("embed")
        self._expect_binding(ExprTokenType.NAME, "with", "Expected 'with' after the template name")
        self._expect_binding(ExprTokenType.LBRACKET, None, "Expected '[' to open the bindings")

        bindings: list[tuple[str, Path]] = []
        while not self._ematch(ExprTokenType.RBRACKET):
            key_tok = self._expect_binding(
                ExprTokenType.STRING, None, "Binding keys must be quoted strings"
            )
            self._expect_binding(ExprTokenType.OPERATOR, "=>", "Expected '=>' after binding key")
            value_tok = self._etok
            if value_tok.type is not ExprTokenType.NAME or value_tok.value in (
                "true",
                "false",
                "null",
                "and",
                "or",
                "not",
            ):
                raise self._expr_error(
                    f"Binding values must be dotted paths, got {self._describe(value_tok)}",
                    suggestion=_EMBED_USAGE,
                    code=ErrorCode.INVALID_BINDING,
                )
            self._eadvance()
            bindings.append((unquote(key_tok.value), self._make_path(value_tok)))
            if self._ematch(ExprTokenType.COMMA):
                self._eadvance()
            elif not self._ematch(ExprTokenType.RBRACKET):
                raise self._expr_error(
                    f"Expected ',' or ']' in bindings, got {self._describe(self._etok)}",
                    suggestion=_EMBED_USAGE,
                    code=ErrorCode.INVALID_BINDING,
                )
        self._eadvance()  # consume ']'
        self._eend("embed tag")
        self._advance()
        return Embed(
            lineno=start.lineno,
            col_offset=start.col_offset,
            template=template,
            bindings=tuple(bindings),
        )

    def _expect_binding(
        self, token_type: ExprTokenType, value: str | None, message: str
    ) -> ExprToken:
        return self._eexpect(
            token_type,
            value,
            message=f"{message}, got {self._describe(self._etok)}",
            suggestion=_EMBED_USAGE,
            code=ErrorCode.INVALID_BINDING,
        )

    def _parse_named_tag(self, start: Token) -> str:
        """Parse a tag of the form ``{{keyword 'name'}}`` and consume it."""
        self._begin_tag(start)
        name = self._parse_template_name(start.keyword)
        self._eend(f"{start.keyword} tag")
        self._advance()
        return name
