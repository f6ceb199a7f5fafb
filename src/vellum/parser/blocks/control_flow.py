"""Control flow block parsing for the Vellum parser.

Provides mixin for parsing ``if``/``elseif``/``else``/``endif`` and ``each``.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from vellum._types import ExprTokenType, Token
from vellum.nodes import Each, Expr, If
from vellum.parser.blocks.core import BlockStackMixin

if TYPE_CHECKING:
    from vellum.nodes import Node

_IF_BRANCH_END = frozenset({"elseif", "else", "endif"})


class ControlFlowBlockParsingMixin(BlockStackMixin):
    """Mixin for parsing control flow tags.

    Required Host Attributes:
        - All from BlockStackMixin
        - All from ExpressionParsingMixin
        - _parse_body, _directive, _advance, _current
    """

    def _parse_if(self, start: Token) -> If:
        """Parse {{if cond}}...{{elseif cond}}...{{else}}...{{endif}}."""
        test = self._parse_branch_test(start)
        self._push_block("if", start)
        body = self._parse_body(_IF_BRANCH_END)

        elif_: list[tuple[Expr, Sequence[Node]]] = []
        else_: Sequence[Node] = ()
        seen_else = False
        while True:
            tok = self._current
            keyword = self._directive(tok)
            if keyword == "endif":
                self._advance()
                break
            if seen_else:
                raise self._error(
                    f"{{{{{keyword}}}}} after {{{{else}}}}",
                    tok,
                    suggestion="{{else}} must be the last branch before {{endif}}",
                )
            if keyword == "elseif":
                cond = self._parse_branch_test(tok)
                elif_.append((cond, tuple(self._parse_body(_IF_BRANCH_END))))
            else:
                self._advance()
                else_ = tuple(self._parse_body(_IF_BRANCH_END))
                seen_else = True

        self._pop_block()
        return If(
            lineno=start.lineno,
            col_offset=start.col_offset,
            test=test,
            body=tuple(body),
            elif_=tuple(elif_),
            else_=else_,
        )

    def _parse_branch_test(self, tag: Token) -> Expr:
        self._begin_tag(tag)
        test = self._parse_condition()
        self._eend(f"{tag.keyword} condition")
        self._advance()
        return test

    def _parse_each(self, start: Token) -> Each:
        """Parse {{each item in items.path using 'partial'}}."""
        self._begin_tag(start)
        target = self._eexpect(
            ExprTokenType.NAME,
            message="Expected loop variable after 'each'",
            suggestion="{{each item in items using 'row.html'}}",
        )
        if not target.value.isidentifier():
            raise self._expr_error(
                f"Loop variable must be a plain name, got {target.value!r}", token=target
            )
        self._eexpect(
            ExprTokenType.NAME,
            "in",
            message=f"Expected 'in' after loop variable, got {self._describe(self._etok)}",
        )
        collection = self._parse_path("each")
        self._eexpect(
            ExprTokenType.NAME,
            "using",
            message=f"Expected 'using' after collection, got {self._describe(self._etok)}",
            suggestion="{{each item in items using 'row.html'}}",
        )
        template = self._parse_template_name("each ... using")
        self._eend("each tag")
        self._advance()
        return Each(
            lineno=start.lineno,
            col_offset=start.col_offset,
            target=target.value,
            iter=collection,
            template=template,
        )
