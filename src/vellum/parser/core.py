"""Vellum Parser: token stream to immutable node tree.

A recursive-descent parser over the lexer's DATA/TAG tokens. Tag-specific
parsing lives in mixins (``vellum.parser.blocks``), expression parsing in
``ExpressionParsingMixin``.

Directive Recognition:
A tag is a directive when its first word is a directive keyword and the
tag has the shape that keyword requires:

- ``extends section fill if elseif each include embed`` need arguments
- ``else endif endsection`` stand alone

Anything else is an output expression, so ``{{fill}}`` on its own prints
a variable called ``fill``.

"""

from __future__ import annotations

import logging
from collections.abc import Callable

from vellum._types import Token, TokenType
from vellum.environment.exceptions import ErrorCode
from vellum.nodes import Data, Node, Output
from vellum.nodes import Template as TemplateNode
from vellum.parser.blocks import ControlFlowBlockParsingMixin, TemplateStructureBlockParsingMixin
from vellum.parser.blocks.core import END_KEYWORDS
from vellum.parser.errors import ParseError
from vellum.parser.expressions import ExpressionParsingMixin

logger = logging.getLogger(__name__)

DIRECTIVES_WITH_ARGS = frozenset(
    {"extends", "section", "fill", "if", "elseif", "each", "include", "embed"}
)
BARE_DIRECTIVES = frozenset({"else", "endif", "endsection"})


class Parser(
    ControlFlowBlockParsingMixin,
    TemplateStructureBlockParsingMixin,
    ExpressionParsingMixin,
):
    """Parse a token list into a ``Template`` node.

    Example:
        >>> from vellum.lexer import tokenize
        >>> Parser(tokenize("Hi {{name}}")).parse().body
        (Data(lineno=1, col_offset=0, value='Hi '), Output(...))

    Raises:
        TemplateSyntaxError: On the first malformed tag or block
    """

    def __init__(
        self,
        tokens: list[Token],
        name: str | None = None,
        filename: str | None = None,
        source: str | None = None,
    ):
        self._tokens = tokens
        self._pos = 0
        self._name = name
        self._filename = filename
        self._source = source
        self._block_stack: list[tuple[str, Token]] = []
        self._expr = []
        self._epos = 0
        self._dispatch: dict[str, Callable[[Token], Node]] = {
            "extends": self._parse_extends,
            "section": self._parse_section,
            "fill": self._parse_fill,
            "if": self._parse_if,
            "each": self._parse_each,
            "include": self._parse_include,
            "embed": self._parse_embed,
        }

    # ------------------------------------------------------------------
    # Token navigation
    # ------------------------------------------------------------------

    @property
    def _current(self) -> Token:
        return self._tokens[self._pos]

    def _advance(self) -> Token:
        tok = self._tokens[self._pos]
        if tok.type is not TokenType.EOF:
            self._pos += 1
        return tok

    def _error(
        self,
        message: str,
        token: Token | None = None,
        suggestion: str | None = None,
        code: ErrorCode | None = None,
    ) -> ParseError:
        return ParseError(
            message,
            token or self._current,
            source=self._source,
            filename=self._name,
            suggestion=suggestion,
            code=code or ErrorCode.UNEXPECTED_TAG,
        )

    @staticmethod
    def _directive(token: Token) -> str | None:
        """Directive keyword of ``token``, or None for output tags and data."""
        if token.type is not TokenType.TAG:
            return None
        keyword = token.keyword
        has_args = bool(token.rest)
        if has_args and keyword in DIRECTIVES_WITH_ARGS:
            return keyword
        if not has_args and keyword in BARE_DIRECTIVES:
            return keyword
        return None

    # ------------------------------------------------------------------
    # Parsing
    # ------------------------------------------------------------------

    def parse(self) -> TemplateNode:
        body = self._parse_body()
        logger.debug("Parsed %s: %d top-level nodes", self._name or "<string>", len(body))
        return TemplateNode(lineno=1, col_offset=0, body=tuple(body), name=self._name)

    def _parse_body(self, end_keywords: frozenset[str] = frozenset()) -> list[Node]:
        """Parse nodes until EOF or a directive in ``end_keywords`` (not consumed)."""
        body: list[Node] = []
        while True:
            tok = self._current
            if tok.type is TokenType.EOF:
                if end_keywords:
                    raise self._unclosed_block_error()
                return body

            if tok.type is TokenType.DATA:
                self._advance()
                body.append(Data(lineno=tok.lineno, col_offset=tok.col_offset, value=tok.value))
                continue

            keyword = self._directive(tok)
            if keyword is None:
                body.append(self._parse_output(tok))
            elif keyword in end_keywords:
                return body
            elif keyword in END_KEYWORDS:
                raise self._unexpected_end_error(tok, keyword)
            else:
                body.append(self._dispatch[keyword](tok))

    def _parse_output(self, tag: Token) -> Output:
        """Parse {{ path | filter:'arg' }}."""
        self._begin_tag(tag, skip_keyword=False)
        expr = self._parse_chain()
        self._eend("output tag")
        self._advance()
        return Output(lineno=tag.lineno, col_offset=tag.col_offset, expr=expr)
