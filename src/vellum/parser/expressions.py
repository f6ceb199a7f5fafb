"""Expression parsing for the Vellum parser.

Grammar (inside a single tag):

    condition   := or_expr
    or_expr     := and_expr ('or' and_expr)*
    and_expr    := not_expr ('and' not_expr)*
    not_expr    := 'not' not_expr | comparison
    comparison  := operand (('==' | '!=' | '<' | '<=' | '>' | '>=') operand)?
    operand     := '(' or_expr ')' | chain
    chain       := atom ('|' NAME (':' arg)?)*
    atom        := STRING | NUMBER | 'true' | 'false' | 'null' | path
    arg         := STRING | NUMBER | NAME

Output tags (``{{ expr }}``) accept a single ``chain``. There is no
arithmetic and no function calls.

"""

from __future__ import annotations

from vellum._types import ExprToken, ExprTokenType, Token
from vellum.environment.exceptions import ErrorCode
from vellum.lexer import tokenize_expression, unquote
from vellum.nodes import BoolOp, Compare, Const, Expr, FilterChain, FilterStep, Not, Path
from vellum.parser.errors import ParseError

COMPARE_OPERATORS = frozenset({"==", "!=", "<", "<=", ">", ">="})

_LITERAL_NAMES: dict[str, bool | None] = {"true": True, "false": False, "null": None}
_RESERVED = frozenset({"and", "or", "not"})


class ExpressionParsingMixin:
    """Mixin for parsing the contents of one tag.

    Required Host Attributes:
        - _name: template name for errors
        - _source: template source for errors
    """

    _name: str | None
    _source: str | None
    _expr: list[ExprToken]
    _epos: int

    # ------------------------------------------------------------------
    # Token cursor
    # ------------------------------------------------------------------

    def _begin_tag(self, tag: Token, skip_keyword: bool = True) -> None:
        """Tokenize ``tag`` and position the cursor after its keyword."""
        self._expr = tokenize_expression(tag, self._name, self._source)
        self._epos = 1 if skip_keyword else 0

    @property
    def _etok(self) -> ExprToken:
        return self._expr[self._epos]

    def _eadvance(self) -> ExprToken:
        tok = self._expr[self._epos]
        if tok.type is not ExprTokenType.END:
            self._epos += 1
        return tok

    def _ematch(self, token_type: ExprTokenType, value: str | None = None) -> bool:
        tok = self._etok
        return tok.type is token_type and (value is None or tok.value == value)

    def _eexpect(
        self,
        token_type: ExprTokenType,
        value: str | None = None,
        message: str | None = None,
        suggestion: str | None = None,
        code: ErrorCode | None = None,
    ) -> ExprToken:
        if not self._ematch(token_type, value):
            expected = repr(value) if value else token_type.value
            raise self._expr_error(
                message or f"Expected {expected}, got {self._describe(self._etok)}",
                suggestion=suggestion,
                code=code,
            )
        return self._eadvance()

    def _eend(self, what: str) -> None:
        """Require that the tag has been fully consumed."""
        if self._etok.type is not ExprTokenType.END:
            raise self._expr_error(
                f"Unexpected {self._describe(self._etok)} in {what}",
            )

    def _expr_error(
        self,
        message: str,
        token: ExprToken | None = None,
        suggestion: str | None = None,
        code: ErrorCode | None = None,
    ) -> ParseError:
        return ParseError(
            message,
            token or self._etok,
            source=self._source,
            filename=self._name,
            suggestion=suggestion,
            code=code,
        )

    @staticmethod
    def _describe(tok: ExprToken) -> str:
        if tok.type is ExprTokenType.END:
            return "end of tag"
        return f"{tok.type.value} {tok.value!r}"

    # ------------------------------------------------------------------
    # Grammar
    # ------------------------------------------------------------------

    def _parse_condition(self) -> Expr:
        return self._parse_or()

    def _parse_or(self) -> Expr:
        first = self._etok
        values = [self._parse_and()]
        while self._ematch(ExprTokenType.NAME, "or"):
            self._eadvance()
            values.append(self._parse_and())
        if len(values) == 1:
            return values[0]
        return BoolOp(lineno=first.lineno, col_offset=first.col_offset, op="or", values=tuple(values))

    def _parse_and(self) -> Expr:
        first = self._etok
        values = [self._parse_not()]
        while self._ematch(ExprTokenType.NAME, "and"):
            self._eadvance()
            values.append(self._parse_not())
        if len(values) == 1:
            return values[0]
        return BoolOp(
            lineno=first.lineno, col_offset=first.col_offset, op="and", values=tuple(values)
        )

    def _parse_not(self) -> Expr:
        if self._ematch(ExprTokenType.NAME, "not"):
            tok = self._eadvance()
            return Not(lineno=tok.lineno, col_offset=tok.col_offset, operand=self._parse_not())
        return self._parse_comparison()

    def _parse_comparison(self) -> Expr:
        left = self._parse_operand()
        if self._etok.type is ExprTokenType.OPERATOR:
            op_tok = self._eadvance()
            if op_tok.value not in COMPARE_OPERATORS:
                raise self._expr_error(
                    f"Unknown comparison operator {op_tok.value!r}",
                    token=op_tok,
                    suggestion="Use one of: == != < <= > >=",
                )
            right = self._parse_operand()
            return Compare(
                lineno=left.lineno,
                col_offset=left.col_offset,
                left=left,
                op=op_tok.value,
                right=right,
            )
        return left

    def _parse_operand(self) -> Expr:
        if self._ematch(ExprTokenType.LPAREN):
            self._eadvance()
            inner = self._parse_or()
            self._eexpect(ExprTokenType.RPAREN, message="Expected ')' to close '('")
            return inner
        return self._parse_chain()

    def _parse_chain(self) -> Expr:
        """Parse ``atom | filter:arg | ...``."""
        value = self._parse_atom()
        steps: list[FilterStep] = []
        while self._ematch(ExprTokenType.PIPE):
            self._eadvance()
            name_tok = self._eexpect(
                ExprTokenType.NAME,
                message=f"Expected filter name after '|', got {self._describe(self._etok)}",
            )
            arg: str | None = None
            if self._ematch(ExprTokenType.COLON):
                self._eadvance()
                arg = self._parse_filter_arg()
            steps.append(
                FilterStep(
                    lineno=name_tok.lineno,
                    col_offset=name_tok.col_offset,
                    name=name_tok.value,
                    arg=arg,
                )
            )
        if not steps:
            return value
        return FilterChain(
            lineno=value.lineno, col_offset=value.col_offset, value=value, steps=tuple(steps)
        )

    def _parse_filter_arg(self) -> str:
        tok = self._etok
        if tok.type is ExprTokenType.STRING:
            self._eadvance()
            return unquote(tok.value)
        if tok.type in (ExprTokenType.NUMBER, ExprTokenType.NAME):
            self._eadvance()
            return tok.value
        raise self._expr_error(
            f"Expected filter argument after ':', got {self._describe(tok)}",
            suggestion="Quote the argument: truncate:'20'",
        )

    def _parse_atom(self) -> Expr:
        tok = self._etok
        if tok.type is ExprTokenType.STRING:
            self._eadvance()
            return Const(lineno=tok.lineno, col_offset=tok.col_offset, value=unquote(tok.value))
        if tok.type is ExprTokenType.NUMBER:
            self._eadvance()
            number: int | float = float(tok.value) if "." in tok.value else int(tok.value)
            return Const(lineno=tok.lineno, col_offset=tok.col_offset, value=number)
        if tok.type is ExprTokenType.NAME and tok.value not in _RESERVED:
            self._eadvance()
            if tok.value in _LITERAL_NAMES:
                return Const(
                    lineno=tok.lineno, col_offset=tok.col_offset, value=_LITERAL_NAMES[tok.value]
                )
            return self._make_path(tok)
        raise self._expr_error(f"Expected a value, got {self._describe(tok)}")

    def _make_path(self, tok: ExprToken) -> Path:
        segments = tuple(tok.value.split("."))
        return Path(lineno=tok.lineno, col_offset=tok.col_offset, segments=segments)

    def _parse_path(self, what: str) -> Path:
        tok = self._eexpect(
            ExprTokenType.NAME,
            message=f"Expected a dotted path for {what}, got {self._describe(self._etok)}",
        )
        if tok.value in _RESERVED or tok.value in _LITERAL_NAMES:
            raise self._expr_error(f"{tok.value!r} cannot be used as a path", token=tok)
        return self._make_path(tok)

    def _parse_template_name(self, directive: str) -> str:
        """Parse the quoted template or section name following a directive."""
        tok = self._eexpect(
            ExprTokenType.STRING,
            message=f"'{directive}' expects a quoted name, got {self._describe(self._etok)}",
            suggestion=f"{{{{{directive} 'name'}}}}",
        )
        return unquote(tok.value)
