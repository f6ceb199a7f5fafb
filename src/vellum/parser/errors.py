"""Parser error handling for Vellum.

Provides ParseError, a TemplateSyntaxError positioned at a token.
"""

from __future__ import annotations

from vellum._types import ExprToken, Token
from vellum.environment.exceptions import ErrorCode, TemplateSyntaxError


class ParseError(TemplateSyntaxError):
    """Syntax error raised by the parser, located at ``token``.

    Displays the offending source line with a caret under the token,
    matching the format used by the lexer.
    """

    def __init__(
        self,
        message: str,
        token: Token | ExprToken,
        source: str | None = None,
        filename: str | None = None,
        suggestion: str | None = None,
        code: ErrorCode | None = None,
    ):
        self.token = token
        super().__init__(
            message,
            lineno=token.lineno,
            name=filename,
            source=source,
            col_offset=token.col_offset,
            suggestion=suggestion,
            code=code or ErrorCode.INVALID_EXPRESSION,
        )
