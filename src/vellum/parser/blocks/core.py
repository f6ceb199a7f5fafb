"""Block stack management for the Vellum parser.

Tracks open ``if``/``section`` blocks so unclosed blocks and stray end
tags are reported against the tag that opened them.
"""

from __future__ import annotations

from vellum._types import Token
from vellum.environment.exceptions import ErrorCode
from vellum.parser.errors import ParseError

# Closing keyword -> the block it closes
END_KEYWORDS: dict[str, str] = {
    "endif": "if",
    "elseif": "if",
    "else": "if",
    "endsection": "section",
}

_CLOSERS: dict[str, str] = {"if": "endif", "section": "endsection"}


class BlockStackMixin:
    """Mixin tracking the stack of open blocks.

    Required Host Attributes:
        - _name, _source: for error messages
        - _block_stack: list of (block_kind, opening token)
    """

    _name: str | None
    _source: str | None
    _block_stack: list[tuple[str, Token]]

    def _push_block(self, kind: str, token: Token) -> None:
        self._block_stack.append((kind, token))

    def _pop_block(self) -> tuple[str, Token]:
        return self._block_stack.pop()

    def _unclosed_block_error(self) -> ParseError:
        kind, opener = self._block_stack[-1]
        closer = _CLOSERS[kind]
        return ParseError(
            f"Unclosed '{kind}' block opened on line {opener.lineno}",
            opener,
            source=self._source,
            filename=self._name,
            suggestion=f"Add {{{{{closer}}}}} before the end of the template",
            code=ErrorCode.UNCLOSED_BLOCK,
        )

    def _unexpected_end_error(self, token: Token, keyword: str) -> ParseError:
        expected_kind = END_KEYWORDS[keyword]
        if self._block_stack:
            kind, opener = self._block_stack[-1]
            message = (
                f"Unexpected {{{{{keyword}}}}} inside '{kind}' block "
                f"opened on line {opener.lineno}"
            )
            suggestion = f"Close the '{kind}' block with {{{{{_CLOSERS[kind]}}}}} first"
        else:
            message = f"Unexpected {{{{{keyword}}}}} without a matching '{expected_kind}'"
            suggestion = None
        return ParseError(
            message,
            token,
            source=self._source,
            filename=self._name,
            suggestion=suggestion,
            code=ErrorCode.UNEXPECTED_TAG,
        )
