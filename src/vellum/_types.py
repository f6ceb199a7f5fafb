"""Token types shared by the lexer and parser."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TokenType(Enum):
    """Kinds of token produced by the lexer."""

    DATA = "data"
    TAG = "tag"
    EOF = "eof"


@dataclass(frozen=True, slots=True)
class Token:
    """A lexed chunk of template source.

    For ``TAG`` tokens, ``value`` is the stripped text between ``{{`` and
    ``}}``. ``lineno`` is 1-based, ``col_offset`` 0-based.
    """

    type: TokenType
    value: str
    lineno: int
    col_offset: int

    @property
    def keyword(self) -> str:
        """First word of a tag (empty for data tokens)."""
        if self.type is not TokenType.TAG or not self.value:
            return ""
        return self.value.split(None, 1)[0]

    @property
    def rest(self) -> str:
        """Tag text after the keyword."""
        parts = self.value.split(None, 1)
        return parts[1] if len(parts) > 1 else ""

    def __repr__(self) -> str:
        return f"Token({self.type.value}, {self.value!r}, {self.lineno}:{self.col_offset})"


class ExprTokenType(Enum):
    """Kinds of token found inside a tag."""

    NAME = "name"
    STRING = "string"
    NUMBER = "number"
    OPERATOR = "operator"
    PIPE = "pipe"
    COLON = "colon"
    COMMA = "comma"
    LBRACKET = "lbracket"
    RBRACKET = "rbracket"
    LPAREN = "lparen"
    RPAREN = "rparen"
    END = "end"


@dataclass(frozen=True, slots=True)
class ExprToken:
    """A token within a tag. ``col_offset`` is relative to the template line."""

    type: ExprTokenType
    value: str
    lineno: int
    col_offset: int
