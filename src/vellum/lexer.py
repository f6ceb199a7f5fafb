"""Lexer for Vellum templates.

Two levels of tokenization:

1. :func:`tokenize` splits template source into ``DATA`` chunks and ``TAG``
   tokens (the text between ``{{`` and ``}}``). Scanning inside a tag is
   quote aware, so ``{{x | default:'}}'}}`` is a single tag.
2. :func:`tokenize_expression` splits the text of one tag into names,
   literals, operators and punctuation for the parser.

Example:
    >>> [t.type.value for t in tokenize("Hi {{name}}!")]
    ['data', 'tag', 'data', 'eof']

An empty tag such as ``{{ }}`` is not a directive and is kept as text, and
so is a ``{{`` that is never closed.

"""

from __future__ import annotations

import re

from vellum._types import ExprToken, ExprTokenType, Token, TokenType
from vellum.environment.exceptions import ErrorCode, TemplateSyntaxError

TAG_START = "{{"
TAG_END = "}}"

_QUOTES = frozenset("'\"")

_EXPR_TOKEN_RE = re.compile(
    r"""
    (?P<ws>\s+)
    |(?P<string>'(?:[^'\\]|\\.)*'|"(?:[^"\\]|\\.)*")
    |(?P<number>-?\d+(?:\.\d+)?(?![\w.]))
    |(?P<name>[A-Za-z_][\w-]*(?:\.[\w-]+)*)
    |(?P<operator>==|!=|<=|>=|=>|<|>)
    |(?P<punct>[|:,\[\]()])
    """,
    re.VERBOSE | re.DOTALL,
)

_PUNCT_TYPES = {
    "|": ExprTokenType.PIPE,
    ":": ExprTokenType.COLON,
    ",": ExprTokenType.COMMA,
    "[": ExprTokenType.LBRACKET,
    "]": ExprTokenType.RBRACKET,
    "(": ExprTokenType.LPAREN,
    ")": ExprTokenType.RPAREN,
}

_ESCAPE_RE = re.compile(r"\\(.)", re.DOTALL)


class _LineTracker:
    """Line and column lookup for indices visited in increasing order.

    Newlines are counted only between the previous index and the next one,
    so a full pass over the source stays linear.
    """

    __slots__ = ("_line_start", "_lineno", "_offset", "_source")

    def __init__(self, source: str):
        self._source = source
        self._offset = 0
        self._lineno = 1
        self._line_start = 0

    def position(self, index: int) -> tuple[int, int]:
        """1-based line and 0-based column of ``index``."""
        newlines = self._source.count("\n", self._offset, index)
        if newlines:
            self._lineno += newlines
            self._line_start = self._source.rfind("\n", self._offset, index) + 1
        self._offset = index
        return self._lineno, index - self._line_start


def _find_tag_end(source: str, start: int) -> tuple[int, str | None]:
    """Index of the ``}}`` closing a tag whose content begins at ``start``.

    Returns ``(-1, quote)`` when the source ends first; ``quote`` is the
    unterminated quote character, if any.
    """
    quote: str | None = None
    i = start
    end = len(source)
    while i < end:
        char = source[i]
        if quote is not None:
            if char == "\\":
                i += 2
                continue
            if char == quote:
                quote = None
        elif char in _QUOTES:
            quote = char
        elif source.startswith(TAG_END, i):
            return i, None
        i += 1
    return -1, quote


def tokenize(source: str, name: str | None = None) -> list[Token]:
    """Split ``source`` into DATA and TAG tokens, terminated by EOF.

    A ``{{`` that is never closed is text, like any other unmatched input.

    Raises:
        TemplateSyntaxError: For a tag whose closing ``}}`` sits inside an
            unterminated string
    """
    tokens: list[Token] = []
    lines = _LineTracker(source)
    pos = 0
    length = len(source)

    while pos < length:
        start = source.find(TAG_START, pos)
        if start == -1:
            lineno, col = lines.position(pos)
            tokens.append(Token(TokenType.DATA, source[pos:], lineno, col))
            break

        content_start = start + len(TAG_START)
        end, open_quote = _find_tag_end(source, content_start)
        if end == -1 and (
            open_quote is None or source.find(TAG_END, content_start) == -1
        ):
            # No closing delimiter anywhere: the rest is text
            lineno, col = lines.position(pos)
            tokens.append(Token(TokenType.DATA, source[pos:], lineno, col))
            break

        if start > pos:
            lineno, col = lines.position(pos)
            tokens.append(Token(TokenType.DATA, source[pos:start], lineno, col))

        if end == -1:
            lineno, col = lines.position(start)
            raise TemplateSyntaxError(
                f"Unterminated string ({open_quote}) inside tag",
                lineno=lineno,
                name=name,
                source=source,
                col_offset=col,
                suggestion=f"Close the string with {open_quote} before '}}}}'",
                code=ErrorCode.UNCLOSED_STRING,
            )

        raw = source[content_start:end]
        content = raw.strip()
        if content:
            value_start = content_start + (len(raw) - len(raw.lstrip()))
            lineno, col = lines.position(value_start)
            tokens.append(Token(TokenType.TAG, content, lineno, col))
        else:
            lineno, col = lines.position(start)
            tokens.append(Token(TokenType.DATA, source[start : end + len(TAG_END)], lineno, col))
        pos = end + len(TAG_END)

    lineno, col = lines.position(length)
    tokens.append(Token(TokenType.EOF, "", lineno, col))
    return tokens


def unquote(literal: str) -> str:
    """Strip the quotes from a string literal and resolve backslash escapes."""
    return _ESCAPE_RE.sub(r"\1", literal[1:-1])


def tokenize_expression(
    tag: Token,
    name: str | None = None,
    source: str | None = None,
) -> list[ExprToken]:
    """Split the text of ``tag`` into expression tokens, terminated by END.

    Raises:
        TemplateSyntaxError: For characters that start no valid token
    """
    text = tag.value
    tokens: list[ExprToken] = []
    pos = 0
    while pos < len(text):
        match = _EXPR_TOKEN_RE.match(text, pos)
        col = tag.col_offset + pos
        if match is None:
            raise TemplateSyntaxError(
                f"Unexpected character {text[pos]!r} in tag",
                lineno=tag.lineno,
                name=name,
                source=source,
                col_offset=col,
                code=ErrorCode.INVALID_EXPRESSION,
            )
        kind = match.lastgroup
        value = match.group()
        pos = match.end()
        if kind == "ws":
            continue
        if kind == "punct":
            token_type = _PUNCT_TYPES[value]
        else:
            token_type = ExprTokenType(kind)
        tokens.append(ExprToken(token_type, value, tag.lineno, col))

    tokens.append(ExprToken(ExprTokenType.END, "", tag.lineno, tag.col_offset + len(text)))
    return tokens
