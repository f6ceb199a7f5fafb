"""Vellum parser: builds the node tree from lexer tokens."""

from vellum.parser.core import Parser
from vellum.parser.errors import ParseError

__all__ = ["ParseError", "Parser"]
