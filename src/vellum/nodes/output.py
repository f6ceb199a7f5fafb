"""Output and literal text nodes."""

from __future__ import annotations

from dataclasses import dataclass

from vellum.nodes.base import Node
from vellum.nodes.expressions import Expr


@dataclass(frozen=True, slots=True)
class Data(Node):
    """Raw text between tags, emitted verbatim."""

    value: str


@dataclass(frozen=True, slots=True)
class Output(Node):
    """Output expression: {{ expr }}"""

    expr: Expr
