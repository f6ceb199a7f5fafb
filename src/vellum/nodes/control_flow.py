"""Control flow nodes."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from vellum.nodes.base import Node
from vellum.nodes.expressions import Expr, Path


@dataclass(frozen=True, slots=True)
class If(Node):
    """Conditional: {{if cond}}...{{elseif cond}}...{{else}}...{{endif}}"""

    test: Expr
    body: Sequence[Node]
    elif_: Sequence[tuple[Expr, Sequence[Node]]] = ()
    else_: Sequence[Node] = ()


@dataclass(frozen=True, slots=True)
class Each(Node):
    """Iteration over a partial: {{each item in items using 'row.html'}}"""

    target: str
    iter: Path
    template: str
