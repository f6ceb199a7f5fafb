"""Expression nodes: values, filter chains and conditions."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from vellum.nodes.base import Node


@dataclass(frozen=True, slots=True)
class Expr(Node):
    """Base class for expressions."""


@dataclass(frozen=True, slots=True)
class Const(Expr):
    """Literal: 'text', 42, 1.5, true, false, null"""

    value: str | int | float | bool | None


@dataclass(frozen=True, slots=True)
class Path(Expr):
    """Dotted lookup into the render context: user.profile.name"""

    segments: tuple[str, ...]

    @property
    def dotted(self) -> str:
        return ".".join(self.segments)


@dataclass(frozen=True, slots=True)
class FilterStep(Node):
    """One ``| name:arg`` step. ``arg`` is always a string or None."""

    name: str
    arg: str | None = None


@dataclass(frozen=True, slots=True)
class FilterChain(Expr):
    """Value followed by zero or more filters: title | lower | default:'x'"""

    value: Expr
    steps: Sequence[FilterStep] = ()


@dataclass(frozen=True, slots=True)
class Compare(Expr):
    """Single relational comparison: left op right"""

    left: Expr
    op: str
    right: Expr


@dataclass(frozen=True, slots=True)
class Not(Expr):
    """Negation: not expr"""

    operand: Expr


@dataclass(frozen=True, slots=True)
class BoolOp(Expr):
    """Short-circuit boolean: a and b and c / a or b"""

    op: str  # 'and' | 'or'
    values: Sequence[Expr]
