"""Immutable node tree produced by the parser and consumed by the compiler."""

from vellum.nodes.base import Node
from vellum.nodes.control_flow import Each, If
from vellum.nodes.expressions import (
    BoolOp,
    Compare,
    Const,
    Expr,
    FilterChain,
    FilterStep,
    Not,
    Path,
)
from vellum.nodes.output import Data, Output
from vellum.nodes.structure import Embed, Extends, Fill, Include, Section, Template

__all__ = [
    "BoolOp",
    "Compare",
    "Const",
    "Data",
    "Each",
    "Embed",
    "Expr",
    "Extends",
    "Fill",
    "FilterChain",
    "FilterStep",
    "If",
    "Include",
    "Node",
    "Not",
    "Output",
    "Path",
    "Section",
    "Template",
]
