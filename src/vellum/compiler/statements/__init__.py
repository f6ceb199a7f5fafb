"""Statement compilation for the Vellum compiler.

The statements package is organized into logical modules:
- basic: Basic output (data, output)
- control_flow: Control flow (if, each)
- template_structure: Layouts and fragments (fill, include, embed)

"""

from __future__ import annotations

from vellum.compiler.statements.basic import BasicStatementMixin
from vellum.compiler.statements.control_flow import ControlFlowMixin
from vellum.compiler.statements.template_structure import TemplateStructureMixin


class StatementCompilationMixin(
    BasicStatementMixin,
    ControlFlowMixin,
    TemplateStructureMixin,
):
    """Combined mixin for compiling all statement types."""


__all__ = [
    "BasicStatementMixin",
    "ControlFlowMixin",
    "StatementCompilationMixin",
    "TemplateStructureMixin",
]
