"""Tag-specific parsing mixins."""

from vellum.parser.blocks.control_flow import ControlFlowBlockParsingMixin
from vellum.parser.blocks.core import BlockStackMixin
from vellum.parser.blocks.template_structure import TemplateStructureBlockParsingMixin

__all__ = [
    "BlockStackMixin",
    "ControlFlowBlockParsingMixin",
    "TemplateStructureBlockParsingMixin",
]
