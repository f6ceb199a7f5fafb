"""Vellum Template package: compiled template objects ready for rendering."""

from vellum.template.core import Template
from vellum.template.helpers import ABSENT, resolve

__all__ = ["ABSENT", "Template", "resolve"]
