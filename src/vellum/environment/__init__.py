"""Vellum environment: configuration, loaders, filters and errors."""

from vellum.environment.exceptions import (
    ErrorCode,
    FragmentRenderError,
    SourceSnippet,
    TemplateError,
    TemplateExecutionError,
    TemplateNotFoundError,
    TemplateSyntaxError,
    build_source_snippet,
)
from vellum.environment.core import Environment
from vellum.environment.filters import BUILTIN_FILTERS, apply_chain, apply_filter
from vellum.environment.globals import GlobalData
from vellum.environment.loaders import ChoiceLoader, DictLoader, FileSystemLoader, Loader
from vellum.environment.registry import FilterRegistry

__all__ = [
    "BUILTIN_FILTERS",
    "ChoiceLoader",
    "DictLoader",
    "Environment",
    "ErrorCode",
    "FileSystemLoader",
    "FilterRegistry",
    "FragmentRenderError",
    "GlobalData",
    "Loader",
    "SourceSnippet",
    "TemplateError",
    "TemplateExecutionError",
    "TemplateNotFoundError",
    "TemplateSyntaxError",
    "apply_chain",
    "apply_filter",
    "build_source_snippet",
]
