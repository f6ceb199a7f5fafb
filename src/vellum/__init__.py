"""Vellum: a small layout-and-partials template engine.

Templates use ``{{ }}`` for everything: output, layouts, sections,
conditionals, iteration over partials, includes and embeds.

Quickstart:
    >>> from vellum import Environment
    >>> env = Environment()
    >>> env.from_string("Hello, {{ name | ucfirst }}!").render(name="world")
    'Hello, World!'

File-based templates with a layout:
    >>> from vellum import Environment, FileSystemLoader
    >>> env = Environment(loader=FileSystemLoader("views/"))
    >>> env.globals.set_all({"site": site})
    >>> env.render("pages/home.html", user=user)

Architecture:
Template Source → Lexer → Parser → Vellum nodes → Compiler → Python AST → exec()

Pipeline stages:
1. **Lexer**: Splits source into text and ``{{ }}`` tags
2. **Parser**: Builds an immutable node tree from the tags
3. **Compiler**: Transforms the node tree to a Python ``ast.Module``
4. **Template**: Wraps the compiled code with ``render()``, applying layouts

Lenient Lookups:
Missing variables resolve to ``ABSENT`` and print as the empty string;
unknown filters pass their value through. Use ``| default:'fallback'``
for optional values.

"""

from vellum._types import Token, TokenType
from vellum.environment import (
    BUILTIN_FILTERS,
    ChoiceLoader,
    DictLoader,
    Environment,
    ErrorCode,
    FileSystemLoader,
    FilterRegistry,
    FragmentRenderError,
    GlobalData,
    Loader,
    SourceSnippet,
    TemplateError,
    TemplateExecutionError,
    TemplateNotFoundError,
    TemplateSyntaxError,
    apply_chain,
    apply_filter,
    build_source_snippet,
)
from vellum.render_context import RenderSession, get_render_session
from vellum.template import ABSENT, Template, resolve

__version__ = "0.1.0"

__all__ = [
    "ABSENT",
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
    "RenderSession",
    "SourceSnippet",
    "Template",
    "TemplateError",
    "TemplateExecutionError",
    "TemplateNotFoundError",
    "TemplateSyntaxError",
    "Token",
    "TokenType",
    "__version__",
    "apply_chain",
    "apply_filter",
    "build_source_snippet",
    "get_render_session",
    "resolve",
]
