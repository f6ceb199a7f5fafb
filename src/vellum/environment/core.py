"""Vellum Environment: central configuration and template management.

The Environment holds the loader, shared global data and user filters,
and turns template source into ``Template`` objects.

Configuration:
    ```python
    env = Environment(
        loader=FileSystemLoader("views/"),
        globals={"site": {"name": "Docs"}},
        filters={"shout": lambda value, arg: str(value).upper() + "!"},
        max_include_depth=50,
        fragment_error_markers=True,
    )
    ```

Compilation:
Templates are compiled from source on every ``get_template()`` call; there
is no cross-render cache. Within a single render, partials are compiled
once and reused (see ``RenderSession.templates``).

Thread-Safety:
Filters and globals use copy-on-write updates, so registering a filter
while another thread renders is safe.

"""

from __future__ import annotations

import logging
import sys
from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any, TextIO

from vellum.compiler import Compiler
from vellum.environment.exceptions import TemplateNotFoundError
from vellum.environment.globals import GlobalData
from vellum.environment.loaders import FileSystemLoader, Loader
from vellum.environment.registry import FilterRegistry
from vellum.lexer import tokenize
from vellum.parser import Parser
from vellum.template import Template

if TYPE_CHECKING:
    from vellum.environment.filters import FilterFunc

logger = logging.getLogger(__name__)

DEFAULT_MAX_INCLUDE_DEPTH = 50


class Environment:
    """Central configuration for compiling and rendering templates.

    Attributes:
        loader: Template source provider (None for string-only use)
        globals: Values merged underneath every render context
        filters: User filters, consulted before the built-ins
        max_include_depth: Fragment nesting limit per render
        fragment_error_markers: When False, failed include/embed render as ""

    Example:
            >>> env = Environment(loader=DictLoader({"hi.html": "Hi {{name}}"}))
            >>> env.render("hi.html", name="Ada")
            'Hi Ada'

            >>> env = Environment(path="views")     # shorthand for FileSystemLoader
            >>> env.set_path("themes/dark")
            'views'

    """

    def __init__(
        self,
        loader: Loader | None = None,
        *,
        path: str | Path | None = None,
        globals: Mapping[str, Any] | None = None,
        filters: Mapping[str, FilterFunc] | None = None,
        max_include_depth: int = DEFAULT_MAX_INCLUDE_DEPTH,
        fragment_error_markers: bool = True,
    ):
        if loader is not None and path is not None:
            raise ValueError("Pass either 'loader' or 'path', not both")
        if path is not None:
            loader = FileSystemLoader(path)
        if max_include_depth < 1:
            raise ValueError(f"max_include_depth must be >= 1, got {max_include_depth}")

        self.loader: Loader | None = loader
        self.globals = GlobalData(globals)
        self._filters = FilterRegistry(filters)
        self.max_include_depth = max_include_depth
        self.fragment_error_markers = fragment_error_markers

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @property
    def filters(self) -> FilterRegistry:
        """User filter registry (dict-like, copy-on-write)."""
        return self._filters

    def register_filter(self, name: str, func: FilterFunc) -> None:
        """Register a ``(value, arg) -> value`` filter under ``name``.

        Replaces a built-in or previously registered filter of the same name.
        """
        self._filters.register(name, func)
        logger.debug("Registered filter %r", name)

    @property
    def path(self) -> str | None:
        """Root directory of the FileSystemLoader, if that is the loader."""
        if isinstance(self.loader, FileSystemLoader) and self.loader.paths:
            return str(self.loader.paths[0])
        return None

    def set_path(self, path: str | Path) -> str | None:
        """Load templates from ``path`` from now on; return the previous path."""
        previous = self.path
        self.loader = FileSystemLoader(path)
        return previous

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def get_template(self, name: str) -> Template:
        """Load and compile a template by name.

        Raises:
            TemplateNotFoundError: If the loader has no such template
            TemplateSyntaxError: If the template fails to compile
        """
        if self.loader is None:
            raise TemplateNotFoundError(
                name,
                message=f"Template '{name}' not found: no loader configured",
            )
        source, filename = self.loader.get_source(name)
        return self._compile(source, name, filename)

    def from_string(self, source: str, name: str | None = None) -> Template:
        """Compile a template from source text."""
        return self._compile(source, name, None)

    def list_templates(self) -> list[str]:
        if self.loader is None:
            return []
        return self.loader.list_templates()

    def _compile(self, source: str, name: str | None, filename: str | None) -> Template:
        tokens = tokenize(source, name)
        node = Parser(tokens, name, filename, source).parse()
        compiled = Compiler().compile(node, name, filename)
        return Template(self, compiled, name, filename, source)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render(self, template_name: str, *args: Any, **kwargs: Any) -> str:
        """Load, compile and render ``template_name``.

        Example:
            >>> env.render("page.html", user=user)
        """
        return self.get_template(template_name).render(*args, **kwargs)

    def render_to_stream(
        self,
        template_name: str,
        *args: Any,
        stream: TextIO | None = None,
        **kwargs: Any,
    ) -> None:
        """Render ``template_name`` and write the text to ``stream``.

        Context is passed as for ``render()``; ``stream`` is keyword-only.
        Writes to ``sys.stdout`` when no stream is given. Nothing is written
        if rendering fails.

        Example:
            >>> env.render_to_stream("page.html", {"user": user}, stream=response)
        """
        text = self.render(template_name, *args, **kwargs)
        (stream if stream is not None else sys.stdout).write(text)

    def __repr__(self) -> str:
        return (
            f"<Environment loader={self.loader!r} filters={len(self._filters)} "
            f"globals={len(self.globals)}>"
        )
