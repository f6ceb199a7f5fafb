"""Vellum Template: compiled template object ready for rendering.

The Template class wraps a compiled code object and provides the
``render()`` API.

Architecture:
    ```
    Template
    ├── _env_ref: WeakRef[Environment]  # Prevents circular refs
    ├── _code: code object              # Compiled Python bytecode
    ├── _module: ast.Module             # Compiled form, for error reports
    ├── _render_func: callable          # Extracted render(ctx, _session)
    └── _name, _filename, _source       # For error messages
    ```

Two-Phase Rendering:
    ```
    page.render(user=u)
      session = RenderSession(data=globals ∪ {user: u})
      phase 1: page.html    -> sections captured, layout 'base.html' declared
      phase 2: base.html    -> fills resolved from captured sections
      return phase-2 text   (phase-1 text is discarded when a layout exists)
    ```

Fragments:
``each``, ``include`` and ``embed`` render other templates in a child
session. ``each`` failures propagate; ``include``/``embed`` failures are
logged and replaced by an HTML comment marker.

Thread-Safety:
- Templates are immutable after construction
- ``render()`` creates only local state (buffers and a RenderSession)
- Multiple threads can call ``render()`` concurrently

"""

from __future__ import annotations

import ast
import logging
import weakref
from typing import TYPE_CHECKING, Any

from vellum.environment.exceptions import (
    ErrorCode,
    FragmentRenderError,
    TemplateError,
    TemplateExecutionError,
    build_source_snippet,
)
from vellum.render_context import RenderSession, active_session
from vellum.template.helpers import STATIC_NAMESPACE, iter_items

if TYPE_CHECKING:
    from vellum.compiler import CompiledTemplate
    from vellum.environment import Environment

logger = logging.getLogger(__name__)


class Template:
    """Compiled template ready for rendering.

    Wraps a compiled code object containing a ``render(ctx, _session)``
    function. Obtain instances from ``Environment.get_template()`` or
    ``Environment.from_string()``.

    Attributes:
        name: Template identifier (for error messages)
        filename: Source file path (for error messages)

    Error Enhancement:
        Exceptions raised by compiled code are wrapped in
        TemplateExecutionError with the template name, line, source snippet
        and the compiled Python source:
            ```
            Execution Error: '<' not supported between instances of 'str' and 'int'
              Location: page.html:3
            ```

    Example:
            >>> from vellum import Environment
            >>> env = Environment()
            >>> t = env.from_string("Hello, {{ name | upper }}!")
            >>> t.render(name="World")
            'Hello, WORLD!'

            >>> t.render({"name": "World"})  # Dict context also works
            'Hello, WORLD!'

    """

    __slots__ = (
        "_code",
        "_env_ref",
        "_filename",
        "_module",
        "_name",
        "_render_func",
        "_source",
    )

    def __init__(
        self,
        env: Environment,
        compiled: CompiledTemplate,
        name: str | None,
        filename: str | None,
        source: str | None = None,
    ):
        """Initialize template with compiled code.

        Args:
            env: Parent Environment (stored as weak reference)
            compiled: Code object plus the module it was compiled from
            name: Template name (for error messages)
            filename: Source filename (for error messages)
            source: Template source for runtime error snippets
        """
        from vellum.environment.filters import apply_chain

        # Use weakref to prevent circular reference: Template <-> Environment
        self._env_ref: weakref.ref[Environment] = weakref.ref(env)
        self._code = compiled.code
        self._module = compiled.module
        self._name = name
        self._filename = filename
        self._source = source

        filters = env.filters

        def _chain(value: Any, steps: tuple[tuple[str, str | None], ...]) -> Any:
            return apply_chain(steps, value, filters)

        def _each(
            session: RenderSession,
            collection: Any,
            target: str,
            template_name: str,
        ) -> str:
            parts = []
            for item in iter_items(collection):
                ctx = dict(session.data)
                ctx[target] = item
                parts.append(self._render_fragment(session, template_name, ctx))
            return "".join(parts)

        def _include(session: RenderSession, template_name: str) -> str:
            try:
                return self._render_fragment(session, template_name, dict(session.data))
            except TemplateError as e:
                return self._fragment_failed("include", template_name, e)

        def _embed(session: RenderSession, template_name: str, bindings: dict[str, Any]) -> str:
            ctx = dict(session.data)
            ctx.update(bindings)
            try:
                return self._render_fragment(session, template_name, ctx)
            except TemplateError as e:
                return self._fragment_failed("embed", template_name, e)

        namespace: dict[str, Any] = STATIC_NAMESPACE.copy()
        namespace.update(
            {
                "_chain": _chain,
                "_each": _each,
                "_include": _include,
                "_embed": _embed,
            }
        )
        exec(self._code, namespace)
        self._render_func = namespace["render"]

    @property
    def _env(self) -> Environment:
        """Get the Environment (dereferences weak reference)."""
        env = self._env_ref()
        if env is None:
            raise RuntimeError(
                f"Environment has been garbage collected (template: {self._name or 'unknown'})"
            )
        return env

    @property
    def name(self) -> str | None:
        """Template name."""
        return self._name

    @property
    def filename(self) -> str | None:
        """Source filename."""
        return self._filename

    @property
    def source(self) -> str | None:
        return self._source

    @property
    def compiled_source(self) -> str:
        """Python source of the compiled form."""
        return ast.unparse(self._module)

    def render(self, *args: Any, **kwargs: Any) -> str:
        """Render the template, applying declared layouts.

        Args:
            *args: Single dict of context variables
            **kwargs: Context variables as keyword arguments

        Returns:
            Rendered text of the outermost layout, or of this template when
            it declares no layout

        Raises:
            TemplateNotFoundError: A layout or ``each`` partial is missing
            TemplateExecutionError: Compiled code failed, or layouts form a cycle
        """
        env = self._env

        ctx: dict[str, Any] = {}
        ctx.update(env.globals)
        if args:
            if len(args) == 1 and isinstance(args[0], dict):
                ctx.update(args[0])
            else:
                raise TypeError(
                    f"render() takes at most 1 positional argument (a dict), got {len(args)}"
                )
        ctx.update(kwargs)

        session = RenderSession(
            data=ctx,
            template_name=self._name,
            source=self._source,
            max_include_depth=env.max_include_depth,
        )
        if self._name:
            session.templates[self._name] = self

        with active_session(session):
            text = self._execute(ctx, session)
            applied = [self._name]
            while session.layout is not None:
                layout_name = session.layout
                if layout_name in applied:
                    chain = " -> ".join(n or "<string>" for n in [*applied, layout_name])
                    raise TemplateExecutionError(
                        f"Layout cycle detected: {chain}",
                        template_name=session.template_name,
                        lineno=None,
                        code=ErrorCode.LAYOUT_CYCLE,
                        suggestion="A layout must not extend itself or a template that extends it",
                    )
                applied.append(layout_name)
                layout = self._load(session, layout_name)
                logger.debug("Applying layout %r to %r", layout_name, applied[0])
                session.begin_phase(layout_name, layout._source)
                text = layout._execute(ctx, session)
        return text

    def _execute(self, ctx: dict[str, Any], session: RenderSession) -> str:
        """Run the compiled render function with error enhancement."""
        try:
            result: str = self._render_func(ctx, session)
            return result
        except TemplateError:
            raise
        except Exception as e:
            raise self._enhance_error(e, session) from e

    def _load(self, session: RenderSession, template_name: str) -> Template:
        """Fetch a template once per render; later uses hit the session memo."""
        template = session.templates.get(template_name)
        if template is None:
            template = self._env.get_template(template_name)
            session.templates[template_name] = template
        return template

    def _render_fragment(
        self,
        session: RenderSession,
        template_name: str,
        ctx: dict[str, Any],
    ) -> str:
        """Render a partial in a child session and return its own text.

        A layout declared by the partial is ignored.
        """
        session.check_include_depth(template_name)
        fragment = self._load(session, template_name)
        child = session.child_session(template_name)
        child.source = fragment._source
        with active_session(child):
            text = fragment._execute(ctx, child)
        if child.layout is not None:
            logger.debug(
                "Ignoring layout %r declared by fragment %r", child.layout, template_name
            )
        return text

    def _fragment_failed(self, kind: str, template_name: str, error: TemplateError) -> str:
        failure = FragmentRenderError(kind, template_name, error)
        logger.warning("%s", failure.marker())
        if not self._env.fragment_error_markers:
            return ""
        return failure.marker()

    def _enhance_error(
        self,
        error: Exception,
        session: RenderSession,
    ) -> TemplateExecutionError:
        """Convert a Python exception into TemplateExecutionError.

        Adds the template name, current line, a source snippet and the
        compiled Python source.
        """
        lineno = session.line or None
        error_str = str(error).strip()

        # Handle empty error messages (e.g., bare exceptions)
        if not error_str:
            error_str = f"{type(error).__name__} (no details available)"
        else:
            error_str = f"{type(error).__name__}: {error_str}"

        snippet = None
        if self._source and lineno:
            snippet = build_source_snippet(self._source, lineno)

        suggestion = None
        if isinstance(error, TypeError) and "not supported between" in error_str:
            suggestion = "Ordering comparisons need operands of compatible types"

        return TemplateExecutionError(
            error_str,
            template_name=session.template_name or self._name,
            lineno=lineno,
            compiled=self.compiled_source,
            source_snippet=snippet,
            template_stack=session.template_stack,
            suggestion=suggestion,
        )

    def __repr__(self) -> str:
        return f"<Template {self._name or '(inline)'}>"
