"""Vellum RenderSession: per-render layout, section and position state.

Every top-level ``Template.render()`` call creates a fresh session and
passes it explicitly to compiled code as ``_session``. Nothing about a
render (declared layout, captured sections, include depth) lives at
module level, so consecutive or concurrent renders never see each
other's sections.

Lifecycle of one render:
    ```
    page.html     phase 1  declare_layout("base.html"), capture_section(...)
    base.html     phase 2  resolve_fill(...), maybe declare_layout("root.html")
    root.html     phase 3  ...
    ```

Fragments (``each``/``include``/``embed``) run in a child session that
shares the section map and template memo with its parent but keeps its
own layout slot, line and depth.

The active session is also published through a ContextVar so custom
filters can reach it with :func:`get_render_session`.

"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from vellum.template import Template

logger = logging.getLogger(__name__)


@dataclass
class RenderSession:
    """Render-scoped state shared by a template, its layouts and fragments.

    Attributes:
        data: Base data for fragments (globals merged with caller context)
        template_name: Template currently executing, for error messages
        source: Its source text, for runtime error snippets
        line: Current source line (updated by generated code)
        include_depth: Fragment nesting depth
        max_include_depth: Depth at which fragments stop recursing
        template_stack: ``(template_name, line)`` chain for error traces
        sections: Captured section text by name (shared with children)
        layout: Layout declared by the template currently executing
        phase: 1 for the requested template, +1 per layout applied
        templates: Compiled templates loaded during this render
    """

    data: dict[str, Any] = field(default_factory=dict)
    template_name: str | None = None
    source: str | None = None
    line: int = 0

    # 50 is deeper than any real partial hierarchy and still catches a
    # template that includes itself before Python's recursion limit does.
    include_depth: int = 0
    max_include_depth: int = 50
    template_stack: list[tuple[str, int]] = field(default_factory=list)

    sections: dict[str, str] = field(default_factory=dict)
    section_phases: dict[str, int] = field(default_factory=dict)
    layout: str | None = None
    phase: int = 1

    templates: dict[str, Template] = field(default_factory=dict)

    def declare_layout(self, name: str) -> None:
        """Record the layout for the template currently executing.

        Called at the top of the generated ``render`` function; when a
        template declares several layouts only the last one counts.
        """
        self.layout = name

    @property
    def current_layout(self) -> str | None:
        return self.layout

    def capture_section(self, name: str, text: str) -> None:
        """Store rendered section text under ``name``.

        Within a phase the latest capture wins. A layout (later phase) never
        replaces a section the more derived template already provided; its
        own section then serves only as a default.
        """
        captured_in = self.section_phases.get(name)
        if captured_in is not None and captured_in < self.phase:
            logger.debug("Section %r already provided in phase %d", name, captured_in)
            return
        self.sections[name] = text
        self.section_phases[name] = self.phase

    def resolve_fill(self, name: str) -> str:
        """Captured text for ``name``, or ``""`` when nothing was captured."""
        return self.sections.get(name, "")

    def begin_phase(self, template_name: str, source: str | None = None) -> None:
        """Switch to executing the declared layout ``template_name``."""
        self.phase += 1
        self.layout = None
        self.line = 0
        self.template_name = template_name
        self.source = source

    def check_include_depth(self, template_name: str) -> None:
        """Raise when rendering ``template_name`` would nest too deeply.

        Raises:
            TemplateExecutionError: If depth >= max_include_depth
        """
        if self.include_depth >= self.max_include_depth:
            from vellum.environment.exceptions import ErrorCode, TemplateExecutionError

            raise TemplateExecutionError(
                f"Maximum include depth exceeded ({self.max_include_depth}) "
                f"when rendering '{template_name}'",
                template_name=self.template_name,
                lineno=self.line or None,
                template_stack=self.template_stack,
                suggestion="Check for partials that include themselves: A -> B -> A",
                code=ErrorCode.INCLUDE_DEPTH,
            )

    def child_session(self, template_name: str) -> RenderSession:
        """Session for a fragment rendered from the current position.

        Shares data, sections and the template memo; appends the current
        location to the template stack.
        """
        stack = self.template_stack.copy()
        if self.template_name and self.line > 0:
            stack.append((self.template_name, self.line))

        return RenderSession(
            data=self.data,
            template_name=template_name,
            source=None,
            line=0,
            include_depth=self.include_depth + 1,
            max_include_depth=self.max_include_depth,
            template_stack=stack,
            sections=self.sections,
            section_phases=self.section_phases,
            phase=self.phase,
            templates=self.templates,
        )


# Module-level ContextVar
_render_session: ContextVar[RenderSession | None] = ContextVar(
    "render_session",
    default=None,
)


def get_render_session() -> RenderSession | None:
    """Get the session of the render in progress (None outside a render)."""
    return _render_session.get()


@contextmanager
def active_session(session: RenderSession) -> Iterator[RenderSession]:
    """Publish ``session`` as the current one for the duration of the block."""
    token: Token[RenderSession | None] = _render_session.set(session)
    try:
        yield session
    finally:
        _render_session.reset(token)
