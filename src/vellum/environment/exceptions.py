"""Exceptions for the Vellum template engine.

Exception Hierarchy:
TemplateError (base)
├── TemplateNotFoundError     # Loader has no template by that name
├── TemplateSyntaxError       # Malformed tag or directive (compile time)
├── TemplateExecutionError    # Compiled template failed while rendering
└── FragmentRenderError       # include/embed failure, rendered inline

Unknown filters and missing variables are deliberately *not* errors: the
first passes the value through, the second resolves to ``ABSENT``.

Example:
    ```
    V-TPL-001: Template 'pages/hom.html' not found
      Full path: views/pages/hom.html
      Available files: home.html, about.html
      Did you mean 'home.html'?
    ```

"""

from __future__ import annotations

from dataclasses import dataclass
from difflib import get_close_matches
from enum import Enum

from vellum.environment import terminal


class ErrorCode(Enum):
    """Searchable error codes.

    Format: V-{CATEGORY}-{NUMBER}
    Categories: LEX (lexer), PAR (parser), RUN (runtime), TPL (template loading)
    """

    # Lexer errors (V-LEX-xxx)
    UNCLOSED_STRING = "V-LEX-002"

    # Parser errors (V-PAR-xxx)
    UNEXPECTED_TAG = "V-PAR-001"
    UNCLOSED_BLOCK = "V-PAR-002"
    INVALID_EXPRESSION = "V-PAR-003"
    INVALID_BINDING = "V-PAR-004"

    # Runtime errors (V-RUN-xxx)
    EXECUTION_ERROR = "V-RUN-001"
    INCLUDE_DEPTH = "V-RUN-002"
    FRAGMENT_ERROR = "V-RUN-003"
    LAYOUT_CYCLE = "V-RUN-004"

    # Template loading errors (V-TPL-xxx)
    TEMPLATE_NOT_FOUND = "V-TPL-001"
    SYNTAX_ERROR = "V-TPL-002"

    @property
    def category(self) -> str:
        """Error category (e.g., 'runtime', 'lexer', 'parser', 'template')."""
        prefix = self.value.split("-")[1]
        return {
            "LEX": "lexer",
            "PAR": "parser",
            "RUN": "runtime",
            "TPL": "template",
        }.get(prefix, "unknown")


# ---------------------------------------------------------------------------
# Source snippets
# ---------------------------------------------------------------------------


def format_template_stack(stack: list[tuple[str, int]] | None) -> str:
    """Format the include chain as an indented list of ``name:line`` entries."""
    if not stack:
        return ""

    lines = [terminal.dim_text("Template stack:")]
    for template_name, line_num in stack:
        lines.append(f"  • {terminal.location(f'{template_name}:{line_num}')}")
    return "\n".join(lines)


@dataclass(frozen=True, slots=True)
class SourceSnippet:
    """Template source lines surrounding an error.

    Attributes:
        lines: Tuple of (line_number, line_content) pairs around the error.
        error_line: The 1-based line number where the error occurred.
        column: Optional column offset for a caret pointer.
    """

    lines: tuple[tuple[int, str], ...]
    error_line: int
    column: int | None = None

    def format(self) -> str:
        parts: list[str] = [terminal.dim_text("   |")]
        for lineno, content in self.lines:
            parts.append(
                terminal.format_source_line(lineno, content, is_error=lineno == self.error_line)
            )
        if self.column is not None:
            caret = " " * self.column + "^"
            parts.append(f"{terminal.dim_text('   |')} {terminal.paint('error', caret)}")
        parts.append(terminal.dim_text("   |"))
        return "\n".join(parts)


def build_source_snippet(
    source: str,
    error_line: int,
    *,
    context_lines: int = 2,
    column: int | None = None,
) -> SourceSnippet:
    """Build a SourceSnippet with ``context_lines`` either side of ``error_line``."""
    all_lines = source.splitlines()
    start = max(0, error_line - 1 - context_lines)
    end = min(len(all_lines), error_line + context_lines)
    lines = tuple((i + 1, all_lines[i]) for i in range(start, end))
    return SourceSnippet(lines=lines, error_line=error_line, column=column)


class TemplateError(Exception):
    """Base exception for all Vellum template errors.

    Attributes:
        code: Optional ErrorCode for searchable error identification.
    """

    code: ErrorCode | None = None

    def format_compact(self) -> str:
        """Format the error as a short diagnostic without traceback noise."""
        header = str(self)
        if self.code and self.code.value not in header:
            header = terminal.format_error_header(self.code.value, header)
        return header


class TemplateNotFoundError(TemplateError):
    """Template not found by the configured loader.

    Carries the attempted name, the resolved path (when the loader is file
    backed) and the names of sibling templates so the message can suggest
    what the caller probably meant.

    Example:
            >>> env.get_template("nonexistent.html")
        TemplateNotFoundError: Template 'nonexistent.html' not found
          Full path: views/nonexistent.html
          Available files: base.html, index.html

    """

    code: ErrorCode | None = ErrorCode.TEMPLATE_NOT_FOUND

    def __init__(
        self,
        name: str,
        *,
        path: str | None = None,
        available: list[str] | None = None,
        message: str | None = None,
    ):
        self.name = name
        self.path = path
        self.available = list(available or [])
        self.message = message or f"Template '{name}' not found"
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = [self.message]
        if self.path:
            parts.append(f"  Full path: {self.path}")
        if self.available:
            shown = ", ".join(self.available[:20])
            if len(self.available) > 20:
                shown += f" ... ({len(self.available)} total)"
            parts.append(f"  Available files: {shown}")
            basename = self.name.rsplit("/", 1)[-1]
            matches = get_close_matches(basename, self.available, n=1, cutoff=0.6)
            if matches:
                parts.append(f"  Did you mean '{terminal.suggestion(matches[0])}'?")
        return "\n".join(parts)


class TemplateSyntaxError(TemplateError):
    """Malformed template source, detected while lexing or parsing.

    When ``source`` and ``lineno`` are provided, the message includes the
    offending line, and a caret when ``col_offset`` is known.
    """

    code: ErrorCode | None = ErrorCode.SYNTAX_ERROR

    def __init__(
        self,
        message: str,
        lineno: int | None = None,
        name: str | None = None,
        source: str | None = None,
        col_offset: int | None = None,
        suggestion: str | None = None,
        code: ErrorCode | None = None,
    ):
        self.message = message
        self.lineno = lineno
        self.name = name
        self.source = source
        self.col_offset = col_offset
        self.suggestion = suggestion
        if code is not None:
            self.code = code
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        location = self.name or "<template>"
        if self.lineno:
            location += f":{self.lineno}"
            if self.col_offset is not None:
                location += f":{self.col_offset}"

        parts = [f"Syntax Error: {self.message}", f"  --> {location}"]

        if self.source and self.lineno:
            lines = self.source.splitlines()
            if 0 < self.lineno <= len(lines):
                parts.append("   |")
                parts.append(f"{self.lineno:>3} | {lines[self.lineno - 1]}")
                if self.col_offset is not None:
                    parts.append(f"   | {' ' * self.col_offset}^")

        if self.suggestion:
            parts.append(f"\n  {terminal.hint('Suggestion:')} {self.suggestion}")

        return "\n".join(parts)


class TemplateExecutionError(TemplateError):
    """A compiled template failed while rendering.

    Wraps the underlying exception with the template name, the source line
    being rendered and the compiled Python source, so the failing construct
    can be diagnosed without re-running the compiler.

    Output Format:
            ```
            Execution Error: unsupported operand type(s) ...
              Location: page.html:3
               |
            >  3 | {{if count > 'x'}}
               |
              Compiled code:
                def render(ctx, _session):
                    ...
            ```

    Attributes:
        message: Error description
        template_name: Name of the template
        lineno: Line number in template source
        compiled: Compiled intermediate form (Python source)
        suggestion: Optional fix suggestion
    """

    code: ErrorCode | None = ErrorCode.EXECUTION_ERROR

    def __init__(
        self,
        message: str,
        *,
        template_name: str | None = None,
        lineno: int | None = None,
        compiled: str | None = None,
        source_snippet: SourceSnippet | None = None,
        template_stack: list[tuple[str, int]] | None = None,
        suggestion: str | None = None,
        code: ErrorCode | None = None,
    ):
        self.message = message
        self.template_name = template_name
        self.lineno = lineno
        self.compiled = compiled
        self.source_snippet = source_snippet
        self.template_stack = template_stack or []
        self.suggestion = suggestion
        if code is not None:
            self.code = code
        super().__init__(self._format_message())

    def _location(self) -> str:
        loc = self.template_name or "<template>"
        if self.lineno:
            loc += f":{self.lineno}"
        return loc

    def _format_message(self) -> str:
        parts = [f"Execution Error: {self.message}"]
        if self.template_name or self.lineno:
            parts.append(f"  Location: {terminal.location(self._location())}")
        if self.source_snippet:
            parts.append(self.source_snippet.format())
        if self.template_stack:
            parts.append("")
            parts.append(format_template_stack(self.template_stack))
        if self.suggestion:
            parts.append(f"  {terminal.hint('Suggestion:')} {self.suggestion}")
        if self.compiled:
            parts.append("  Compiled code:")
            parts.extend(f"    {line}" for line in self.compiled.splitlines())
        return "\n".join(parts)

    def format_compact(self) -> str:
        """Format without the compiled code listing."""
        parts = [
            terminal.format_error_header(self.code.value if self.code else None, self.message),
            f"  Location: {terminal.location(self._location())}",
        ]
        if self.source_snippet:
            parts.append(self.source_snippet.format())
        if self.template_stack:
            parts.append(format_template_stack(self.template_stack))
        if self.suggestion:
            parts.append(f"  {terminal.hint('Hint:')} {self.suggestion}")
        return "\n".join(parts)


class FragmentRenderError(TemplateError):
    """An ``include`` or ``embed`` failed.

    Never propagates out of a render: the parent template catches it at the
    fragment boundary and emits :meth:`marker` in its place.
    """

    code: ErrorCode | None = ErrorCode.FRAGMENT_ERROR

    def __init__(self, kind: str, template_name: str, cause: BaseException):
        self.kind = kind
        self.template_name = template_name
        self.cause = cause
        super().__init__(f"{kind.capitalize()} of '{template_name}' failed: {cause}")

    def marker(self) -> str:
        """HTML comment shown in place of the failed fragment."""
        cause = self.cause
        text = cause.message if isinstance(cause, TemplateExecutionError) else str(cause)
        detail = terminal.strip_colors(text).replace("-->", "--&gt;")
        return f"<!-- {self.kind.capitalize()} error: {detail} -->"

