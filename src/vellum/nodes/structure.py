"""Template structure nodes: layouts, sections and fragments."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from vellum.nodes.base import Node
from vellum.nodes.expressions import Path


@dataclass(frozen=True, slots=True)
class Template(Node):
    """Root node: the whole template body."""

    body: Sequence[Node]
    name: str | None = None


@dataclass(frozen=True, slots=True)
class Extends(Node):
    """Layout declaration: {{extends 'layout.html'}}"""

    template: str


@dataclass(frozen=True, slots=True)
class Section(Node):
    """Named content captured for a layout: {{section 'body'}}...{{endsection}}"""

    name: str
    body: Sequence[Node]


@dataclass(frozen=True, slots=True)
class Fill(Node):
    """Placeholder for captured section text: {{fill 'body'}}"""

    name: str


@dataclass(frozen=True, slots=True)
class Include(Node):
    """Include another template with the base data: {{include 'nav.html'}}"""

    template: str


@dataclass(frozen=True, slots=True)
class Embed(Node):
    """Include with extra bindings: {{embed 'card.html' with ['title' => post.title]}}"""

    template: str
    bindings: Sequence[tuple[str, Path]] = ()
