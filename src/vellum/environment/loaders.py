"""Template loaders for the Vellum environment.

Loaders provide template source to the Environment. They implement
`get_source(name)` returning `(source, filename)`, plus the lookups the
Environment uses to build helpful not-found errors.

Built-in Loaders:
- `FileSystemLoader`: Load from filesystem directories
- `DictLoader`: Load from an in-memory dictionary (testing/embedded)
- `ChoiceLoader`: Try multiple loaders in order (theme fallback)

Custom Loaders:
Any object with these four methods works; packaged views, for instance:
    ```python
    class PackageLoader:
        def __init__(self, package: str):
            self.root = importlib.resources.files(package) / "views"

        def get_source(self, name: str) -> tuple[str, str | None]:
            view = self.root / name
            if not view.is_file():
                raise TemplateNotFoundError(name, available=self.list_siblings(name))
            return view.read_text("utf-8"), str(view)

        def exists(self, name: str) -> bool: ...
        def list_siblings(self, name: str) -> list[str]: ...
        def list_templates(self) -> list[str]: ...
    ```

Loaders hold no per-render state, so one loader may serve many
concurrent renders.

"""

from __future__ import annotations

import posixpath
from collections.abc import Mapping
from pathlib import Path
from typing import Protocol, runtime_checkable

from vellum.environment.exceptions import TemplateNotFoundError


@runtime_checkable
class Loader(Protocol):
    """Structural type every loader satisfies."""

    def get_source(self, name: str) -> tuple[str, str | None]: ...

    def exists(self, name: str) -> bool: ...

    def list_siblings(self, name: str) -> list[str]: ...

    def list_templates(self) -> list[str]: ...


def _dirname(name: str) -> str:
    return posixpath.dirname(name.replace("\\", "/"))


class FileSystemLoader:
    """Load templates from filesystem directories.

    Template names are paths relative to the search directories, e.g.
    ``"partials/row.html"``. Directories are searched in order; the first
    matching file wins.

    Example:
            >>> loader = FileSystemLoader("views/")
            >>> source, filename = loader.get_source("pages/about.html")
            >>> print(filename)
            'views/pages/about.html'

    Raises:
        TemplateNotFoundError: If the template is in none of the search
            paths. The error names the full path tried in the first
            directory and lists the files next to it.

    """

    __slots__ = ("_encoding", "_paths")

    def __init__(
        self,
        paths: str | Path | list[str | Path],
        encoding: str = "utf-8",
    ):
        if isinstance(paths, (str, Path)):
            paths = [paths]
        self._paths = [Path(p) for p in paths]
        self._encoding = encoding

    @property
    def paths(self) -> list[Path]:
        return list(self._paths)

    def _find(self, name: str) -> Path | None:
        for base in self._paths:
            path = base / name
            if path.is_file():
                return path
        return None

    def get_source(self, name: str) -> tuple[str, str]:
        """Load template source from the filesystem."""
        path = self._find(name)
        if path is None:
            full_path = str(self._paths[0] / name) if self._paths else name
            raise TemplateNotFoundError(
                name,
                path=full_path,
                available=self.list_siblings(name),
            )
        return path.read_text(self._encoding), str(path)

    def exists(self, name: str) -> bool:
        return self._find(name) is not None

    def list_siblings(self, name: str) -> list[str]:
        """File names in the directory ``name`` would live in."""
        siblings: set[str] = set()
        subdir = _dirname(name)
        for base in self._paths:
            directory = base / subdir if subdir else base
            if directory.is_dir():
                siblings.update(p.name for p in directory.iterdir() if p.is_file())
        return sorted(siblings)

    def list_templates(self) -> list[str]:
        """List all files below the search paths, as template names."""
        templates: set[str] = set()
        for base in self._paths:
            if base.is_dir():
                for path in base.rglob("*"):
                    if path.is_file():
                        templates.add(path.relative_to(base).as_posix())
        return sorted(templates)

    def __repr__(self) -> str:
        return f"FileSystemLoader({[str(p) for p in self._paths]!r})"


class DictLoader:
    """Load templates from an in-memory dictionary.

    Maps template names to source strings. Useful for testing, embedded
    templates, or dynamically generated templates.

    Note:
        Returns `None` as filename since templates are not file-backed.

    Example:
            >>> loader = DictLoader({
            ...     "layout.html": "<main>{{fill 'body'}}</main>",
            ...     "page.html": "{{extends 'layout.html'}}{{section 'body'}}Hi{{endsection}}",
            ... })
            >>> env = Environment(loader=loader)
            >>> env.render("page.html")
            '<main>Hi</main>'

    Raises:
        TemplateNotFoundError: If template name not in mapping

    """

    __slots__ = ("_mapping",)

    def __init__(self, mapping: Mapping[str, str]):
        self._mapping = dict(mapping)

    def get_source(self, name: str) -> tuple[str, None]:
        if name not in self._mapping:
            raise TemplateNotFoundError(name, available=self.list_siblings(name))
        return self._mapping[name], None

    def exists(self, name: str) -> bool:
        return name in self._mapping

    def list_siblings(self, name: str) -> list[str]:
        """Names sharing ``name``'s directory prefix, without that prefix."""
        subdir = _dirname(name)
        siblings = []
        for key in self._mapping:
            if _dirname(key) == subdir:
                siblings.append(posixpath.basename(key))
        return sorted(siblings)

    def list_templates(self) -> list[str]:
        return sorted(self._mapping.keys())

    def __setitem__(self, name: str, source: str) -> None:
        self._mapping[name] = source


class ChoiceLoader:
    """Try multiple loaders in order, returning the first match.

    Useful for theme fallback patterns where a custom directory overrides
    a subset of templates and a default directory provides the rest.

    Example:
            >>> custom = DictLoader({"nav.html": "<nav>Custom</nav>"})
            >>> default = DictLoader({
            ...     "nav.html": "<nav>Default</nav>",
            ...     "footer.html": "<footer>Default</footer>",
            ... })
            >>> env = Environment(loader=ChoiceLoader([custom, default]))
            >>> env.render("nav.html")
            '<nav>Custom</nav>'
            >>> env.render("footer.html")
            '<footer>Default</footer>'

    Raises:
        TemplateNotFoundError: If no loader can find the template. The error
            lists the union of siblings from every child loader.

    Thread-Safety:
        Safe if all child loaders are thread-safe.
    """

    __slots__ = ("_loaders",)

    def __init__(self, loaders: list[Loader]):
        self._loaders = list(loaders)

    def get_source(self, name: str) -> tuple[str, str | None]:
        """Try each loader in order, return first match."""
        for loader in self._loaders:
            try:
                return loader.get_source(name)
            except TemplateNotFoundError:
                continue
        raise TemplateNotFoundError(
            name,
            available=self.list_siblings(name),
            message=f"Template '{name}' not found in any of {len(self._loaders)} loaders",
        )

    def exists(self, name: str) -> bool:
        return any(loader.exists(name) for loader in self._loaders)

    def list_siblings(self, name: str) -> list[str]:
        siblings: set[str] = set()
        for loader in self._loaders:
            siblings.update(loader.list_siblings(name))
        return sorted(siblings)

    def list_templates(self) -> list[str]:
        """Merge template lists from all loaders (deduplicated, sorted)."""
        templates: set[str] = set()
        for loader in self._loaders:
            templates.update(loader.list_templates())
        return sorted(templates)
