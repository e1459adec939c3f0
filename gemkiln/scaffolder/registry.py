"""Registry of named template sets.

A template set is registered by its root directory; its name is the final
path segment.  The process-wide registry is filled once from two sources,
built-in sets shipped in ``scaffolder/templates/`` and user-installed sets in
``<GEMKILN_HOME>/templates/``.  Installed sets are registered second, so an
installed set replaces a built-in set of the same name.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from pathlib import Path

from gemkiln.config import kiln_home
from gemkiln.utils import print_warning

_BUILTIN_TEMPLATE_DIR = Path(__file__).parent / "templates"


class TemplateRegistrationError(ValueError):
    """Raised when a template set path is not an existing directory."""


class TemplateRegistry:
    """Maps template set names to their root directories."""

    def __init__(self) -> None:
        self._templates: dict[str, Path] = {}

    def __contains__(self, name: object) -> bool:
        return name in self._templates

    def __len__(self) -> int:
        return len(self._templates)

    def register(self, path: str | Path) -> str:
        """Register the template set rooted at *path*.

        Returns:
            The registered name.

        Raises:
            TemplateRegistrationError: *path* is not a directory.
        """
        root = Path(path)
        if not root.is_dir():
            raise TemplateRegistrationError(f"{str(root)!r} must be a directory")

        name = root.name
        self._templates[name] = root.resolve()
        return name

    def register_all(self, paths: Iterable[str | Path]) -> list[str]:
        """Register every path, warning about (and skipping) invalid ones."""
        registered: list[str] = []
        for path in paths:
            try:
                registered.append(self.register(path))
            except TemplateRegistrationError as exc:
                print_warning(f"Skipping template set: {exc}")
        return registered

    def lookup(self, name: str) -> Path | None:
        """Return the root directory for *name*, or ``None`` if unknown."""
        return self._templates.get(name)

    def names(self) -> list[str]:
        """Registered names, sorted."""
        return sorted(self._templates)

    def items(self) -> list[tuple[str, Path]]:
        return sorted(self._templates.items())


# ---------------------------------------------------------------------------
# Template locations
# ---------------------------------------------------------------------------


def _child_dirs(root: Path) -> Iterator[Path]:
    if not root.is_dir():
        return
    for child in sorted(root.iterdir()):
        if child.is_dir() and not child.name.startswith((".", "_")):
            yield child


def builtin_template_dirs() -> Iterator[Path]:
    """Yield the template sets shipped with gemkiln."""
    yield from _child_dirs(_BUILTIN_TEMPLATE_DIR)


def installed_template_dirs() -> Iterator[Path]:
    """Yield the template sets installed under ``<GEMKILN_HOME>/templates``."""
    yield from _child_dirs(kiln_home() / "templates")


_default_registry: TemplateRegistry | None = None


def default_registry() -> TemplateRegistry:
    """Return the process-wide registry, populating it on first use."""
    global _default_registry
    if _default_registry is None:
        registry = TemplateRegistry()
        registry.register_all(builtin_template_dirs())
        registry.register_all(installed_template_dirs())
        _default_registry = registry
    return _default_registry


def reset_default_registry() -> None:
    """Forget the process-wide registry so the next call rescans."""
    global _default_registry
    _default_registry = None
