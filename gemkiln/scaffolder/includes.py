"""Cross-template includes.

A template set may offer fragments to files owned by other sets: a fragment
at ``_includes/<dir>/<name>.j2`` is pulled into any template rendered into
``<dir>`` that calls ``{{ includes('<name>') }}``.  Every enabled set's
fragment is rendered and the results are layered in enable order, so the
base set's contribution always comes first.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import Path

from .template_set import TemplateSet

#: ``render(fragment_path, render_dir) -> str``
RenderFn = Callable[[Path, "str | None"], str]

INCLUDE_SEPARATOR = "\n"


class IncludeResolver:
    """Collects include fragments across the loaded template sets."""

    def __init__(self, templates: Sequence[TemplateSet], render: RenderFn) -> None:
        self.templates = templates
        self.render = render

    def fragments(self, name: str, render_dir: str) -> list[Path]:
        """Fragment paths for ``(render_dir, name)``, in enable order."""
        found: list[Path] = []
        for template in self.templates:
            path = template.includes.get(render_dir, {}).get(name)
            if path is not None:
                found.append(path)
        return found

    def resolve(self, name: str, render_dir: str | None) -> str:
        """Render and join every fragment named *name* offered to *render_dir*.

        Returns an empty string outside of a template render
        (``render_dir is None``) or when no set offers the fragment.
        """
        if render_dir is None:
            return ""
        return INCLUDE_SEPARATOR.join(
            self.render(path, render_dir) for path in self.fragments(name, render_dir)
        )
