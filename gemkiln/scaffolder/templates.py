"""Jinja2 template rendering for project generation.

Provides the TemplateRenderer class, the rendering step behind every ``*.j2``
file of a template set.  Templates are rendered from their own source file;
the loaded template set roots form the loader's search path so templates can
still ``{% include %}`` or ``{% extends %}`` shared files by relative name.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders Jinja2 templates for project generation.

    Rendering is a pure function of the template source and the context
    dictionary (the project variables plus the ``includes``/``enabled``
    callables supplied by the generator).  Output is Ruby source and plain
    text, so nothing is autoescaped.
    """

    def __init__(self, search_paths: list[str | Path] | None = None) -> None:
        self.loader = FileSystemLoader([str(p) for p in search_paths or []])
        self.env = Environment(
            loader=self.loader,
            autoescape=False,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    @property
    def search_paths(self) -> list[str]:
        return list(self.loader.searchpath)

    def add_search_path(self, path: str | Path) -> None:
        """Append a directory to the loader's search path (ignoring repeats)."""
        entry = str(path)
        if entry not in self.loader.searchpath:
            self.loader.searchpath.append(entry)

    # -- Rendering ---------------------------------------------------------

    def render_file(self, source: str | Path, context: dict[str, Any]) -> str:
        """Render the template stored at *source* with *context*.

        Args:
            source: Absolute path of the template file.
            context: Dictionary of variables available inside the template.

        Returns:
            The rendered template content as a string.
        """
        text = Path(source).read_text(encoding="utf-8")
        return self.render_string(text, context)

    def render_string(self, template_string: str, context: dict[str, Any]) -> str:
        """Render an inline template string with the provided context."""
        template = self.env.from_string(template_string)
        return template.render(**context)
