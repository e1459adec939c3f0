"""Project variables derived once per generation run.

The ``VariableContext`` is computed after the enabled template sets are known
and is never mutated afterwards.  Its scalar fields are available to path
interpolation; every field is available to Jinja2 templates.
"""

from __future__ import annotations

import datetime as dt
import os
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from gemkiln.config import GeneratorOptions


class Markup(str, Enum):
    """Documentation markup dialects a template set may provide variants for."""

    RDOC = "rdoc"
    MARKDOWN = "markdown"
    TEXTILE = "textile"


# Template set that turns on the markdown/textile preferences
EXTENDED_DOC_TEMPLATE = "yard"


class VariableContext(BaseModel):
    """Immutable snapshot of the values a generation run renders with."""

    model_config = ConfigDict(frozen=True)

    project_dir: str
    name: str
    modules: tuple[str, ...]
    module_depth: int
    namespace: str
    namespace_dir: str
    version: str
    summary: str
    description: str
    homepage: str
    email: str | None = None
    safe_email: str | None = None
    authors: tuple[str, ...] = ()
    author: str | None = None
    license: str
    markup: Markup = Markup.RDOC
    date: dt.date
    year: int
    month: int
    day: int
    enabled_templates: tuple[str, ...] = Field(default=())

    def as_context(self) -> dict[str, Any]:
        """Plain dict handed to the Jinja2 renderer."""
        context = self.model_dump()
        context["markup"] = self.markup.value
        context["modules"] = list(self.modules)
        context["authors"] = list(self.authors)
        return context

    def path_values(self) -> dict[str, Any]:
        """The scalar subset of :meth:`as_context` usable inside paths."""
        return {
            key: value
            for key, value in self.as_context().items()
            if isinstance(value, (str, int)) and not isinstance(value, bool)
        }


# ---------------------------------------------------------------------------
# Derivation helpers
# ---------------------------------------------------------------------------


def module_names(name: str) -> list[str]:
    """Split a gem name into capitalised module segments.

    ``-`` separates modules, ``_`` separates words within a module::

        module_names("my_cool-gem") -> ["MyCool", "Gem"]
    """
    return [
        "".join(word.capitalize() for word in segment.split("_"))
        for segment in name.split("-")
    ]


def namespace_dir(name: str) -> str:
    """Directory form of the namespace: ``-`` segments joined as a path."""
    return os.path.join(*name.split("-"))


def obfuscate_email(email: str | None) -> str | None:
    """Replace the first ``@`` with ``" at "``; ``None`` stays ``None``."""
    if not email:
        return None
    return email.replace("@", " at ", 1)


def resolve_markup(
    extended_docs: bool, markdown: bool = False, textile: bool = False
) -> Markup:
    """Pick the markup variant.

    The markdown and textile preferences only apply when the extended doc
    generator is in use; otherwise the default narrative markup is kept.
    """
    if not extended_docs:
        return Markup.RDOC
    if markdown:
        return Markup.MARKDOWN
    if textile:
        return Markup.TEXTILE
    return Markup.RDOC


def default_homepage(name: str) -> str:
    return f"https://rubygems.org/gems/{name}"


def derive_variables(
    options: GeneratorOptions,
    destination: str | Path,
    enabled_templates: list[str] | tuple[str, ...] = (),
    today: dt.date | None = None,
) -> VariableContext:
    """Build the ``VariableContext`` for one run.

    Args:
        options: Generator options.
        destination: Destination root; its final segment is the default
            project name.
        enabled_templates: The enabled template set names, in order.
        today: Date to stamp the project with (defaults to today).
    """
    project_dir = Path(destination).resolve().name
    name = options.name or project_dir
    modules = module_names(name)
    today = today or dt.date.today()

    return VariableContext(
        project_dir=project_dir,
        name=name,
        modules=tuple(modules),
        module_depth=len(modules),
        namespace="::".join(modules),
        namespace_dir=namespace_dir(name),
        version=options.version,
        summary=options.summary,
        description=options.description,
        homepage=options.homepage or default_homepage(name),
        email=options.email,
        safe_email=obfuscate_email(options.email),
        authors=tuple(options.authors),
        author=options.authors[0] if options.authors else None,
        license=options.license,
        markup=resolve_markup(
            EXTENDED_DOC_TEMPLATE in enabled_templates,
            markdown=options.markdown,
            textile=options.textile,
        ),
        date=today,
        year=today.year,
        month=today.month,
        day=today.day,
        enabled_templates=tuple(enabled_templates),
    )
