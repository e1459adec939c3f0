"""Main project generator.

Composes one project tree out of several template sets.  A run goes through
five steps:

1. enable  -- pick the ordered, duplicate-free list of template set names.
2. load    -- resolve each name through the registry into a ``TemplateSet``.
3. derive  -- compute the immutable ``VariableContext``.
4. directories -- create declared directories, sets in enable order.
5. files   -- copy static files and render templates, sets in *reverse*
   enable order.

Both passes skip a raw (pre-interpolation) path they have already produced.
Because the file pass walks the most specific set first, the last enabled
set that declares a destination is the one whose content lands on disk.
Includes are the exception: they are layered in forward enable order.
"""

from __future__ import annotations

import asyncio
import datetime as dt
from enum import Enum
from functools import partial
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from gemkiln.config import GeneratorOptions
from gemkiln.utils import copy_file, ensure_dir, print_action, print_warning, write_file

from .includes import IncludeResolver
from .interpolations import find_tokens, interpolate
from .registry import TemplateRegistry, default_registry
from .template_set import TemplateSet, render_dir_for
from .templates import TemplateRenderer
from .variables import VariableContext, derive_variables


# ---------------------------------------------------------------------------
# Known template sets
# ---------------------------------------------------------------------------


class TemplateName(str, Enum):
    """Template sets the option toggles know how to enable."""

    BASE = "base"
    BUNDLER = "bundler"
    JEWELER = "jeweler"
    TEST_UNIT = "test_unit"
    RSPEC = "rspec"
    RDOC = "rdoc"
    YARD = "yard"


# The base template for all gems
BASE_TEMPLATE = TemplateName.BASE.value


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class GeneratorError(Exception):
    """Raised when a generation run cannot continue."""


class UnknownTemplateError(GeneratorError):
    """An enabled template set name has no registry entry."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown template {name!r}")


# ---------------------------------------------------------------------------
# Result model
# ---------------------------------------------------------------------------


class GenerationResult(BaseModel):
    """What one ``generate`` call produced."""

    destination: Path
    enabled_templates: list[str] = Field(default_factory=list)
    directories: list[Path] = Field(default_factory=list)
    files: list[Path] = Field(default_factory=list)
    skipped: list[tuple[str, str]] = Field(
        default_factory=list,
        description="(template set, raw destination) pairs overridden by a more specific set",
    )


# ---------------------------------------------------------------------------
# Main generator
# ---------------------------------------------------------------------------


class ProjectGenerator:
    """Generates a gem project from the enabled template sets.

    The per-run state (enabled names, loaded sets, variables and the renderer
    search path) is rebuilt at the start of every :meth:`generate` call; the
    dedup sets live only inside the generation passes.
    """

    def __init__(
        self,
        options: GeneratorOptions | None = None,
        registry: TemplateRegistry | None = None,
        *,
        quiet: bool = False,
        today: dt.date | None = None,
    ) -> None:
        self.options = options or GeneratorOptions()
        self.registry = registry if registry is not None else default_registry()
        self.quiet = quiet
        self.today = today
        self._reset()

    def _reset(self) -> None:
        self.enabled_templates: list[str] = []
        self.templates: list[TemplateSet] = []
        self.variables: VariableContext | None = None
        self.renderer = TemplateRenderer()
        self.includes = IncludeResolver(self.templates, self._render)
        self._path_values: dict[str, Any] = {}

    # -- Public API --------------------------------------------------------

    async def generate(self, destination: str | Path) -> GenerationResult:
        """Generate the project tree under *destination*.

        Raises:
            UnknownTemplateError: An enabled template set is not registered.
                Nothing has been written when this is raised.
        """
        root = Path(destination)
        self._reset()

        self.enabled_templates = self.enable_templates()
        self.load_templates(self.enabled_templates)
        self.derive_variables(root)

        result = GenerationResult(
            destination=root, enabled_templates=list(self.enabled_templates)
        )
        result.directories = await self.generate_directories(root)
        result.files, result.skipped = await self.generate_files(root)
        return result

    def enabled(self, name: str) -> bool:
        """Whether the template set *name* is enabled for this run."""
        return name in self.enabled_templates

    # -- Step 1: selection -------------------------------------------------

    def enable_templates(self) -> list[str]:
        """Return the ordered, duplicate-free list of template sets to use.

        The base set comes first.  Test framework and documentation sets are
        each exclusive: the opt-in choice (test-unit, YARD) wins over the
        default (RSpec, RDoc).  Extra sets follow in the order given.
        """
        options = self.options
        enabled = [BASE_TEMPLATE]

        if options.bundler:
            enabled.append(TemplateName.BUNDLER.value)
        if options.jeweler:
            enabled.append(TemplateName.JEWELER.value)

        if options.test_unit:
            enabled.append(TemplateName.TEST_UNIT.value)
        elif options.rspec:
            enabled.append(TemplateName.RSPEC.value)

        if options.yard:
            enabled.append(TemplateName.YARD.value)
        elif options.rdoc:
            enabled.append(TemplateName.RDOC.value)

        for name in options.templates:
            if name not in enabled:
                enabled.append(name)

        return enabled

    # -- Step 2: loading ---------------------------------------------------

    def load_templates(self, enabled: list[str]) -> list[TemplateSet]:
        """Resolve every enabled name into a ``TemplateSet``.

        Each set's root is also added to the renderer's search path.

        Raises:
            UnknownTemplateError: *enabled* names an unregistered set.
        """
        templates: list[TemplateSet] = []
        for name in enabled:
            template_dir = self.registry.lookup(name)
            if template_dir is None:
                raise UnknownTemplateError(name)
            templates.append(TemplateSet(template_dir))

        for template in templates:
            self.renderer.add_search_path(template.path)

        # Keep the include resolver pointed at the same list object.
        self.templates[:] = templates
        return self.templates

    # -- Step 3: variables -------------------------------------------------

    def derive_variables(self, destination: str | Path) -> VariableContext:
        """Compute the variables for this run from the options and destination."""
        self.variables = derive_variables(
            self.options,
            destination,
            self.enabled_templates,
            today=self.today,
        )
        self._path_values = self.variables.path_values()
        return self.variables

    # -- Step 4: directories -----------------------------------------------

    async def generate_directories(self, destination: str | Path) -> list[Path]:
        """Create every declared directory once, base set first.

        Dedup is keyed on the raw template-relative path.
        """
        root = Path(destination)
        await asyncio.to_thread(ensure_dir, root)

        generated: set[str] = set()
        created: list[Path] = []

        for template in self.templates:
            for directory in template.each_directory():
                if directory in generated:
                    continue

                relative = self.interpolate(directory)
                path = root / relative
                await asyncio.to_thread(path.mkdir, parents=True, exist_ok=True)
                self._report("create", relative)

                generated.add(directory)
                created.append(path)

        return created

    # -- Step 5: files -----------------------------------------------------

    async def generate_files(
        self, destination: str | Path
    ) -> tuple[list[Path], list[tuple[str, str]]]:
        """Copy static files and render templates, most specific set first.

        Returns:
            The written paths and the ``(set name, raw destination)`` pairs
            that were skipped because a more specific set already produced
            them.
        """
        root = Path(destination)
        markup = self._markup()

        generated: set[str] = set()
        written: list[Path] = []
        skipped: list[tuple[str, str]] = []

        for template in reversed(self.templates):
            for dest, source in template.each_file(markup):
                if dest in generated:
                    skipped.append((template.name, dest))
                    continue

                relative = self.interpolate(dest)
                path = root / relative
                await asyncio.to_thread(copy_file, source, path)
                self._report("create", relative)

                generated.add(dest)
                written.append(path)

            for dest, source in template.each_template(markup):
                if dest in generated:
                    skipped.append((template.name, dest))
                    continue

                relative = self.interpolate(dest)
                path = root / relative
                content = self._render(source, render_dir_for(dest))
                await asyncio.to_thread(write_file, path, content)
                self._report("create", relative)

                generated.add(dest)
                written.append(path)

        return written, skipped

    # -- Interpolation & rendering -----------------------------------------

    def interpolate(self, path: str) -> str:
        """Interpolate the run's variables into a raw template path."""
        result = interpolate(path, self._path_values)
        unresolved = find_tokens(result)
        if unresolved and not self.quiet:
            print_warning(f"Unresolved variable(s) {', '.join(unresolved)} in {path}")
        return result

    def render_context(self, render_dir: str | None = None) -> dict[str, Any]:
        """Template context for a file rendered into *render_dir*."""
        if self.variables is None:
            raise GeneratorError("Variables have not been derived yet")
        return {
            **self.variables.as_context(),
            "includes": partial(self.includes.resolve, render_dir=render_dir),
            "enabled": self.enabled,
        }

    def _render(self, source: Path, render_dir: str | None) -> str:
        return self.renderer.render_file(source, self.render_context(render_dir))

    def _markup(self) -> str:
        if self.variables is None:
            raise GeneratorError("Variables have not been derived yet")
        return self.variables.markup.value

    def _report(self, action: str, target: str) -> None:
        if not self.quiet:
            print_action(action, target)
