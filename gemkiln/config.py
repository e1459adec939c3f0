"""gemkiln configuration.

Typed generator options.  All settings use a Pydantic v2 model so they can be
validated at construction time and loaded from a YAML options file or from
environment variables without boiler-plate.
"""

from __future__ import annotations

import getpass
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


def kiln_home() -> Path:
    """Return the per-user gemkiln directory (``$GEMKILN_HOME`` or ``~/.gemkiln``)."""
    override = os.environ.get("GEMKILN_HOME")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".gemkiln"


def default_options_path() -> Path:
    """Path of the user's default options file."""
    return kiln_home() / "options.yml"


def _default_authors() -> list[str]:
    try:
        user = getpass.getuser()
    except (KeyError, OSError):
        return []
    return [user] if user else []


class GeneratorOptions(BaseModel):
    """Options controlling which template sets are enabled and how the
    project variables are filled in.

    Instances are typically created once by the CLI entry point (defaults,
    then the options file, then command-line overrides) and handed to
    ``ProjectGenerator``.
    """

    # Markup preferences (only honoured when YARD is the doc generator)
    markdown: bool = Field(default=False)
    textile: bool = Field(default=False)

    # Extra template sets, in precedence order
    templates: list[str] = Field(default_factory=list)

    # Project metadata
    name: str | None = Field(default=None, description="Overrides the destination directory name")
    version: str = Field(default="0.1.0")
    summary: str = Field(default="TODO: Summary")
    description: str = Field(default="TODO: Description")
    homepage: str | None = Field(default=None)
    email: str | None = Field(default=None)
    authors: list[str] = Field(default_factory=_default_authors)
    license: str = Field(default="MIT")

    # Template set toggles
    rdoc: bool = Field(default=True)
    yard: bool = Field(default=False)
    test_unit: bool = Field(default=False)
    rspec: bool = Field(default=True)
    bundler: bool = Field(default=False)
    jeweler: bool = Field(default=False)

    # Post-generation step
    git: bool = Field(default=True)

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    def merged(self, **overrides: Any) -> "GeneratorOptions":
        """Return a copy with every non-``None`` override applied."""
        updates = {key: value for key, value in overrides.items() if value is not None}
        return self.model_validate({**self.model_dump(), **updates})

    @classmethod
    def load(cls, path: Path | None = None) -> "GeneratorOptions":
        """Load options from a YAML file.

        A missing file yields the defaults.  Keys use the option names, with
        dashes accepted in place of underscores (``test-unit: true``).

        Args:
            path: The YAML file to read.  Defaults to :func:`default_options_path`.

        Returns:
            A validated ``GeneratorOptions`` instance.
        """
        target = Path(path) if path is not None else default_options_path()
        if not target.is_file():
            return cls()

        raw = yaml.safe_load(target.read_text(encoding="utf-8")) or {}
        if not isinstance(raw, dict):
            raise ValueError(f"Options file {target} must contain a mapping")

        data = {str(key).replace("-", "_"): value for key, value in raw.items()}
        # A single extra template may be written as a bare string.
        if isinstance(data.get("templates"), str):
            data["templates"] = [data["templates"]]
        if isinstance(data.get("authors"), str):
            data["authors"] = [data["authors"]]
        return cls.model_validate(data)

    @classmethod
    def from_env(cls, base: "GeneratorOptions | None" = None) -> "GeneratorOptions":
        """Overlay environment variables on *base* (or the defaults).

        Recognised variables (all optional):
            GEMKILN_AUTHOR, GEMKILN_EMAIL, GEMKILN_LICENSE.
        """
        options = base or cls()
        overrides: dict[str, Any] = {}
        if os.environ.get("GEMKILN_AUTHOR"):
            overrides["authors"] = [os.environ["GEMKILN_AUTHOR"]]
        if os.environ.get("GEMKILN_EMAIL"):
            overrides["email"] = os.environ["GEMKILN_EMAIL"]
        if os.environ.get("GEMKILN_LICENSE"):
            overrides["license"] = os.environ["GEMKILN_LICENSE"]
        return options.merged(**overrides)
