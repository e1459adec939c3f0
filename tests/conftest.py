"""Shared pytest fixtures for the gemkiln test suite.

Provides reusable fixtures for:
- An isolated ``GEMKILN_HOME`` so the user's installed templates never leak in
- A factory that writes small template sets to a temporary directory
- A registry pre-loaded with such sets
"""

from __future__ import annotations

import datetime as dt
from collections.abc import Callable
from pathlib import Path

import pytest

from gemkiln.scaffolder.registry import TemplateRegistry, reset_default_registry

#: Fixed date used wherever a test needs deterministic output
FIXED_DATE = dt.date(2024, 3, 9)


# ---------------------------------------------------------------------------
# Environment isolation
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point ``GEMKILN_HOME`` at an empty temp dir and forget the cached registry."""
    home = tmp_path / "kiln-home"
    home.mkdir()
    monkeypatch.setenv("GEMKILN_HOME", str(home))
    for var in ("GEMKILN_AUTHOR", "GEMKILN_EMAIL", "GEMKILN_LICENSE"):
        monkeypatch.delenv(var, raising=False)
    reset_default_registry()
    yield home
    reset_default_registry()


# ---------------------------------------------------------------------------
# Template set factory
# ---------------------------------------------------------------------------

TemplateFactory = Callable[[str, dict[str, "str | None"]], Path]


@pytest.fixture
def template_root(tmp_path: Path) -> Path:
    root = tmp_path / "template-sets"
    root.mkdir()
    return root


@pytest.fixture
def make_template(template_root: Path) -> TemplateFactory:
    """Write a template set from a ``{relative path: content}`` mapping.

    A ``None`` content creates a directory instead of a file.

    Usage::

        def test_something(make_template):
            path = make_template("rspec", {"spec/{{name}}_spec.rb.j2": "..."})
    """

    def _make(name: str, entries: dict[str, str | None]) -> Path:
        root = template_root / name
        root.mkdir(parents=True, exist_ok=True)
        for rel, content in entries.items():
            target = root / rel
            if content is None:
                target.mkdir(parents=True, exist_ok=True)
            else:
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_text(content, encoding="utf-8")
        return root

    return _make


@pytest.fixture
def today() -> dt.date:
    """Date stamped into generated projects."""
    return FIXED_DATE


@pytest.fixture
def registry() -> TemplateRegistry:
    """An empty registry; tests register the sets they build."""
    return TemplateRegistry()


@pytest.fixture
def default_sets(make_template, registry) -> TemplateRegistry:
    """Minimal stand-ins for every set the option toggles can enable."""
    for name in ("base", "bundler", "jeweler", "rspec", "test_unit", "rdoc", "yard"):
        registry.register(make_template(name, {}))
    return registry
