"""A single template set rooted at one directory.

Layout convention shared with the registry::

    <root>/
        template.yml              optional manifest, never copied
        _includes/<dir>/<name>.j2 include fragments offered to files in <dir>
        _markup/<variant>/...     files used only for one documentation markup
        lib/{{namespace_dir}}/    directories to create
        Rakefile                  static files, copied verbatim
        README.md.j2              templates, rendered without the .j2 suffix

Every file ending in ``.j2`` is a template, so a set cannot ship a static
``.j2`` file as is.  Store it as ``<name>.j2.j2`` instead: only one suffix
is stripped, and a ``{% raw %}`` block keeps the body verbatim.

All yielded paths are raw template-relative POSIX paths; interpolation of
``{{ var }}`` tokens is left to the generator.
"""

from __future__ import annotations

import os
import posixpath
from collections.abc import Iterator, Mapping
from functools import cached_property
from pathlib import Path
from types import MappingProxyType

import yaml

TEMPLATE_EXT = ".j2"
INCLUDES_DIR = "_includes"
MARKUP_DIR = "_markup"
MANIFEST_FILE = "template.yml"

_IGNORED_NAMES = frozenset({".git", "__pycache__", ".DS_Store"})
_RESERVED_DIRS = frozenset({INCLUDES_DIR, MARKUP_DIR})


def render_dir_for(destination: str) -> str:
    """Directory key used to look up includes for a raw *destination* path."""
    return posixpath.dirname(destination) or "."


class TemplateSet:
    """Enumerates the directories, files, templates and includes of one set.

    Nothing beyond an ``is_dir`` check happens at construction; the tree is
    walked each time an ``each_*`` iterator is consumed.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        if not self.path.is_dir():
            raise NotADirectoryError(f"Template set {self.path} is not a directory")
        self.name = self.path.name

    def __repr__(self) -> str:
        return f"TemplateSet({self.name!r}, {str(self.path)!r})"

    # -- Enumeration -------------------------------------------------------

    def each_directory(self) -> Iterator[str]:
        """Yield every directory to create, parents before children."""
        for rel_dir, dirnames, _ in self._walk(self.path, skip_reserved=True):
            for dirname in dirnames:
                yield _join(rel_dir, dirname)

    def each_file(self, markup: str) -> Iterator[tuple[str, Path]]:
        """Yield ``(destination, source)`` for files copied verbatim."""
        for dest, source in self._each_entry(markup):
            if not dest.endswith(TEMPLATE_EXT):
                yield dest, source

    def each_template(self, markup: str) -> Iterator[tuple[str, Path]]:
        """Yield ``(destination, source)`` for files rendered through Jinja2.

        The destination has the ``.j2`` suffix removed.  Files stored under
        ``_markup/<variant>/`` are only yielded for the active *markup*.
        """
        for dest, source in self._each_entry(markup):
            if dest.endswith(TEMPLATE_EXT):
                yield dest[: -len(TEMPLATE_EXT)], source

    @cached_property
    def includes(self) -> Mapping[str, Mapping[str, Path]]:
        """``{owning dir: {include name: fragment path}}`` for this set."""
        found: dict[str, dict[str, Path]] = {}
        include_root = self.path / INCLUDES_DIR
        if include_root.is_dir():
            for rel_dir, _, filenames in self._walk(include_root, skip_reserved=False):
                owner = rel_dir or "."
                for filename in filenames:
                    name = filename[: -len(TEMPLATE_EXT)] if filename.endswith(TEMPLATE_EXT) else filename
                    found.setdefault(owner, {})[name] = include_root / rel_dir / filename
        return MappingProxyType(
            {owner: MappingProxyType(names) for owner, names in found.items()}
        )

    @cached_property
    def description(self) -> str:
        """Short description from ``template.yml``, if the set ships one."""
        manifest = self.path / MANIFEST_FILE
        if not manifest.is_file():
            return ""
        data = yaml.safe_load(manifest.read_text(encoding="utf-8")) or {}
        if not isinstance(data, dict):
            return ""
        return str(data.get("description", ""))

    # -- Internal helpers --------------------------------------------------

    def _each_entry(self, markup: str) -> Iterator[tuple[str, Path]]:
        for rel_dir, _, filenames in self._walk(self.path, skip_reserved=True):
            for filename in filenames:
                if not rel_dir and filename == MANIFEST_FILE:
                    continue
                yield _join(rel_dir, filename), self.path / rel_dir / filename

        markup_root = self.path / MARKUP_DIR / markup
        if markup_root.is_dir():
            for rel_dir, _, filenames in self._walk(markup_root, skip_reserved=False):
                for filename in filenames:
                    yield _join(rel_dir, filename), markup_root / rel_dir / filename

    @staticmethod
    def _walk(
        root: Path, *, skip_reserved: bool
    ) -> Iterator[tuple[str, list[str], list[str]]]:
        """Sorted ``os.walk`` yielding POSIX paths relative to *root*."""
        for current, dirnames, filenames in os.walk(root):
            rel_dir = Path(current).relative_to(root).as_posix()
            if rel_dir == ".":
                rel_dir = ""
            dirnames[:] = sorted(
                d
                for d in dirnames
                if d not in _IGNORED_NAMES
                and not (skip_reserved and not rel_dir and d in _RESERVED_DIRS)
            )
            yield rel_dir, dirnames, sorted(f for f in filenames if f not in _IGNORED_NAMES)


def _join(rel_dir: str, name: str) -> str:
    return f"{rel_dir}/{name}" if rel_dir else name
