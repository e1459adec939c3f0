"""Variable interpolation for template-relative paths.

Paths inside a template set may contain ``{{ name }}`` placeholders, e.g.
``lib/{{namespace_dir}}/version.rb``.  Only plain identifiers are recognised;
this is textual substitution, not an expression language.  Placeholders that
do not name a known scalar variable are left untouched.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

_TOKEN_RE = re.compile(r"\{\{\s*([A-Za-z_][A-Za-z0-9_]*)\s*\}\}")


def find_tokens(path: str) -> list[str]:
    """Return the variable names referenced by *path*, in order of appearance."""
    return [match.group(1) for match in _TOKEN_RE.finditer(path)]


def interpolate(path: str, variables: Mapping[str, Any]) -> str:
    """Replace every known ``{{ var }}`` token in *path*.

    Args:
        path: A template-relative path (POSIX separators).
        variables: Variable values; only ``str``/``int``/``float`` values are
            substituted.

    Returns:
        The interpolated path.  The same inputs always give the same output.
    """

    def _replace(match: re.Match[str]) -> str:
        value = variables.get(match.group(1))
        if isinstance(value, bool) or not isinstance(value, (str, int, float)):
            return match.group(0)
        return str(value)

    return _TOKEN_RE.sub(_replace, path)
