"""Path template parsing and action URL substitution.

Templates use ``:name`` or ``:name{pattern}`` tokens, e.g. ``/users/:id{\\d+}/edit``.
The pattern is an unanchored regular expression checked as a full match
against the value supplied at render time.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

from formwright.exceptions import InvalidPathParameter, MissingPathParameter

PATH_TOKEN = re.compile(r":([a-zA-Z_][a-zA-Z0-9_]*)(?:\{([^}]+)\})?")

# Characters left unescaped by JavaScript's encodeURIComponent
_URI_COMPONENT_SAFE = "-_.!~*'()"


@dataclass(frozen=True)
class PathParam:
    name: str
    pattern: str | None = None

    def accepts(self, value: str) -> bool:
        if self.pattern is None:
            return True
        return re.fullmatch(self.pattern, value) is not None


def parse_path_pattern(template: str) -> tuple[PathParam, ...]:
    """Return every parameter token in order. Repeated names are kept."""
    return tuple(
        PathParam(name=match.group(1), pattern=match.group(2))
        for match in PATH_TOKEN.finditer(template)
    )


def _unique(names: list[str]) -> list[str]:
    return list(dict.fromkeys(names))


def build_action_url(
    template: str,
    params: tuple[PathParam, ...],
    url_params: Mapping[str, Any] | None,
) -> str:
    """Substitute supplied values into the template.

    Every parameter is checked before anything is raised, so the error
    names all missing (or all invalid) parameters at once.
    """
    url_params = url_params or {}
    missing: list[str] = []
    invalid: list[str] = []

    for param in params:
        value = url_params.get(param.name)
        if value is None or value == "":
            missing.append(param.name)
        elif not param.accepts(str(value)):
            invalid.append(param.name)

    if missing:
        raise MissingPathParameter(_unique(missing))
    if invalid:
        raise InvalidPathParameter(_unique(invalid))

    def substitute(match: re.Match) -> str:
        return quote(str(url_params[match.group(1)]), safe=_URI_COMPONENT_SAFE)

    return PATH_TOKEN.sub(substitute, template)


def to_litestar_path(template: str) -> str:
    """Rewrite ``:name{pattern}`` tokens into Litestar's ``{name:str}`` syntax."""
    return PATH_TOKEN.sub(lambda match: f"{{{match.group(1)}:str}}", template)
