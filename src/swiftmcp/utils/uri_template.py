# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/openmcp-python/LICENSE
# ==============================================================================

"""Matching of request URIs against ``{variable}`` resource templates.

Two placeholder forms are understood:

* ``{name}`` matches a single path segment (no ``/``, ``?`` or ``#``).
* ``{+name}`` is a reserved expansion and matches any non-empty run,
  including ``/``.

Matching is structural: the literal text between placeholders must line up
exactly with the request URI.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
import re
from typing import TypeVar
from urllib.parse import quote, unquote


_PLACEHOLDER = re.compile(r"\{(\+?)([A-Za-z_][A-Za-z0-9_]*)\}")

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class UriTemplate:
    """A compiled URI template."""

    template: str
    variables: tuple[str, ...] = field(init=False)
    _pattern: re.Pattern[str] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        parts: list[str] = []
        names: list[str] = []
        cursor = 0
        for placeholder in _PLACEHOLDER.finditer(self.template):
            operator, name = placeholder.groups()
            if name in names:
                raise ValueError(f"Duplicate variable '{name}' in URI template {self.template!r}")
            parts.append(re.escape(self.template[cursor : placeholder.start()]))
            parts.append(f"(?P<{name}>.+?)" if operator else f"(?P<{name}>[^/?#]+)")
            names.append(name)
            cursor = placeholder.end()
        parts.append(re.escape(self.template[cursor:]))

        if "{" in _PLACEHOLDER.sub("", self.template):
            raise ValueError(f"Malformed placeholder in URI template {self.template!r}")

        object.__setattr__(self, "variables", tuple(names))
        object.__setattr__(self, "_pattern", re.compile("".join(parts) + r"\Z"))

    def match(self, uri: str) -> dict[str, str] | None:
        """Return the extracted variables, or ``None`` when *uri* does not fit."""
        found = self._pattern.match(uri)
        if found is None:
            return None
        return {name: unquote(value) for name, value in found.groupdict().items()}

    def expand(self, values: Mapping[str, str]) -> str:
        """Fill the template, percent-encoding each value as needed."""

        def replace(placeholder: re.Match[str]) -> str:
            operator, name = placeholder.groups()
            if name not in values:
                raise KeyError(name)
            safe = ":/?#[]@!$&'()*+,;=" if operator else ""
            return quote(str(values[name]), safe=safe)

        return _PLACEHOLDER.sub(replace, self.template)


def match_template(candidates: Iterable[tuple[UriTemplate, T]], uri: str) -> tuple[T, dict[str, str]] | None:
    """Return the first candidate, in iteration order, whose template matches *uri*."""
    for template, target in candidates:
        variables = template.match(uri)
        if variables is not None:
            return target, variables
    return None


__all__ = ["UriTemplate", "match_template"]
