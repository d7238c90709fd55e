"""Matching of concrete URIs against single-segment URI templates.

Only the simple RFC 6570 form is supported: literal text plus ``{name}``
placeholders, each standing for one non-empty path segment without ``/``.
Operator expressions such as ``{+path}``, ``{?query}`` or exploded lists are not
expanded; templates using them only match URIs containing the literal text.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

_PLACEHOLDER = re.compile(r"\\\{([A-Za-z_][A-Za-z0-9_]*)\\\}")


def compile_template(template: str) -> re.Pattern[str]:
    """Translate ``template`` into an anchored regular expression.

    The template is escaped first so regex metacharacters in the literal parts
    are matched verbatim, then each escaped ``{name}`` becomes a named group.

    Args:
        template: URI template such as ``users://{userId}/profile``.

    Returns:
        Compiled pattern with one named group per placeholder.

    Raises:
        ValueError: If a placeholder name is repeated in the template.

    """
    escaped = re.escape(template)
    pattern = _PLACEHOLDER.sub(lambda match: f"(?P<{match.group(1)}>[^/]+)", escaped)
    try:
        return re.compile(rf"\A{pattern}\Z")
    except re.error as error:
        raise ValueError(f"Invalid URI template '{template}': {error}") from error


@dataclass(frozen=True)
class UriTemplate:
    """A compiled URI template able to extract variables from URIs."""

    template: str
    _pattern: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_pattern", compile_template(self.template))

    @property
    def variable_names(self) -> list[str]:
        """Placeholder names in the order they appear in the template."""
        return list(self._pattern.groupindex)

    def match(self, uri: str) -> dict[str, str] | None:
        """Return the variable bindings for ``uri`` or ``None`` if it does not fit."""
        found = self._pattern.match(uri)
        if found is None:
            return None
        return found.groupdict()


def match_uri_template(template: str, uri: str) -> dict[str, str] | None:
    """Match ``uri`` against ``template`` without keeping the compiled form."""
    return UriTemplate(template).match(uri)
