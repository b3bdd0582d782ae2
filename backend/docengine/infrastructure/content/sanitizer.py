"""Allowlist sanitizer for user-authored inline markup, built on nh3."""

from typing import Dict, FrozenSet, Iterable, Mapping, Optional

import nh3

ALLOWED_TAGS: FrozenSet[str] = frozenset(
    {"b", "i", "u", "s", "em", "strong", "a", "br", "span", "code", "mark", "sub", "sup"}
)
ALLOWED_ATTRIBUTES: Dict[str, FrozenSet[str]] = {
    "a": frozenset({"href", "target"}),
    "*": frozenset({"class"}),
}
ALLOWED_URL_SCHEMES: FrozenSet[str] = frozenset({"http", "https", "mailto"})


class Sanitizer:
    """Strip every tag, attribute and url scheme outside the allowlist.

    Text inside unknown tags is kept; the content of ``script`` and ``style``
    elements is dropped entirely.
    """

    def __init__(
        self,
        tags: Iterable[str] = ALLOWED_TAGS,
        attributes: Optional[Mapping[str, Iterable[str]]] = None,
        url_schemes: Iterable[str] = ALLOWED_URL_SCHEMES,
    ):
        self.tags = set(tags)
        if attributes is None:
            attributes = ALLOWED_ATTRIBUTES
        self.attributes = {tag: set(names) for tag, names in attributes.items()}
        self.url_schemes = set(url_schemes)

    def clean(self, value: Optional[str]) -> str:
        if not value:
            return ""
        return nh3.clean(
            value,
            tags=self.tags,
            attributes=self.attributes,
            url_schemes=self.url_schemes,
            strip_comments=True,
        )


_default_sanitizer = Sanitizer()


def sanitize(value: Optional[str]) -> str:
    """Sanitize with the default allowlist."""
    return _default_sanitizer.clean(value)
