"""URI pattern index - maps arbitrary URLs back to location nodes."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Protocol, Sequence, runtime_checkable

from ..errors import PatternCompileError
from ..locations.types import LocationDescriptor

logger = logging.getLogger(__name__)

# A '*' wildcard matches one or more word characters, e.g. a branch slug
WILDCARD_SEGMENT = "[a-zA-Z0-9_]+"


@runtime_checkable
class UriMatcher(Protocol):
    pattern: str

    def matches(self, url: str) -> bool: ...


def compile_location_pattern(pattern: str) -> re.Pattern[str]:
    """
    Compile a location URI pattern.

    Regex metacharacters are escaped, each ``*`` becomes a one-or-more word
    character match, and the expression is anchored at the start while
    allowing any suffix::

        "https://incidents-*.ui-dev.product.dev.alertlogic.com"
        -> ^https://incidents\\-[a-zA-Z0-9_]+\\.ui\\-dev\\...com.*$
    """
    expression = WILDCARD_SEGMENT.join(re.escape(part) for part in pattern.split("*"))
    return re.compile(f"^{expression}.*$")


@dataclass(frozen=True, slots=True)
class WildcardMatcher:
    """Prefix matcher for a URI or alias with ``*`` wildcards."""
    pattern: str
    regex: re.Pattern[str]

    @classmethod
    def compile(cls, pattern: str) -> WildcardMatcher:
        return cls(pattern=pattern, regex=compile_location_pattern(pattern))

    def matches(self, url: str) -> bool:
        return self.regex.match(url) is not None


def base_url(url: str) -> str:
    """Strip fragment, query string and one trailing slash from a URL."""
    url = url.split("#", 1)[0]
    url = url.split("?", 1)[0]
    if url.endswith("/"):
        url = url[:-1]
    return url


class UriPatternIndex:
    """
    Ordered set of (matcher, node) pairs built from each node's uri and aliases.

    Matching is first-hit in catalog order.  A pattern that appears more than
    once keeps its first position and maps to the latest node declaring it.
    """

    def __init__(self):
        self._entries: dict[str, tuple[UriMatcher, LocationDescriptor]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def patterns(self) -> list[str]:
        return list(self._entries)

    def load(self, nodes: Sequence[LocationDescriptor]) -> None:
        """Compile matchers for a whole catalog, replacing the current set."""
        entries: dict[str, tuple[UriMatcher, LocationDescriptor]] = {}
        for node in nodes:
            for pattern in self._node_patterns(node):
                entries[pattern] = (self._compile(pattern, node), node)
        self._entries = entries

    def find_by_uri(self, url: str) -> LocationDescriptor | None:
        """
        Find the node a URL belongs to.

        On a match the URL's base (no fragment, query or trailing slash) is
        trusted over the catalog entry: if it differs from the node's uri the
        node is corrected in place.  Use ``match`` for a read-only lookup.
        """
        node = self.match(url)
        if node is None:
            return None
        observed = base_url(url)
        if observed != node.uri:
            node.uri = observed
            node.full_uri = observed
            node.detected = True
            logger.info(f"Notice: using [{observed}] as a base URI for location type '{node.type_id}'")
        return node

    def match(self, url: str) -> LocationDescriptor | None:
        """First node whose uri or alias matches a URL; the node is left untouched."""
        for matcher, node in self._entries.values():
            if matcher.matches(url):
                return node
        return None

    @staticmethod
    def _node_patterns(node: LocationDescriptor) -> list[str]:
        patterns = []
        if isinstance(node.uri, str) and node.uri:
            patterns.append(node.uri)
        for alias in node.aliases or ():
            if not isinstance(alias, str) or not alias:
                raise PatternCompileError(alias, node.type_id, "aliases must be non-empty strings")
            patterns.append(alias)
        return patterns

    @staticmethod
    def _compile(pattern: str, node: LocationDescriptor) -> UriMatcher:
        try:
            return WildcardMatcher.compile(pattern)
        except re.error as e:
            raise PatternCompileError(pattern, node.type_id, str(e)) from e
