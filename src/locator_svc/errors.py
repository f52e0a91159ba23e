"""Locator exceptions.

Lookups that find nothing are not errors: they return ``None`` (or, for URL
resolution, the ambient fallback origin). These exceptions are reserved for
configuration problems.
"""

from __future__ import annotations


class LocatorError(Exception):
    """Base class for locator configuration errors."""
    pass


class CatalogError(LocatorError, ValueError):
    """Raised when a location catalog file or record is malformed."""
    pass


class PatternCompileError(LocatorError, ValueError):
    """Raised when a node URI or alias cannot be compiled into a matcher."""

    def __init__(self, pattern: object, type_id: str | None = None, reason: str = ""):
        self.pattern = pattern
        self.type_id = type_id
        detail = f"Invalid location pattern {pattern!r}"
        if type_id:
            detail += f" for location type '{type_id}'"
        if reason:
            detail += f": {reason}"
        super().__init__(detail)


class DataCenterResolutionError(LocatorError):
    """Raised in strict mode when no alternative of a virtual data center is accessible."""

    def __init__(self, data_center_id: str, alternatives: tuple[str, ...], accessible: list[str]):
        self.data_center_id = data_center_id
        self.alternatives = alternatives
        self.accessible = accessible
        super().__init__(
            f"None of the alternatives {list(alternatives)} for data center "
            f"'{data_center_id}' is accessible (accessible: {accessible})"
        )
