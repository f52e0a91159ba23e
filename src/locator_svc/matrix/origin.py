"""Ambient origin - where the hosting application believes it is running."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable
from urllib.parse import urlsplit

PLACEHOLDER_ORIGIN = "http://localhost:9999"


@runtime_checkable
class OriginProvider(Protocol):
    """Exposes the current location, e.g. of a browser window or an inbound request."""
    origin: str
    pathname: str


@dataclass
class StaticOrigin:
    """An origin provider fixed to a single URL."""
    origin: str
    pathname: str = ""

    @classmethod
    def from_url(cls, url: str) -> StaticOrigin:
        parts = urlsplit(url)
        return cls(origin=f"{parts.scheme}://{parts.netloc}", pathname=parts.path)


def current_url(provider: OriginProvider | None, fallback: str = PLACEHOLDER_ORIGIN) -> str:
    """Origin plus path of the ambient location, or ``fallback`` when there is none."""
    if provider is None:
        return fallback
    pathname = provider.pathname or ""
    return provider.origin + (pathname if len(pathname) > 1 else "")
