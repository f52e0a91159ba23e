"""Resolution engine - node index, URI patterns, composition, and context."""

from .composer import UriComposer
from .context import ContextManager
from .index import LOOKUP_STRATEGIES, NodeIndex
from .matrix import LocatorMatrix
from .origin import PLACEHOLDER_ORIGIN, OriginProvider, StaticOrigin
from .patterns import UriMatcher, UriPatternIndex, WildcardMatcher, base_url

__all__ = [
    "LOOKUP_STRATEGIES",
    "PLACEHOLDER_ORIGIN",
    "ContextManager",
    "LocatorMatrix",
    "NodeIndex",
    "OriginProvider",
    "StaticOrigin",
    "UriComposer",
    "UriMatcher",
    "UriPatternIndex",
    "WildcardMatcher",
    "base_url",
]
