"""URI composer - assembles full node URLs from parent links and fragments."""

from __future__ import annotations

import re

from ..locations.types import LocationContext, LocationDescriptor
from .index import NodeIndex

_SCHEME = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.\-]*://")

DEFAULT_SCHEME = "https://"


class UriComposer:
    """
    Resolves the full URL of a node, memoized on the node's ``full_uri``.

    Parent nodes are selected with the ambient context, not the child's.
    A ``parent_id`` cycle in the catalog is a configuration error and is not
    detected here.
    """

    def __init__(self, index: NodeIndex):
        self._index = index

    def resolve(self, node: LocationDescriptor) -> str:
        if node.full_uri:
            return node.full_uri
        if node.detected:
            node.full_uri = node.uri
            return node.uri

        uri = ""
        if node.parent_id:
            parent = self._index.lookup(node.parent_id)
            if parent is not None:
                uri += self.resolve(parent)
        if node.uri:
            uri += node.uri
            # Some legacy nodes (auth0, for one) are stored without a protocol
            if not node.parent_id and not _SCHEME.match(uri):
                uri = DEFAULT_SCHEME + uri
        node.full_uri = uri
        return uri

    def invalidate(self, context: LocationContext | None = None) -> None:
        """Drop every composed URL (the parent chain may resolve differently now)."""
        for node in self._index.nodes:
            node.invalidate()
