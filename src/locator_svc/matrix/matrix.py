"""Locator matrix - resolves location types to URLs and URLs back to locations."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, Mapping, Sequence

from ..locations.datacenters import INSIGHT_LOCATIONS, DataCenterInfo
from ..locations.loader import load_locations
from ..locations.types import LocationContext, LocationDescriptor
from .composer import UriComposer
from .context import ContextManager
from .index import NodeIndex
from .origin import PLACEHOLDER_ORIGIN, OriginProvider, current_url
from .patterns import UriPatternIndex

if TYPE_CHECKING:
    from ..config import Config

logger = logging.getLogger(__name__)

LocationFilter = Callable[[LocationDescriptor], bool]


class LocatorMatrix:
    """
    Abstracts the locations of a network of interrelated sites across
    environments, data residency zones and data centers.

    One instance owns its indices, its context and the composed-URL caches of
    the nodes it has loaded; it is meant to be driven from a single thread.

    Example:
        matrix = LocatorMatrix(nodes, context={"environment": "integration"})
        matrix.resolve_url(Location.ACCOUNTS_UI, "/#/users")
        matrix.find_by_uri("https://incidents-pr-12.ui-dev.product.dev.alertlogic.com/")
    """

    def __init__(
        self,
        nodes: Sequence[LocationDescriptor] = (),
        acting_uri: str | bool | None = None,
        context: LocationContext | Mapping[str, Any] | None = None,
        origin: OriginProvider | None = None,
        data_centers: Mapping[str, DataCenterInfo] = INSIGHT_LOCATIONS,
        fallback_origin: str = PLACEHOLDER_ORIGIN,
        strict_alternatives: bool = False,
    ):
        self._origin = origin
        self._fallback_origin = fallback_origin
        self._acting_uri: str | None = None
        self._actor: LocationDescriptor | None = None

        self._contexts = ContextManager(
            data_centers=data_centers,
            strict_alternatives=strict_alternatives,
            locate=self._node_for_data_center,
        )
        self._index = NodeIndex(self._contexts)
        self._patterns = UriPatternIndex()
        self._composer = UriComposer(self._index)
        self._contexts.subscribe(self._composer.invalidate)

        if context:
            self.set_context(context)
        if nodes:
            self.load(nodes)
        if acting_uri is not None:
            self.set_acting_uri(acting_uri)

    @classmethod
    def from_config(cls, config: Config, origin: OriginProvider | None = None) -> LocatorMatrix:
        """Build a matrix from service configuration."""
        nodes: list[LocationDescriptor] = []
        if config.catalog.definition_file:
            nodes = load_locations(config.catalog.definition_file)
        return cls(
            nodes=nodes,
            acting_uri=config.acting.uri,
            context={
                "environment": config.context.environment,
                "residency": config.context.residency,
                "data_center_id": config.context.data_center_id,
                "accessible": config.context.accessible,
            },
            origin=origin,
            fallback_origin=config.acting.fallback_origin,
            strict_alternatives=config.resolution.strict_alternatives,
        )

    # ------------------------------------------------------------------
    # Catalog
    # ------------------------------------------------------------------

    def load(self, nodes: Sequence[LocationDescriptor]) -> None:
        """
        Replace the catalog.

        Both indices are built before either is swapped in, so a bad alias
        pattern leaves the previous catalog in place.
        """
        nodes = list(nodes)
        patterns = UriPatternIndex()
        patterns.load(nodes)
        for node in nodes:
            node.invalidate()
        self._index.load(nodes)
        self._patterns = patterns

    @property
    def nodes(self) -> list[LocationDescriptor]:
        return self._index.nodes

    def search(self, predicate: LocationFilter) -> list[LocationDescriptor]:
        """All loaded nodes matching a predicate, in catalog order."""
        return [node for node in self._index.nodes if predicate(node)]

    def find_one(self, predicate: LocationFilter) -> LocationDescriptor | None:
        """First loaded node matching a predicate."""
        return next((node for node in self._index.nodes if predicate(node)), None)

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def get_node(
        self,
        type_id: str,
        context: LocationContext | Mapping[str, Any] | None = None,
    ) -> LocationDescriptor | None:
        """Select the node for a location type (see NodeIndex.lookup)."""
        return self._index.lookup(type_id, context)

    def resolve_node_uri(self, node: LocationDescriptor) -> str:
        """Full URL of a node, including its parents."""
        return self._composer.resolve(node)

    def resolve_url(
        self,
        type_id: str,
        path: str | None = None,
        context: LocationContext | Mapping[str, Any] | None = None,
    ) -> str:
        """
        Calculate a URL from a location type, an optional path and an optional context.

        Always returns a URL: an unknown type resolves to the ambient origin
        (or the fallback placeholder when there is none).
        """
        node = self._index.lookup(type_id, context)
        if node is not None:
            url = self._composer.resolve(node)
        else:
            url = current_url(self._origin, self._fallback_origin)
        if path:
            url += path
        return url

    def find_by_uri(self, url: str) -> LocationDescriptor | None:
        """Resolve a literal URL to the node it belongs to, adopting its base URL."""
        return self._patterns.find_by_uri(url)

    def match_uri(self, url: str) -> LocationDescriptor | None:
        """Like find_by_uri, but never rewrites the matched node."""
        return self._patterns.match(url)

    # ------------------------------------------------------------------
    # Acting node
    # ------------------------------------------------------------------

    @property
    def acting_uri(self) -> str | None:
        return self._acting_uri

    def get_acting_node(self) -> LocationDescriptor | None:
        """The node believed to be the running application, if detected."""
        return self._actor

    def set_acting_uri(self, acting_uri: str | bool | None) -> None:
        """
        Identify the acting node from its URL and adopt its environment and residency.

        Args:
            acting_uri: A URL to use literally; True to detect it from the
                origin provider; None or False to clear acting state.
        """
        if acting_uri is None or acting_uri is False:
            self._acting_uri = None
            self._actor = None
            return
        if acting_uri is True:
            acting_uri = current_url(self._origin, self._fallback_origin)
        if not acting_uri:
            return

        self._acting_uri = acting_uri
        self._actor = self.find_by_uri(acting_uri)
        if self._actor is not None:
            logger.info(
                f"Acting node is '{self._actor.type_id}' "
                f"({self._actor.environment or '*'}/{self._actor.residency or '*'})"
            )
            context = self._contexts.get_context()
            self.set_context(
                environment=self._actor.environment or context.environment,
                residency=self._actor.residency or context.residency,
            )

    # ------------------------------------------------------------------
    # Context
    # ------------------------------------------------------------------

    def set_context(self, partial: LocationContext | Mapping[str, Any] | None = None, **fields: Any) -> LocationContext:
        """Merge into the ambient context (fragmentary updates are fine)."""
        return self._contexts.set_context(partial, **fields)

    def get_context(self) -> LocationContext:
        """The live ambient context; mutating it bypasses cache invalidation."""
        return self._contexts.get_context()

    def _node_for_data_center(self, data_center_id: str) -> LocationDescriptor | None:
        return self.find_one(lambda n: n.data_center_id == data_center_id)
