"""Node index - multi-key lookup of location nodes with fallback priority."""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Iterator, Mapping, Sequence

from ..locations.types import LocationContext, LocationDescriptor
from .context import ContextManager, context_fields

logger = logging.getLogger(__name__)

WILDCARD = "*"

NodeKey = tuple[Any, ...]
KeyStrategy = Callable[[str, LocationContext], Iterable[NodeKey]]


def index_keys(node: LocationDescriptor) -> list[NodeKey]:
    """Keys under which a node is registered, most specific first."""
    keys: list[NodeKey] = []
    if node.environment and node.residency:
        if node.data_center_id:
            keys.append((node.type_id, node.environment, node.residency, node.data_center_id))
        keys.append((node.type_id, node.environment, node.residency))
    if node.environment:
        keys.append((node.type_id, node.environment, WILDCARD))
    keys.append((node.type_id, WILDCARD, WILDCARD))
    return keys


def _data_center_key(type_id: str, ctx: LocationContext) -> Iterator[NodeKey]:
    if ctx.data_center_id:
        yield (type_id, ctx.environment, ctx.residency, ctx.data_center_id)


def _accessible_keys(type_id: str, ctx: LocationContext) -> Iterator[NodeKey]:
    for location_id in ctx.accessible or ():
        if location_id != ctx.data_center_id:
            yield (type_id, ctx.environment, ctx.residency, location_id)


def _residency_key(type_id: str, ctx: LocationContext) -> Iterator[NodeKey]:
    if ctx.environment and ctx.residency:
        yield (type_id, ctx.environment, ctx.residency)


def _environment_key(type_id: str, ctx: LocationContext) -> Iterator[NodeKey]:
    if ctx.environment:
        yield (type_id, ctx.environment, WILDCARD)


def _type_key(type_id: str, ctx: LocationContext) -> Iterator[NodeKey]:
    yield (type_id, WILDCARD, WILDCARD)


# Tried in order; the first key present in the index wins
LOOKUP_STRATEGIES: tuple[KeyStrategy, ...] = (
    _data_center_key,
    _accessible_keys,
    _residency_key,
    _environment_key,
    _type_key,
)


def candidate_keys(type_id: str, context: LocationContext) -> list[NodeKey]:
    """All lookup keys for a type under a context, in priority order."""
    return [key for strategy in LOOKUP_STRATEGIES for key in strategy(type_id, context)]


class NodeIndex:
    """
    Indexed store of location nodes.

    Lookups without an explicit context use the ambient context held by the
    ContextManager and are memoized per type id; the memo is flushed whenever
    the ambient context changes or the catalog is reloaded.
    """

    def __init__(self, contexts: ContextManager):
        self._contexts = contexts
        self._nodes: list[LocationDescriptor] = []
        self._node_map: dict[NodeKey, LocationDescriptor] = {}
        self._memo: dict[str, LocationDescriptor] = {}
        contexts.subscribe(self._on_context_change)

    @property
    def nodes(self) -> list[LocationDescriptor]:
        """Loaded nodes in catalog order."""
        return list(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    def load(self, nodes: Sequence[LocationDescriptor]) -> None:
        """Replace the whole index with a new catalog."""
        node_map: dict[NodeKey, LocationDescriptor] = {}
        for node in nodes:
            for key in index_keys(node):
                node_map[key] = node

        self._nodes = list(nodes)
        self._node_map = node_map
        self._memo = {}
        logger.info(f"Indexed {len(self._nodes)} location nodes under {len(node_map)} keys")

    def effective_context(self, context: LocationContext | Mapping[str, Any] | None = None) -> LocationContext:
        """Overlay an explicit (possibly partial) context on the ambient one."""
        ambient = self._contexts.get_context()
        if context is None:
            return ambient
        explicit = context_fields(context)
        accessible = explicit.get("accessible")
        return LocationContext(
            environment=explicit.get("environment") or ambient.environment,
            residency=explicit.get("residency") or ambient.residency,
            data_center_id=explicit.get("data_center_id") or ambient.data_center_id,
            accessible=accessible if accessible is not None else ambient.accessible,
        )

    def lookup(
        self,
        type_id: str,
        context: LocationContext | Mapping[str, Any] | None = None,
    ) -> LocationDescriptor | None:
        """
        Get the best node for a location type.

        Args:
            type_id: Location type id, e.g. 'cd17:accounts'
            context: Optional context refining the selection.  Fields it
                leaves unset come from the ambient context.

        Returns:
            The matching node, or None if the type is unknown
        """
        if context is None and type_id in self._memo:
            return self._memo[type_id]

        effective = self.effective_context(context)
        node = None
        for key in candidate_keys(type_id, effective):
            node = self._node_map.get(key)
            if node is not None:
                break

        if node is not None and context is None:
            self._memo[type_id] = node
        return node

    def flush(self) -> None:
        """Forget memoized ambient lookups."""
        self._memo.clear()

    def _on_context_change(self, context: LocationContext) -> None:
        self.flush()
