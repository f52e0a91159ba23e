"""Context manager - owns and normalizes the ambient resolution context."""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping

from ..errors import DataCenterResolutionError
from ..locations.datacenters import INSIGHT_LOCATIONS, DataCenterInfo
from ..locations.types import LocationContext, LocationDescriptor

logger = logging.getLogger(__name__)

ContextListener = Callable[[LocationContext], None]

_CONTEXT_FIELDS = ("environment", "residency", "data_center_id", "accessible")


def context_fields(partial: LocationContext | Mapping[str, Any] | None, **fields: Any) -> dict[str, Any]:
    """Flatten a context object, mapping and/or keyword overrides into one dict."""
    values: dict[str, Any] = {}
    if isinstance(partial, LocationContext):
        values.update(partial.to_dict())
    elif partial:
        values.update(partial)
    values.update(fields)
    unknown = set(values) - set(_CONTEXT_FIELDS)
    if unknown:
        raise TypeError(f"Unknown context fields: {sorted(unknown)}")
    return values


class ContextManager:
    """
    Holds the live resolution context.

    Updates are merges: a field that is omitted or falsy leaves the current
    value untouched.  Every update notifies listeners synchronously, so caches
    keyed on the context (the node index memo, composed URIs) are flushed
    before ``set_context`` returns.
    """

    def __init__(
        self,
        data_centers: Mapping[str, DataCenterInfo] = INSIGHT_LOCATIONS,
        strict_alternatives: bool = False,
        locate: Callable[[str], LocationDescriptor | None] | None = None,
    ):
        self._context = LocationContext()
        self._data_centers = data_centers
        self._strict_alternatives = strict_alternatives
        self._locate = locate
        self._listeners: list[ContextListener] = []

    def subscribe(self, listener: ContextListener) -> None:
        """Register a callback run after every context update."""
        self._listeners.append(listener)

    def get_context(self) -> LocationContext:
        """Return the live (mutable) context."""
        return self._context

    def set_context(self, partial: LocationContext | Mapping[str, Any] | None = None, **fields: Any) -> LocationContext:
        """
        Merge fields into the live context and normalize it.

        Args:
            partial: A LocationContext or mapping with any subset of
                environment, residency, data_center_id, accessible
            **fields: Individual fields, applied over ``partial``

        Returns:
            The live context

        Raises:
            DataCenterResolutionError: In strict mode, when no alternative of a
                virtual data center is accessible.  The live context is left
                as it was before the call.
        """
        update = context_fields(partial, **fields)
        # Work on a copy; the live context only changes if normalization succeeds
        context = self._context.copy()
        try:
            if update.get("data_center_id"):
                context.data_center_id = update["data_center_id"]
            if update.get("accessible"):
                context.accessible = list(update["accessible"])

            # A node bound to the data center sets the default residency;
            # an explicit residency below still wins.
            if context.data_center_id and self._locate is not None:
                bound = self._locate(context.data_center_id)
                if bound is not None and bound.residency:
                    context.residency = bound.residency

            if update.get("environment"):
                context.environment = update["environment"]
            if update.get("residency"):
                context.residency = update["residency"]

            self._normalize(context)
            self._commit(context)
        finally:
            for listener in self._listeners:
                listener(self._context)
        return self._context

    def _commit(self, context: LocationContext) -> None:
        live = self._context
        live.environment = context.environment
        live.residency = context.residency
        live.data_center_id = context.data_center_id
        live.accessible = context.accessible

    def _normalize(self, context: LocationContext) -> None:
        """Map a virtual insight location to a concrete data center and align residency."""
        if not context.data_center_id or not context.accessible:
            return
        requested = context.data_center_id
        info = self._data_centers.get(requested)
        if info is None:
            return

        if info.is_virtual:
            selected = next((alt for alt in info.alternatives if alt in context.accessible), None)
            if selected is None:
                if self._strict_alternatives:
                    raise DataCenterResolutionError(requested, info.alternatives, list(context.accessible))
                selected = info.alternatives[0]
                logger.warning(
                    f"No accessible alternative for insight location '{requested}'; "
                    f"defaulting to '{selected}'"
                )
            logger.info(f"Notice: treating insight location '{requested}' as '{selected}'")
            context.data_center_id = selected
            info = self._data_centers.get(selected, info)

        # Data center ids are more specific than residency settings
        if info.residency and context.residency != info.residency:
            context.residency = info.residency
