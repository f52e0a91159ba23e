"""Location catalog - descriptors, data centers, and catalog loading."""

from .datacenters import INSIGHT_LOCATIONS, DataCenterInfo
from .loader import LocationLoader, load_locations
from .types import Location, LocationContext, LocationDescriptor

__all__ = [
    "INSIGHT_LOCATIONS",
    "DataCenterInfo",
    "Location",
    "LocationContext",
    "LocationDescriptor",
    "LocationLoader",
    "load_locations",
]
