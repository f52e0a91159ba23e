"""
Locator Service - cross-application URL resolution

Maps logical location types (an application UI, an API stack) to concrete
URLs across environments, data residency zones and data centers:
- Fallback-priority node selection by environment/residency/data center
- Reverse lookup of arbitrary URLs via wildcard URI patterns
- Acting node detection that seeds the resolution context
"""

from .errors import CatalogError, DataCenterResolutionError, LocatorError, PatternCompileError
from .locations import INSIGHT_LOCATIONS, DataCenterInfo, Location, LocationContext, LocationDescriptor, load_locations
from .matrix import LocatorMatrix, StaticOrigin

__version__ = "0.1.0"

__all__ = [
    "INSIGHT_LOCATIONS",
    "CatalogError",
    "DataCenterInfo",
    "DataCenterResolutionError",
    "Location",
    "LocationContext",
    "LocationDescriptor",
    "LocatorError",
    "LocatorMatrix",
    "PatternCompileError",
    "StaticOrigin",
    "load_locations",
]
