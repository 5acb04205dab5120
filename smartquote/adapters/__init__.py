"""Adapters layer - Concrete implementations of the ports.

- cache: InMemoryCache, NullCache
- catalogue: CSVCatalogueStore
- distance: PostcodeAreaDistanceProvider, GeodesicDistanceProvider
- zones: OutwardCodeZoneChecker
"""

from .cache import InMemoryCache, NullCache
from .catalogue import CSVCatalogueStore
from .distance import GeodesicDistanceProvider, PostcodeAreaDistanceProvider
from .zones import OutwardCodeZoneChecker, zone_providers_from_config

__all__ = [
    "InMemoryCache",
    "NullCache",
    "CSVCatalogueStore",
    "PostcodeAreaDistanceProvider",
    "GeodesicDistanceProvider",
    "OutwardCodeZoneChecker",
    "zone_providers_from_config",
]
