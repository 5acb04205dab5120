"""Ports layer - Abstract interfaces (Protocols) for the application.

Ports define the contracts between the application core and external
adapters. They enable dependency injection and make the system testable.

- Catalogue store: where snapshots come from
- Distance provider: drive distance/time between postcodes
- Zone checkers: congestion and emission-zone membership
- Cache: injectable caching for adapters
"""

from .cache import CachePort
from .catalogue import CatalogueStorePort
from .distance import DistanceProviderPort
from .zones import ZoneCheckerPort, ZoneProviders

__all__ = [
    "CatalogueStorePort",
    "DistanceProviderPort",
    "ZoneCheckerPort",
    "ZoneProviders",
    "CachePort",
]
