"""Distance provider adapters.

Available implementations:
- PostcodeAreaDistanceProvider: offline area-band estimates
- GeodesicDistanceProvider: geopy geodesic distance between centroids
"""

from .area_table import PostcodeAreaDistanceProvider
from .geodesic import GeodesicDistanceProvider

__all__ = ["PostcodeAreaDistanceProvider", "GeodesicDistanceProvider"]
