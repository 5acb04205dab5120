"""Distance port - Abstraction for postcode-to-postcode drive measurements.

Implementations may call a routing API, read a precomputed table or
estimate geometrically. The route calculator treats any exception or a
None result as a failed lookup.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Protocol

if TYPE_CHECKING:
    from ..domain.models import LegMeasurement


class DistanceProviderPort(Protocol):
    """Port for drive distance and time between two postcodes.

    Implementations:
    - adapters/distance/area_table.py (PostcodeAreaDistanceProvider)
    - adapters/distance/geodesic.py (GeodesicDistanceProvider)
    """

    def measure(self, from_postcode: str, to_postcode: str) -> Optional[LegMeasurement]:
        """Measure the drive between two normalized postcodes.

        Args:
            from_postcode: Origin postcode (e.g. 'SE1 4AA').
            to_postcode: Destination postcode.

        Returns:
            Distance in miles and duration in minutes, or None if unknown.

        Raises:
            ProviderError: If the lookup fails.
        """
        ...
