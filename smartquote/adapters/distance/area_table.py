"""Offline distance estimates by postcode area.

Used when no routing service is configured. The figures are coarse
bands for jobs dispatched from central London, not real drive times.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Mapping, Tuple

from ...domain.errors import ProviderError, ValidationError
from ...domain.models import LegMeasurement
from ...domain.postcodes import postcode_area

logger = logging.getLogger(__name__)

CENTRAL_LONDON_AREAS = frozenset({"SE", "SW", "EC", "WC"})

# Destination area -> (miles, minutes) from central London
DEFAULT_REGIONAL_BANDS: Mapping[str, Tuple[float, float]] = {
    "B": (120.0, 150.0),
    "LS": (195.0, 240.0),
}


@dataclass(frozen=True)
class PostcodeAreaDistanceProvider:
    """DistanceProviderPort backed by a small area-to-area table.

    Attributes:
        same_area: (miles, minutes) when both postcodes share an area
        fallback: (miles, minutes) for any pair not covered by the table
        regional_bands: Area -> (miles, minutes) from central London
        central_areas: Areas treated as central London
    """

    same_area: Tuple[float, float] = (5.0, 15.0)
    fallback: Tuple[float, float] = (50.0, 60.0)
    regional_bands: Mapping[str, Tuple[float, float]] = field(
        default_factory=lambda: dict(DEFAULT_REGIONAL_BANDS)
    )
    central_areas: frozenset[str] = CENTRAL_LONDON_AREAS

    def measure(self, from_postcode: str, to_postcode: str) -> LegMeasurement:
        """Estimate the drive between two postcodes.

        Raises:
            ProviderError: If either postcode is malformed.
        """
        try:
            origin = postcode_area(from_postcode)
            destination = postcode_area(to_postcode)
        except ValidationError as e:
            raise ProviderError(
                "Cannot estimate distance for malformed postcode",
                provider="area_table",
                postcodes=(from_postcode, to_postcode),
                cause=e,
            )

        if origin == destination:
            miles, minutes = self.same_area
        elif origin in self.central_areas and destination in self.regional_bands:
            miles, minutes = self.regional_bands[destination]
        elif destination in self.central_areas and origin in self.regional_bands:
            miles, minutes = self.regional_bands[origin]
        else:
            miles, minutes = self.fallback

        logger.debug(
            "Area distance estimate",
            extra={"from": from_postcode, "to": to_postcode, "miles": miles},
        )
        return LegMeasurement(distance_miles=miles, duration_minutes=minutes)
