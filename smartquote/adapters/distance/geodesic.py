"""Geodesic distance adapter.

Measures the great-circle distance between postcode centroids with
geopy, scales it by a road factor to approximate the drive, and derives
a duration from an average speed. Results are cached per postcode pair.
"""

from __future__ import annotations

import csv
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional, Tuple, Union

from geopy.distance import geodesic

from ...config import DistanceConfig, get_config
from ...domain.errors import ConfigurationError, ProviderError, ValidationError
from ...domain.models import LegMeasurement
from ...domain.postcodes import normalize_postcode
from ...ports.cache import CachePort
from ..cache.memory_cache import InMemoryCache

Coordinates = Tuple[float, float]


@dataclass
class GeodesicDistanceProvider:
    """DistanceProviderPort using geopy geodesic distances.

    Attributes:
        coordinates: Normalized postcode -> (latitude, longitude)
        road_factor: Multiplier from straight-line to road distance
        average_speed_mph: Speed used to derive the duration
        cache: Cache for measured legs
    """

    coordinates: Mapping[str, Coordinates]
    road_factor: float = 1.25
    average_speed_mph: float = 30.0
    cache: CachePort[LegMeasurement] = field(
        default_factory=lambda: InMemoryCache(name="distance")
    )

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)
        if self.road_factor <= 0 or self.average_speed_mph <= 0:
            raise ConfigurationError(
                "Road factor and average speed must be > 0",
                setting_name="distance.road_factor/average_speed_mph",
                expected_type="float > 0",
            )

    @classmethod
    def from_csv(
        cls,
        path: Union[str, Path],
        config: Optional[DistanceConfig] = None,
        cache: Optional[CachePort[Any]] = None,
    ) -> GeodesicDistanceProvider:
        """Build a provider from a ``postcode,latitude,longitude`` CSV file.

        Raises:
            ConfigurationError: If the file cannot be read or has bad rows.
        """
        config = config or get_config().distance
        path = Path(path)
        coordinates: dict[str, Coordinates] = {}
        try:
            with path.open(encoding="utf-8", newline="") as f:
                for row in csv.DictReader(f):
                    raw = (row.get("postcode") or "").strip()
                    if not raw:
                        continue
                    coordinates[normalize_postcode(raw)] = (
                        float(row["latitude"]),
                        float(row["longitude"]),
                    )
        except (OSError, KeyError, ValueError, ValidationError) as e:
            raise ConfigurationError(
                f"Cannot load postcode coordinates from {path}",
                setting_name="distance.coordinates_file",
                expected_type="CSV with postcode,latitude,longitude",
                cause=e,
            )

        return cls(
            coordinates=coordinates,
            road_factor=config.road_factor,
            average_speed_mph=config.average_speed_mph,
            cache=cache
            or InMemoryCache(name="distance", default_ttl_seconds=config.cache_ttl_seconds),
        )

    def measure(self, from_postcode: str, to_postcode: str) -> LegMeasurement:
        """Measure the approximate drive between two postcodes.

        Raises:
            ProviderError: If either postcode has no known coordinates.
        """
        cache_key = f"{from_postcode}|{to_postcode}"
        return self.cache.get_or_compute(
            cache_key, lambda: self._measure(from_postcode, to_postcode)
        )

    def _measure(self, from_postcode: str, to_postcode: str) -> LegMeasurement:
        origin = self._locate(from_postcode, (from_postcode, to_postcode))
        destination = self._locate(to_postcode, (from_postcode, to_postcode))

        miles = geodesic(origin, destination).miles * self.road_factor
        minutes = miles / self.average_speed_mph * 60

        self._logger.debug(
            "Geodesic distance measured",
            extra={"from": from_postcode, "to": to_postcode, "miles": round(miles, 2)},
        )
        return LegMeasurement(distance_miles=miles, duration_minutes=minutes)

    def _locate(self, postcode: str, pair: Tuple[str, str]) -> Coordinates:
        location = self.coordinates.get(postcode)
        if location is None:
            raise ProviderError(
                f"No coordinates for postcode {postcode}",
                provider="geodesic",
                postcodes=pair,
            )
        return location
