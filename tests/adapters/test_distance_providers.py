"""Tests for the distance provider adapters."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from smartquote.adapters.cache import InMemoryCache, NullCache
from smartquote.adapters.distance import GeodesicDistanceProvider, PostcodeAreaDistanceProvider
from smartquote.config import DistanceConfig
from smartquote.domain.errors import ConfigurationError, ProviderError

POSTCODES_CSV = Path(__file__).resolve().parents[1] / "data" / "postcodes.csv"


class TestPostcodeAreaDistanceProvider:
    @pytest.mark.parametrize(
        "origin, destination, expected",
        [
            ("SE1 4AA", "SE16 2XU", (5.0, 15.0)),
            ("SE1 4AA", "B1 1AA", (120.0, 150.0)),
            ("B1 1AA", "EC1A 1BB", (120.0, 150.0)),
            ("SW1A 1AA", "LS1 4AP", (195.0, 240.0)),
            ("SE1 4AA", "M1 1AE", (50.0, 60.0)),
            ("M1 1AE", "LS1 4AP", (50.0, 60.0)),
        ],
    )
    def test_area_bands(self, origin, destination, expected):
        leg = PostcodeAreaDistanceProvider().measure(origin, destination)

        assert (leg.distance_miles, leg.duration_minutes) == expected

    def test_malformed_postcode_raises(self):
        with pytest.raises(ProviderError):
            PostcodeAreaDistanceProvider().measure("SE1 4AA", "nowhere")


class TestGeodesicDistanceProvider:
    @pytest.fixture
    def provider(self):
        return GeodesicDistanceProvider.from_csv(
            POSTCODES_CSV, config=DistanceConfig(road_factor=1.0), cache=NullCache()
        )

    def test_london_to_manchester(self, provider):
        leg = provider.measure("SE1 4AA", "M1 1AE")

        assert leg.distance_miles == pytest.approx(163, abs=5)
        assert leg.duration_minutes == pytest.approx(leg.distance_miles / 30 * 60)

    def test_road_factor_scales_distance(self):
        coordinates = {"SE1 4AA": (51.501, -0.089), "M1 1AE": (53.477, -2.233)}
        straight = GeodesicDistanceProvider(coordinates, road_factor=1.0, cache=NullCache())
        road = GeodesicDistanceProvider(coordinates, road_factor=1.5, cache=NullCache())

        assert road.measure("SE1 4AA", "M1 1AE").distance_miles == pytest.approx(
            straight.measure("SE1 4AA", "M1 1AE").distance_miles * 1.5
        )

    def test_unknown_postcode_raises(self, provider):
        with pytest.raises(ProviderError) as exc_info:
            provider.measure("SE1 4AA", "ZE1 0AA")

        assert exc_info.value.provider == "geodesic"

    def test_results_are_cached(self):
        cache = InMemoryCache(name="test")
        provider = GeodesicDistanceProvider(
            {"SE1 4AA": (51.501, -0.089), "M1 1AE": (53.477, -2.233)}, cache=cache
        )
        provider.measure("SE1 4AA", "M1 1AE")

        spy = MagicMock(wraps=provider._measure)
        provider._measure = spy
        provider.measure("SE1 4AA", "M1 1AE")

        spy.assert_not_called()
        assert cache.size() == 1

    def test_bad_coordinates_file_raises(self, tmp_path):
        bad = tmp_path / "coords.csv"
        bad.write_text("postcode,latitude,longitude\nSE1 4AA,north,west\n", encoding="utf-8")

        with pytest.raises(ConfigurationError):
            GeodesicDistanceProvider.from_csv(bad)

    def test_invalid_speed_rejected(self):
        with pytest.raises(ConfigurationError):
            GeodesicDistanceProvider({}, average_speed_mph=0)
