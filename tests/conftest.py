"""Shared fixtures and port fakes for the SmartQuote test suite."""

from __future__ import annotations

import threading
import time
from typing import Dict, Iterable, Optional, Tuple

import pytest

from smartquote.config import MatchingConfig, RouteConfig, WasteConfig, ZoneConfig, reset_config
from smartquote.domain.errors import ProviderError
from smartquote.domain.models import (
    Address,
    AddressRole,
    CatalogueEntry,
    CatalogueSnapshot,
    LegMeasurement,
)
from smartquote.ports.zones import ZoneProviders
from smartquote.services import (
    CatalogueResolver,
    QuoteLineProcessor,
    WasteEstimator,
)

Pair = Tuple[str, str]


class FakeDistanceProvider:
    """In-memory DistanceProviderPort.

    Returns ``default`` for any pair not in ``legs``. Pairs in ``failing``
    raise ProviderError, pairs in ``missing`` return None, and pairs in
    ``blocking`` wait on ``release`` before answering. Every call sleeps
    ``delay`` seconds first.
    """

    def __init__(
        self,
        legs: Optional[Dict[Pair, Tuple[float, float]]] = None,
        default: Tuple[float, float] = (10.0, 20.0),
        failing: Iterable[Pair] = (),
        missing: Iterable[Pair] = (),
        blocking: Iterable[Pair] = (),
        delay: float = 0.0,
    ):
        self.legs = dict(legs or {})
        self.default = default
        self.failing = set(failing)
        self.missing = set(missing)
        self.blocking = set(blocking)
        self.delay = delay
        self.release = threading.Event()
        self.on_block = None
        self.calls: list[Pair] = []
        self._lock = threading.Lock()

    def measure(self, from_postcode: str, to_postcode: str) -> Optional[LegMeasurement]:
        pair = (from_postcode, to_postcode)
        with self._lock:
            self.calls.append(pair)
        if self.delay:
            time.sleep(self.delay)
        if pair in self.blocking:
            if self.on_block is not None:
                self.on_block()
            self.release.wait(5)
        if pair in self.failing:
            raise ProviderError("route service unavailable", provider="fake", postcodes=pair)
        if pair in self.missing:
            return None
        miles, minutes = self.legs.get(pair, self.default)
        return LegMeasurement(distance_miles=miles, duration_minutes=minutes)


class FakeZoneChecker:
    """ZoneCheckerPort answering from a fixed set of postcodes."""

    def __init__(self, inside: Iterable[str] = (), failing: Iterable[str] = ()):
        self.inside = set(inside)
        self.failing = set(failing)
        self.calls: list[str] = []

    def contains(self, postcode: str) -> bool:
        self.calls.append(postcode)
        if postcode in self.failing:
            raise ProviderError("zone lookup failed", provider="fake", postcodes=(postcode,))
        return postcode in self.inside


@pytest.fixture(autouse=True)
def _fresh_config():
    """Keep cached configuration from leaking between tests."""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def catalogue_entries() -> list[CatalogueEntry]:
    return [
        CatalogueEntry("FLX 4P", "FLX 4-person bench", 1.45, 0.035, True, "workstation"),
        CatalogueEntry("FLX 6P", "FLX 6-person bench", 1.90, 0.035, True, "workstation"),
        CatalogueEntry("FLX-COWORK-4P-L2400", "FLX co-work 4P", 1.45, 0.035, True),
        CatalogueEntry("Just A Chair", "Just A Chair", 0.30, 0.035, False, "seating"),
        CatalogueEntry("Hi-Lo Single", "Hi-Lo single desk", 1.30, 0.035, True),
        CatalogueEntry("WORKAROUND-MEETING-L2000", "Meeting table", 1.30, 0.035, True),
        CatalogueEntry("CAFE-ROUND-D1000", "Cafe round table", 0.40, 0.035, False),
    ]


@pytest.fixture
def snapshot(catalogue_entries) -> CatalogueSnapshot:
    return CatalogueSnapshot.build(
        catalogue_entries,
        {
            "4P FLX": "FLX 4P",
            "WA-MEETING-L2000": "WORKAROUND-MEETING-L2000",
            "R-JAC": "Just A Chair",
        },
    )


@pytest.fixture
def resolver() -> CatalogueResolver:
    return CatalogueResolver(config=MatchingConfig())


@pytest.fixture
def estimator() -> WasteEstimator:
    return WasteEstimator.from_config(WasteConfig())


@pytest.fixture
def processor(resolver, estimator) -> QuoteLineProcessor:
    return QuoteLineProcessor(resolver=resolver, estimator=estimator)


@pytest.fixture
def route_config() -> RouteConfig:
    return RouteConfig(lookup_timeout_seconds=2.0)


@pytest.fixture
def zone_config() -> ZoneConfig:
    return ZoneConfig()


@pytest.fixture
def base() -> Address:
    return Address("Base", "SE1 4AA", AddressRole.BASE)


@pytest.fixture
def fake_zones() -> ZoneProviders:
    return ZoneProviders(emission=FakeZoneChecker(), congestion=FakeZoneChecker())


@pytest.fixture
def make_distance():
    """Factory for FakeDistanceProvider; releases blocked lookups on teardown."""
    created: list[FakeDistanceProvider] = []

    def _make(**kwargs) -> FakeDistanceProvider:
        provider = FakeDistanceProvider(**kwargs)
        created.append(provider)
        return provider

    yield _make
    for provider in created:
        provider.release.set()


@pytest.fixture
def make_zone_checker():
    return FakeZoneChecker
