"""Tests for outward-code zone checkers."""

import pytest

from smartquote.adapters.zones import OutwardCodeZoneChecker, zone_providers_from_config
from smartquote.config import ZoneConfig
from smartquote.domain.errors import ConfigurationError, ProviderError


@pytest.fixture
def zones():
    return zone_providers_from_config(ZoneConfig())


@pytest.mark.parametrize(
    "postcode, in_ulez, in_congestion",
    [
        ("EC1A 1BB", True, True),
        ("WC2N 5DU", True, True),
        ("SW1A 1AA", True, True),
        ("W1A 1AA", True, True),
        ("SE1 4AA", True, False),
        ("E1 6AN", True, False),
        ("N1 9GU", True, False),
        ("NW1 2DB", True, False),
        ("E14 5AB", False, False),
        ("SW11 1AA", False, False),
        ("W10 5AA", False, False),
        ("SE10 9NN", False, False),
        ("M1 1AE", False, False),
    ],
)
def test_default_zone_membership(zones, postcode, in_ulez, in_congestion):
    assert zones.emission.contains(postcode) is in_ulez
    assert zones.congestion.contains(postcode) is in_congestion


def test_prefixes_are_normalized():
    checker = OutwardCodeZoneChecker("Test", (" ec ", "sw1"))

    assert checker.prefixes == ("EC", "SW1")
    assert checker.contains("SW1P 3BU")


def test_invalid_prefix_rejected():
    with pytest.raises(ConfigurationError):
        OutwardCodeZoneChecker("Test", ("1AB",))


def test_malformed_postcode_raises():
    with pytest.raises(ProviderError):
        OutwardCodeZoneChecker("Test", ("EC",)).contains("not a postcode")
