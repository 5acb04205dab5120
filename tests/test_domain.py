"""Tests for domain models, postcodes and address parsing."""

import pytest

from smartquote.domain import (
    Address,
    AddressRole,
    CatalogueEntry,
    CatalogueError,
    CatalogueSnapshot,
    LegMeasurement,
    ValidationError,
    find_postcode,
    is_valid_postcode,
    normalize_postcode,
    parse_address,
)
from smartquote.domain.postcodes import outward_code, postcode_area


class TestPostcodes:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("se14aa", "SE1 4AA"),
            ("SE1 4AA", "SE1 4AA"),
            (" ec1a  1bb ", "EC1A 1BB"),
            ("M1 1AE", "M1 1AE"),
            ("w1a1aa", "W1A 1AA"),
        ],
    )
    def test_normalize(self, raw, expected):
        assert normalize_postcode(raw) == expected

    @pytest.mark.parametrize("raw", ["", "LONDON", "12345", "SE1"])
    def test_invalid_postcode_raises(self, raw):
        with pytest.raises(ValidationError) as exc_info:
            normalize_postcode(raw)

        assert exc_info.value.field_name == "postcode"
        assert not is_valid_postcode(raw)

    def test_outward_code_and_area(self):
        assert outward_code("sw1a 1aa") == "SW1A"
        assert postcode_area("SW1A 1AA") == "SW"
        assert postcode_area("E1 6AN") == "E"

    def test_find_postcode_takes_last(self):
        text = "Ref SE1 4AA\n10 Downing Street\nLondon SW1A 2AA"

        assert find_postcode(text) == "SW1A 2AA"
        assert find_postcode("no postcode here") is None


class TestParseAddress:
    def test_label_is_first_line(self):
        address = parse_address("Acme Ltd\n1 Long Lane\nLondon\nse1 4aa")

        assert address == Address("Acme Ltd", "SE1 4AA", AddressRole.SITE)

    def test_postcode_only_uses_role_label(self):
        address = parse_address("M1 1AE", AddressRole.COLLECTION)

        assert address.label == "Collection Point"
        assert address.role == AddressRole.COLLECTION

    def test_missing_postcode_names_the_role(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_address("Acme Ltd\nSomewhere", AddressRole.SITE)

        assert exc_info.value.field_name == "site"


class TestAddress:
    def test_postcode_normalized(self):
        assert Address("Base", "se14aa", AddressRole.BASE).postcode == "SE1 4AA"

    def test_blank_label_defaults(self):
        assert Address("", "SE1 4AA").label == "Installation Site"

    def test_negative_leg_rejected(self):
        with pytest.raises(ValidationError):
            LegMeasurement(distance_miles=-1.0, duration_minutes=5.0)

    @pytest.mark.parametrize(
        "miles, minutes",
        [(float("nan"), 5.0), (10.0, float("nan")), (float("inf"), 5.0), (10.0, float("-inf"))],
    )
    def test_non_finite_leg_rejected(self, miles, minutes):
        with pytest.raises(ValidationError) as exc_info:
            LegMeasurement(distance_miles=miles, duration_minutes=minutes)
        assert exc_info.value.field_name == "leg"


class TestCatalogueSnapshot:
    def test_lookup_ignores_case_and_separators(self, snapshot):
        assert snapshot.get("flx_4p").key == "FLX 4P"
        assert "cafe round d1000" in snapshot
        assert snapshot.get("NOPE") is None
        assert len(snapshot) == 7

    def test_duplicate_normalized_keys_rejected(self):
        with pytest.raises(CatalogueError):
            CatalogueSnapshot.build(
                [CatalogueEntry("FLX 4P", install_time_hours=1.45), CatalogueEntry("flx-4p")]
            )

    def test_alias_to_unknown_key_skipped(self, catalogue_entries):
        snapshot = CatalogueSnapshot.build(
            catalogue_entries, [("4P FLX", "FLX 4P"), ("GHOST", "NOT-IN-CATALOGUE")]
        )

        assert snapshot.aliases == {"4P FLX": "FLX 4P"}
        assert snapshot.find_alias("GHOST") is None

    def test_snapshot_is_read_only(self, snapshot):
        with pytest.raises(TypeError):
            snapshot.entries["NEW"] = CatalogueEntry("NEW")

    @pytest.mark.parametrize(
        "kwargs, field_name",
        [
            ({"key": " "}, "key"),
            ({"key": "X", "install_time_hours": -1.0}, "install_time_hours"),
            ({"key": "X", "waste_volume_m3": -0.1}, "waste_volume_m3"),
        ],
    )
    def test_invalid_entry_rejected(self, kwargs, field_name):
        with pytest.raises(ValidationError) as exc_info:
            CatalogueEntry(**kwargs)

        assert exc_info.value.field_name == field_name
