"""Tests for configuration loading and logging setup."""

import json
import logging

from smartquote.config import AppConfig, ObservabilityConfig, RouteConfig, get_config, reset_config
from smartquote.logging_setup import JsonFormatter, configure_logging


def test_route_settings_from_environment(monkeypatch):
    monkeypatch.setenv("SQ_ROUTE_CONGESTION_FEE", "18.5")
    monkeypatch.setenv("SQ_ROUTE_BASE_POSTCODE", "M1 1AE")

    config = RouteConfig()

    assert config.congestion_fee == 18.5
    assert config.base_postcode == "M1 1AE"


def test_get_config_is_cached_until_reset(monkeypatch):
    first = get_config()
    assert get_config() is first

    monkeypatch.setenv("SQ_WASTE_MAX_CAP_M3", "0.2")
    reset_config()

    assert get_config() is not first
    assert get_config().waste.max_cap_m3 == 0.2


def test_default_constants():
    config = AppConfig()

    assert config.route.emission_zone_fee == 12.50
    assert config.route.congestion_fee == 15.00
    assert config.route.zone_charge_policy == "per_unique_postcode"
    assert config.waste.base_m3 == 0.02
    assert config.catalogue.products_path.name == "products.csv"


def test_json_formatter_includes_extra_fields():
    record = logging.LogRecord("smartquote.test", logging.INFO, __file__, 1, "Route computed", None, None)
    record.legs = 3
    record.zone_charges = 27.5

    payload = json.loads(JsonFormatter().format(record))

    assert payload["message"] == "Route computed"
    assert payload["level"] == "INFO"
    assert payload["legs"] == 3
    assert payload["zone_charges"] == 27.5
    assert "args" not in payload


def test_configure_logging_structured():
    logger = configure_logging(
        ObservabilityConfig(level="debug", structured=True), logger_name="smartquote.test_setup"
    )

    assert logger.level == logging.DEBUG
    assert isinstance(logger.handlers[0].formatter, JsonFormatter)
    assert logger.propagate is False
