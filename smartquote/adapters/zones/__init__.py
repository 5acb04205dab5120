"""Charging-zone adapters."""

from .outward_code import OutwardCodeZoneChecker, zone_providers_from_config

__all__ = ["OutwardCodeZoneChecker", "zone_providers_from_config"]
