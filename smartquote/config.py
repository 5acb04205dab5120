"""Centralized configuration using Pydantic Settings.

Every fee, threshold and formula constant used by the services comes from
here rather than from literals in the code. Numeric constants are
Optional so a deployment can blank one out explicitly; the services then
refuse to start with a ConfigurationError instead of guessing.

Configuration can be overridden via environment variables:
- SQ_ROUTE_BASE_POSTCODE="SE1 4AA"
- SQ_ROUTE_CONGESTION_FEE=15.0
- SQ_WASTE_MAX_CAP_M3=0.15
- SQ_CATALOGUE_DATA_DIR=/path/to/catalogue
- etc.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Fixed waste profiles per product family (m3 per unit)
DEFAULT_WASTE_PROFILES: Dict[str, float] = {
    # Large workstations
    "FLX-8P": 0.120,
    "FLX-COWORK-8P": 0.120,
    "FLX-6P": 0.095,
    "FLX-COWORK-6P": 0.095,
    "FLX-4P": 0.075,
    "FLX-COWORK-4P": 0.075,
    # Single workstations
    "FLX-SINGLE": 0.035,
    "FLX-ESSENTIALS": 0.040,
    # Large tables
    "WORKAROUND-MEETING-L5200": 0.100,
    "WORKAROUND-MEETING-L4000": 0.085,
    "WORKAROUND-MEETING-L3600": 0.080,
    "WORKAROUND-MEETING-L2800": 0.070,
    "WORKAROUND-MEETING-L2000": 0.060,
    # Round tables
    "WORKAROUND-CIRCULAR": 0.045,
    "CAFE-ROUND": 0.025,
    # Storage
    "CREDENZA": 0.050,
    "LOCKER": 0.045,
    "PEDESTAL": 0.030,
    # Seating
    "JUST A CHAIR": 0.015,
    "CAGE-SOFA": 0.055,
    # Heavy items
    "BASS-RECT": 0.085,
    "BASS-PILL": 0.090,
    "ROLLER": 0.100,
    # Small items
    "PLANTER": 0.010,
    "SNAKEY RISER": 0.005,
    "POWER-MODULE": 0.008,
}


class MatchingConfig(BaseSettings):
    """Catalogue matching configuration.

    Environment variables prefixed with SQ_MATCH_.
    """

    model_config = SettingsConfigDict(env_prefix="SQ_MATCH_")

    suggestion_limit: int = 3
    suggestion_min_score: float = 70.0


class WasteConfig(BaseSettings):
    """Waste volume formula and family profiles.

    Environment variables prefixed with SQ_WASTE_.
    """

    model_config = SettingsConfigDict(env_prefix="SQ_WASTE_")

    base_m3: Optional[float] = 0.02
    time_factor: Optional[float] = 0.015
    heavy_multiplier: Optional[float] = 1.5
    max_cap_m3: Optional[float] = 0.15
    profiles: Dict[str, float] = Field(
        default_factory=lambda: dict(DEFAULT_WASTE_PROFILES)
    )


class RouteConfig(BaseSettings):
    """Route costing configuration.

    Environment variables prefixed with SQ_ROUTE_.
    """

    model_config = SettingsConfigDict(env_prefix="SQ_ROUTE_")

    base_label: str = "Base"
    base_postcode: Optional[str] = "SE1 4AA"
    congestion_fee: Optional[float] = 15.00
    emission_zone_fee: Optional[float] = 12.50
    fuel_cost_per_mile: Optional[float] = 0.15
    long_journey_miles: Optional[float] = 200.0
    long_duration_minutes: Optional[float] = 240.0
    lookup_timeout_seconds: Optional[float] = 10.0
    max_workers: int = 8
    zone_charge_policy: Literal["per_unique_postcode", "per_leg_endpoint"] = (
        "per_unique_postcode"
    )


class ZoneConfig(BaseSettings):
    """Outward-code prefixes for the charging zones.

    Letter-only prefixes match a whole postcode area, prefixes with a
    digit match a district and its lettered sub-districts.

    Environment variables prefixed with SQ_ZONE_.
    """

    model_config = SettingsConfigDict(env_prefix="SQ_ZONE_")

    ulez_prefixes: List[str] = Field(
        default_factory=lambda: ["EC", "WC", "E1", "SE1", "SW1", "N1", "NW1", "W1"]
    )
    congestion_prefixes: List[str] = Field(
        default_factory=lambda: ["EC", "WC", "SW1", "W1"]
    )


class DistanceConfig(BaseSettings):
    """Distance provider configuration.

    Environment variables prefixed with SQ_DISTANCE_.
    """

    model_config = SettingsConfigDict(env_prefix="SQ_DISTANCE_")

    provider: Literal["area_table", "geodesic"] = "area_table"
    coordinates_file: Optional[Path] = None
    road_factor: float = 1.25
    average_speed_mph: float = 30.0
    cache_ttl_seconds: Optional[float] = 24 * 3600


class CatalogueConfig(BaseSettings):
    """Catalogue CSV location.

    Environment variables prefixed with SQ_CATALOGUE_.
    """

    model_config = SettingsConfigDict(env_prefix="SQ_CATALOGUE_")

    data_dir: Path = Field(
        default_factory=lambda: Path(__file__).resolve().parent / "data"
    )
    products_file: str = "products.csv"
    aliases_file: str = "aliases.csv"

    @property
    def products_path(self) -> Path:
        """Full path to the products CSV file."""
        return self.data_dir / self.products_file

    @property
    def aliases_path(self) -> Path:
        """Full path to the aliases CSV file."""
        return self.data_dir / self.aliases_file


class ObservabilityConfig(BaseSettings):
    """Logging and observability configuration.

    Environment variables prefixed with SQ_LOG_.
    """

    model_config = SettingsConfigDict(env_prefix="SQ_LOG_")

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    structured: bool = False  # Set True for JSON logging


class AppConfig(BaseSettings):
    """Main application configuration aggregating all sub-configs.

        config = get_config()
        print(config.route.base_postcode)
        print(config.catalogue.products_path)

    Environment variables prefixed with SQ_.
    """

    model_config = SettingsConfigDict(env_prefix="SQ_")

    matching: MatchingConfig = Field(default_factory=MatchingConfig)
    waste: WasteConfig = Field(default_factory=WasteConfig)
    route: RouteConfig = Field(default_factory=RouteConfig)
    zones: ZoneConfig = Field(default_factory=ZoneConfig)
    distance: DistanceConfig = Field(default_factory=DistanceConfig)
    catalogue: CatalogueConfig = Field(default_factory=CatalogueConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)


@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    """Get the singleton application configuration.

    Configuration is loaded once and cached. To reload configuration
    (e.g., in tests), use reset_config() first.
    """
    return AppConfig()


def reset_config() -> None:
    """Reset the configuration cache."""
    get_config.cache_clear()
