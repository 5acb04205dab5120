"""Waste volume estimation.

A product's packaging waste comes from a fixed family profile when one
matches its code, otherwise from a formula over install time:

    waste = (base + install_time_hours * time_factor) * heavy_multiplier?

Both paths are clamped to ``[0, max_cap]``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from ..config import WasteConfig, get_config
from ..domain.errors import ConfigurationError
from ..domain.normalization import normalize

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WasteFormula:
    """Constants of the install-time waste formula."""

    base_m3: float
    time_factor: float
    heavy_multiplier: float
    max_cap_m3: float

    @classmethod
    def from_config(cls, config: WasteConfig) -> WasteFormula:
        """Build the formula, refusing missing or negative constants.

        Raises:
            ConfigurationError: If a constant is missing or negative.
        """
        values = {}
        for name in ("base_m3", "time_factor", "heavy_multiplier", "max_cap_m3"):
            value = getattr(config, name)
            if value is None:
                raise ConfigurationError(
                    f"Waste formula setting {name!r} is not configured",
                    setting_name=f"waste.{name}",
                    expected_type="float >= 0",
                )
            if value < 0:
                raise ConfigurationError(
                    f"Waste formula setting {name!r} must be >= 0, got {value}",
                    setting_name=f"waste.{name}",
                    expected_type="float >= 0",
                )
            values[name] = float(value)
        return cls(**values)

    def clamp(self, volume: float) -> float:
        return min(max(volume, 0.0), self.max_cap_m3)


@dataclass(frozen=True)
class WasteProfileTable:
    """Fixed waste volumes keyed by product-family prefix.

    A profile applies when its normalized key occurs anywhere in the
    normalized product code. When several apply, the longest key wins, so
    ``FLX-COWORK-8P`` beats ``FLX-8P`` for ``FLX-COWORK-8P-L4800``.
    """

    profiles: Mapping[str, float] = field(default_factory=dict)

    # Longest normalized key first, ties alphabetical
    _ordered: Tuple[Tuple[str, str, float], ...] = field(
        init=False, repr=False, default=()
    )

    def __post_init__(self) -> None:
        ordered = sorted(
            ((normalize(key), key, float(volume)) for key, volume in self.profiles.items()),
            key=lambda item: (-len(item[0]), item[0]),
        )
        object.__setattr__(self, "profiles", MappingProxyType(dict(self.profiles)))
        object.__setattr__(self, "_ordered", tuple(p for p in ordered if p[0]))

    def lookup(self, code: str) -> Optional[Tuple[str, float]]:
        """Find the most specific profile for a code.

        Returns:
            (profile key, volume) or None when no profile applies.
        """
        normalized = normalize(code)
        if not normalized:
            return None
        for normalized_key, key, volume in self._ordered:
            if normalized_key in normalized:
                return key, volume
        return None


def estimate_waste_volume(
    code: str,
    install_time_hours: float,
    is_heavy: bool,
    profiles: WasteProfileTable,
    formula: WasteFormula,
) -> float:
    """Estimate per-unit waste volume in m3.

    Args:
        code: Canonical key, or the raw code for an unresolved product.
        install_time_hours: Per-unit install time.
        is_heavy: Whether the product is heavy.
        profiles: Family profile table.
        formula: Formula constants.

    Returns:
        Waste volume within ``[0, formula.max_cap_m3]``.
    """
    profile = profiles.lookup(code)
    if profile is not None:
        return formula.clamp(profile[1])

    volume = formula.base_m3 + install_time_hours * formula.time_factor
    if is_heavy:
        volume *= formula.heavy_multiplier
    return formula.clamp(volume)


def describe_waste_volume(volume_m3: float) -> str:
    """Return a size band for a per-unit waste volume."""
    litres = volume_m3 * 1000
    if litres < 10:
        return "Minimal"
    if litres < 25:
        return "Small"
    if litres < 50:
        return "Medium"
    if litres < 75:
        return "Large"
    if litres < 100:
        return "Very Large"
    return "Extra Large"


@dataclass
class WasteEstimator:
    """Injectable waste estimator bound to a profile table and formula.

    Attributes:
        profiles: Family profile table
        formula: Formula constants
    """

    profiles: WasteProfileTable
    formula: WasteFormula

    @classmethod
    def from_config(cls, config: Optional[WasteConfig] = None) -> WasteEstimator:
        """Create an estimator from WasteConfig.

        Raises:
            ConfigurationError: If a formula constant is missing or negative.
        """
        config = config or get_config().waste
        for key, volume in config.profiles.items():
            if volume is None or volume < 0:
                raise ConfigurationError(
                    f"Waste profile {key!r} must be a volume >= 0, got {volume}",
                    setting_name="waste.profiles",
                    expected_type="float >= 0",
                )
        return cls(
            profiles=WasteProfileTable(config.profiles),
            formula=WasteFormula.from_config(config),
        )

    def estimate(self, code: str, install_time_hours: float, is_heavy: bool) -> float:
        """Estimate per-unit waste volume for a product code."""
        volume = estimate_waste_volume(
            code, install_time_hours, is_heavy, self.profiles, self.formula
        )
        logger.debug(
            "Waste estimated",
            extra={"code": code, "hours": install_time_hours, "waste_m3": volume},
        )
        return volume
