"""Charging-zone membership by outward code.

A prefix made only of letters (``EC``) covers the whole postcode area. A
prefix with a digit (``SW1``) covers that district and its lettered
sub-districts (``SW1A``, ``SW1P``) but not longer districts (``SW11``).
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Iterable, Tuple

from ...config import ZoneConfig, get_config
from ...domain.errors import ConfigurationError, ProviderError, ValidationError
from ...domain.postcodes import outward_code
from ...ports.zones import ZoneProviders

logger = logging.getLogger(__name__)

_AREA_PREFIX = re.compile(r"^[A-Z]{1,2}$")
_DISTRICT_PREFIX = re.compile(r"^[A-Z]{1,2}\d{1,2}[A-Z]?$")


@dataclass(frozen=True)
class OutwardCodeZoneChecker:
    """ZoneCheckerPort matching outward codes against prefixes.

    Attributes:
        zone_name: Name used in errors and logs (e.g. 'ULEZ')
        prefixes: Area or district prefixes inside the zone
    """

    zone_name: str
    prefixes: Tuple[str, ...] = field(default=())

    def __post_init__(self) -> None:
        cleaned = tuple(p.strip().upper() for p in self.prefixes if p and p.strip())
        for prefix in cleaned:
            if not (_AREA_PREFIX.match(prefix) or _DISTRICT_PREFIX.match(prefix)):
                raise ConfigurationError(
                    f"Invalid {self.zone_name} zone prefix {prefix!r}",
                    setting_name="zones",
                    expected_type="postcode area or district",
                )
        object.__setattr__(self, "prefixes", cleaned)

    def contains(self, postcode: str) -> bool:
        """Check whether a postcode lies inside the zone.

        Raises:
            ProviderError: If the postcode is malformed.
        """
        try:
            outward = outward_code(postcode)
        except ValidationError as e:
            raise ProviderError(
                f"Cannot check {self.zone_name} zone for {postcode!r}",
                provider=self.zone_name,
                postcodes=(postcode,),
                cause=e,
            )
        inside = any(self._matches(prefix, outward) for prefix in self.prefixes)
        logger.debug(
            "Zone check",
            extra={"zone": self.zone_name, "postcode": postcode, "inside": inside},
        )
        return inside

    @staticmethod
    def _matches(prefix: str, outward: str) -> bool:
        if _AREA_PREFIX.match(prefix):
            return re.match(r"[A-Z]+", outward).group(0) == prefix  # type: ignore[union-attr]
        if not outward.startswith(prefix):
            return False
        rest = outward[len(prefix):]
        return rest == "" or rest.isalpha()


def _checker(zone_name: str, prefixes: Iterable[str]) -> OutwardCodeZoneChecker:
    return OutwardCodeZoneChecker(zone_name=zone_name, prefixes=tuple(prefixes))


def zone_providers_from_config(config: ZoneConfig | None = None) -> ZoneProviders:
    """Build the emission and congestion checkers from ZoneConfig."""
    config = config or get_config().zones
    return ZoneProviders(
        emission=_checker("ULEZ", config.ulez_prefixes),
        congestion=_checker("Congestion", config.congestion_prefixes),
    )
