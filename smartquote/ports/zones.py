"""Zone ports - Abstractions for charging-zone membership checks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


class ZoneCheckerPort(Protocol):
    """Port for "is this postcode inside the zone" lookups.

    Implementation: adapters/zones/outward_code.py
    """

    def contains(self, postcode: str) -> bool:
        """Check whether a normalized postcode lies inside the zone.

        Raises:
            ProviderError: If the lookup fails.
        """
        ...


@dataclass(frozen=True)
class ZoneProviders:
    """The two independently callable zone checkers used for costing.

    Attributes:
        emission: Ultra Low Emission Zone checker
        congestion: Congestion Charge zone checker
    """

    emission: ZoneCheckerPort
    congestion: ZoneCheckerPort
