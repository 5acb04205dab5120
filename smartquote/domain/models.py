"""Immutable domain models for SmartQuote.

All models are frozen dataclasses with slots. They have no external
dependencies and represent the catalogue, quote lines and logistics
routes the services work with.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping, Optional, Tuple, Union

from .errors import CatalogueError, ValidationError
from .normalization import normalize
from .postcodes import normalize_postcode

logger = logging.getLogger(__name__)


class MatchConfidence(Enum):
    """How a product line was matched to the catalogue."""

    EXACT = "exact"
    ALIAS = "alias"
    PATTERN = "pattern"


class AddressRole(Enum):
    """Role of an address within a job route."""

    BASE = "base"
    COLLECTION = "collection"
    SITE = "site"


class ZoneChargePolicy(Enum):
    """How often a zone surcharge is applied for a stop inside a zone.

    PER_UNIQUE_POSTCODE charges each distinct postcode once per route.
    PER_LEG_ENDPOINT charges every time the stop is an endpoint of a
    planned leg, so the site on a collection route is charged twice.
    """

    PER_UNIQUE_POSTCODE = "per_unique_postcode"
    PER_LEG_ENDPOINT = "per_leg_endpoint"


DEFAULT_ADDRESS_LABELS = {
    AddressRole.BASE: "Base",
    AddressRole.COLLECTION: "Collection Point",
    AddressRole.SITE: "Installation Site",
}


# -- Catalogue ---------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class CatalogueEntry:
    """A canonical catalogue product.

    Attributes:
        key: Canonical key, unique within a snapshot (e.g. 'FLX 4P')
        name: Display name
        install_time_hours: Install time per unit
        waste_volume_m3: Packaging waste per unit as stored in the catalogue
        is_heavy: Whether the item needs a two-person lift
        category: Free-form product category
    """

    key: str
    name: str = ""
    install_time_hours: float = 0.0
    waste_volume_m3: float = 0.0
    is_heavy: bool = False
    category: str = ""

    def __post_init__(self) -> None:
        if not self.key or not self.key.strip():
            raise ValidationError("Catalogue key must not be empty", field_name="key")
        if self.install_time_hours < 0:
            raise ValidationError(
                f"install_time_hours must be >= 0 for {self.key}, "
                f"got {self.install_time_hours}",
                field_name="install_time_hours",
            )
        if self.waste_volume_m3 < 0:
            raise ValidationError(
                f"waste_volume_m3 must be >= 0 for {self.key}, "
                f"got {self.waste_volume_m3}",
                field_name="waste_volume_m3",
            )


@dataclass(frozen=True, slots=True)
class CatalogueSnapshot:
    """Read-only view of the catalogue and its alias table.

    Build it with :meth:`build`; both keys and aliases are indexed by their
    normalized form so lookups are case and separator insensitive.

    Attributes:
        entries: Canonical key -> entry
        aliases: Raw alias text -> canonical key
    """

    entries: Mapping[str, CatalogueEntry]
    aliases: Mapping[str, str]
    key_index: Mapping[str, str] = field(repr=False)
    alias_index: Mapping[str, str] = field(repr=False)

    @classmethod
    def build(
        cls,
        entries: Iterable[CatalogueEntry],
        aliases: Union[Mapping[str, str], Iterable[Tuple[str, str]], None] = None,
    ) -> CatalogueSnapshot:
        """Index catalogue entries and aliases.

        Args:
            entries: Catalogue entries.
            aliases: Alias text -> canonical key, as a mapping or pairs.

        Returns:
            A new immutable snapshot.

        Raises:
            CatalogueError: If two entries share a normalized key.
        """
        by_key: dict[str, CatalogueEntry] = {}
        key_index: dict[str, str] = {}

        for entry in entries:
            normalized = normalize(entry.key)
            existing = key_index.get(normalized)
            if existing is not None:
                raise CatalogueError(
                    f"Duplicate catalogue key {entry.key!r} "
                    f"(normalizes like {existing!r})"
                )
            key_index[normalized] = entry.key
            by_key[entry.key] = entry

        pairs = aliases.items() if isinstance(aliases, Mapping) else (aliases or ())
        alias_map: dict[str, str] = {}
        alias_index: dict[str, str] = {}

        for alias, target in pairs:
            canonical = key_index.get(normalize(target))
            if canonical is None:
                logger.warning(
                    "Alias points to unknown catalogue key, skipped",
                    extra={"alias": alias, "target": target},
                )
                continue
            normalized_alias = normalize(alias)
            if not normalized_alias:
                continue
            alias_map[alias] = canonical
            alias_index[normalized_alias] = canonical

        return cls(
            entries=MappingProxyType(by_key),
            aliases=MappingProxyType(alias_map),
            key_index=MappingProxyType(key_index),
            alias_index=MappingProxyType(alias_index),
        )

    def get(self, key: str) -> Optional[CatalogueEntry]:
        """Get an entry by canonical key, in any case or spacing."""
        canonical = self.key_index.get(normalize(key))
        return self.entries.get(canonical) if canonical is not None else None

    def find_key(self, normalized_text: str) -> Optional[str]:
        """Return the canonical key whose normalized form equals the text."""
        return self.key_index.get(normalized_text)

    def find_alias(self, normalized_text: str) -> Optional[str]:
        """Return the canonical key an alias with this normalized form maps to."""
        return self.alias_index.get(normalized_text)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[CatalogueEntry]:
        return iter(self.entries.values())

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and normalize(key) in self.key_index


# -- Quote lines -------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ProductLineInput:
    """A raw quote line as parsed from a customer document.

    Attributes:
        product_code: Raw product code
        description: Raw description
        quantity: Number of units (integer > 0)
        manual_install_time_hours: Caller-supplied install time override
        line_number: Position in the source document, if known
    """

    product_code: str
    description: str = ""
    quantity: int = 1
    manual_install_time_hours: Optional[float] = None
    line_number: Optional[int] = None


@dataclass(frozen=True, slots=True)
class Resolved:
    """A line matched to a canonical catalogue entry."""

    canonical_key: str
    install_time_hours: float
    waste_volume_m3: float
    confidence: MatchConfidence
    # Which text matched is informational; equal matches compare equal
    matched_text: str = field(default="", compare=False)

    @property
    def is_resolved(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class Unresolved:
    """A line with no catalogue match; install time must be entered manually."""

    reason: str = "no catalogue or alias match"
    suggestions: tuple[str, ...] = ()
    requires_manual_entry: bool = True

    @property
    def is_resolved(self) -> bool:
        return False


ResolvedMatch = Union[Resolved, Unresolved]


@dataclass(frozen=True, slots=True)
class ProcessedLine:
    """Result of processing one quote line.

    Attributes:
        line: The original input line (quantity untouched)
        match: Resolved or Unresolved outcome
        install_time_hours: Effective per-unit install time (override wins),
            None for an unresolved line without an override
        waste_per_unit_m3: Waste volume per unit used for totals
        waste_band: Human-readable size band of the per-unit waste
        manual_override: Whether a caller-supplied install time was used
    """

    line: ProductLineInput
    match: ResolvedMatch
    install_time_hours: Optional[float]
    waste_per_unit_m3: float
    waste_band: str = ""
    manual_override: bool = False

    @property
    def quantity(self) -> int:
        return self.line.quantity

    @property
    def is_resolved(self) -> bool:
        return isinstance(self.match, Resolved)

    @property
    def requires_manual_entry(self) -> bool:
        return not self.is_resolved and self.install_time_hours is None

    @property
    def total_waste_m3(self) -> float:
        return self.waste_per_unit_m3 * self.line.quantity

    @property
    def total_install_hours(self) -> float:
        if self.install_time_hours is None:
            return 0.0
        return self.install_time_hours * self.line.quantity


@dataclass(frozen=True, slots=True)
class BatchResult:
    """Processed quote lines plus aggregates for downstream costing."""

    lines: tuple[ProcessedLine, ...] = field(default_factory=tuple)

    @property
    def total_waste_m3(self) -> float:
        return sum(line.total_waste_m3 for line in self.lines)

    @property
    def total_install_hours(self) -> float:
        return sum(line.total_install_hours for line in self.lines)

    @property
    def resolved_count(self) -> int:
        return sum(1 for line in self.lines if line.is_resolved)

    @property
    def unresolved_count(self) -> int:
        return len(self.lines) - self.resolved_count

    @property
    def unresolved_lines(self) -> tuple[ProcessedLine, ...]:
        return tuple(line for line in self.lines if not line.is_resolved)


# -- Logistics ---------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Address:
    """A route stop identified by its postcode.

    The postcode is normalized on construction; an empty label falls back
    to the default label for the role.

    Raises:
        ValidationError: If the postcode does not have a UK shape.
    """

    label: str
    postcode: str
    role: AddressRole = AddressRole.SITE

    def __post_init__(self) -> None:
        object.__setattr__(self, "postcode", normalize_postcode(self.postcode))
        if not self.label or not self.label.strip():
            object.__setattr__(self, "label", DEFAULT_ADDRESS_LABELS[self.role])


@dataclass(frozen=True, slots=True)
class LegMeasurement:
    """Distance and drive time between two postcodes."""

    distance_miles: float
    duration_minutes: float

    def __post_init__(self) -> None:
        values = (self.distance_miles, self.duration_minutes)
        if not all(math.isfinite(v) and v >= 0 for v in values):
            raise ValidationError(
                "Leg distance and duration must be finite and >= 0, got "
                f"{self.distance_miles} mi / {self.duration_minutes} min",
                field_name="leg",
            )


@dataclass(frozen=True, slots=True)
class RouteLeg:
    """One successfully measured segment of a route."""

    from_label: str
    to_label: str
    from_postcode: str
    to_postcode: str
    distance_miles: float
    duration_minutes: float


@dataclass(frozen=True, slots=True)
class LogisticsResult:
    """Costed multi-stop route for a job.

    Attributes:
        legs: Successfully measured legs in route order (base -> ... -> base)
        total_distance_miles: Sum of leg distances
        total_duration_minutes: Sum of leg durations
        ulez_charge: Total emission-zone surcharge
        congestion_charge: Total congestion-zone surcharge
        warnings: Ordered operational warnings
        estimated_fuel_cost: Distance times fuel cost, rounded to pence
        failed_legs: (from_postcode, to_postcode) of legs that could not be measured
    """

    legs: tuple[RouteLeg, ...]
    total_distance_miles: float
    total_duration_minutes: float
    ulez_charge: float
    congestion_charge: float
    warnings: tuple[str, ...]
    estimated_fuel_cost: float
    failed_legs: tuple[tuple[str, str], ...] = field(default_factory=tuple)

    @property
    def total_zone_charges(self) -> float:
        return self.ulez_charge + self.congestion_charge

    @property
    def is_complete(self) -> bool:
        """Check if every planned leg was measured."""
        return not self.failed_legs
