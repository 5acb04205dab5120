"""Domain layer - Core business models and errors.

This module contains immutable domain models and typed errors
used throughout the application. No external dependencies.
"""

from .addresses import parse_address
from .errors import (
    CatalogueError,
    ConfigurationError,
    ProviderError,
    RouteCancelledError,
    SmartQuoteError,
    UnresolvedProductError,
    ValidationError,
)
from .models import (
    Address,
    AddressRole,
    BatchResult,
    CatalogueEntry,
    CatalogueSnapshot,
    LegMeasurement,
    LogisticsResult,
    MatchConfidence,
    ProcessedLine,
    ProductLineInput,
    Resolved,
    ResolvedMatch,
    RouteLeg,
    Unresolved,
    ZoneChargePolicy,
)
from .normalization import normalize
from .postcodes import find_postcode, is_valid_postcode, normalize_postcode

__all__ = [
    # Models
    "CatalogueEntry",
    "CatalogueSnapshot",
    "MatchConfidence",
    "ProductLineInput",
    "Resolved",
    "Unresolved",
    "ResolvedMatch",
    "ProcessedLine",
    "BatchResult",
    "Address",
    "AddressRole",
    "LegMeasurement",
    "RouteLeg",
    "LogisticsResult",
    "ZoneChargePolicy",
    # Helpers
    "normalize",
    "normalize_postcode",
    "is_valid_postcode",
    "find_postcode",
    "parse_address",
    # Errors
    "SmartQuoteError",
    "ValidationError",
    "UnresolvedProductError",
    "ProviderError",
    "ConfigurationError",
    "CatalogueError",
    "RouteCancelledError",
]
