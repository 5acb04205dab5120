"""Typed domain errors for SmartQuote.

Validation, configuration and cancellation errors stop the operation that
raised them. Provider errors are absorbed by the route calculator and
turned into warnings; unresolved products are normally reported as an
``Unresolved`` value rather than raised.

All errors inherit from SmartQuoteError and can optionally wrap a root
cause exception for debugging.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class SmartQuoteError(Exception):
    """Base error for the SmartQuote domain.

    Attributes:
        message: Human-readable error description
        cause: Optional underlying exception that caused this error
    """

    message: str
    cause: Optional[Exception] = field(default=None, repr=False)

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message

    def __post_init__(self) -> None:
        super().__init__(self.message)


@dataclass
class ValidationError(SmartQuoteError):
    """A required address or line field is missing or malformed.

    Attributes:
        field_name: Name of the offending field (e.g. 'site', 'lines[2].quantity')
    """

    field_name: str = ""


@dataclass
class UnresolvedProductError(SmartQuoteError):
    """No catalogue, alias or pattern match exists for a product.

    Attributes:
        product_code: The raw product code that could not be matched
        suggestions: Near-miss canonical keys, best first
    """

    product_code: str = ""
    suggestions: tuple[str, ...] = ()


@dataclass
class ProviderError(SmartQuoteError):
    """A distance or zone lookup failed or timed out.

    Attributes:
        provider: Name of the provider that failed
        postcodes: Postcodes involved in the lookup
        is_timeout: Whether the failure was a timeout
    """

    provider: str = ""
    postcodes: tuple[str, ...] = ()
    is_timeout: bool = False


@dataclass
class ConfigurationError(SmartQuoteError):
    """Invalid or missing configuration.

    Attributes:
        setting_name: Name of the problematic setting
        expected_type: Expected type or format
    """

    setting_name: str = ""
    expected_type: Optional[str] = None


@dataclass
class CatalogueError(SmartQuoteError):
    """Catalogue loading or data integrity error.

    Attributes:
        file_path: Path to the catalogue data file if relevant
    """

    file_path: Optional[str] = None


@dataclass
class RouteCancelledError(SmartQuoteError):
    """The caller cancelled a route computation before it completed.

    Attributes:
        pending_lookups: Number of lookups abandoned at cancellation time
    """

    pending_lookups: int = 0
