"""Application services - the four SmartQuote core operations.

Services depend only on ports and domain types; adapters are supplied by
the container or directly by the caller.
"""

from .catalogue_resolver import CatalogueResolver
from .quote_line_processor import QuoteLineProcessor
from .route_calculator import RouteCalculator
from .waste_estimator import (
    WasteEstimator,
    WasteFormula,
    WasteProfileTable,
    describe_waste_volume,
    estimate_waste_volume,
)

__all__ = [
    "CatalogueResolver",
    "QuoteLineProcessor",
    "RouteCalculator",
    "WasteEstimator",
    "WasteFormula",
    "WasteProfileTable",
    "describe_waste_volume",
    "estimate_waste_volume",
]
