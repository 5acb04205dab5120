"""Quote line processor - resolves and sizes a batch of quote lines.

Replaces per-line lookups scattered through quote costing with one pass
that keeps input order and quantities, and exposes the waste total for
the container-sizing step downstream.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from typing import Sequence

from ..domain.errors import ValidationError
from ..domain.models import (
    BatchResult,
    CatalogueSnapshot,
    ProcessedLine,
    ProductLineInput,
    Resolved,
)
from .catalogue_resolver import CatalogueResolver
from .waste_estimator import WasteEstimator, describe_waste_volume


@dataclass
class QuoteLineProcessor:
    """Orchestrates the resolver and the waste estimator over quote lines.

    Attributes:
        resolver: Matches lines to the catalogue
        estimator: Sizes per-unit waste
    """

    resolver: CatalogueResolver
    estimator: WasteEstimator

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def process_batch(
        self,
        lines: Sequence[ProductLineInput],
        snapshot: CatalogueSnapshot,
    ) -> BatchResult:
        """Resolve every line and attach install time and waste.

        Args:
            lines: Quote lines in document order.
            snapshot: Catalogue snapshot for this quote.

        Returns:
            BatchResult with one ProcessedLine per input line, same order.

        Raises:
            ValidationError: If any line is missing a required field; no
                line is processed in that case.
        """
        for index, line in enumerate(lines):
            self._validate_line(index, line)

        processed = tuple(self._process_line(line, snapshot) for line in lines)
        result = BatchResult(lines=processed)

        self._logger.info(
            "Quote batch processed",
            extra={
                "lines": len(processed),
                "resolved": result.resolved_count,
                "unresolved": result.unresolved_count,
                "total_waste_m3": round(result.total_waste_m3, 4),
            },
        )
        return result

    def _process_line(
        self, line: ProductLineInput, snapshot: CatalogueSnapshot
    ) -> ProcessedLine:
        match = self.resolver.resolve(line.product_code, line.description, snapshot)
        override = line.manual_install_time_hours

        if isinstance(match, Resolved):
            entry = snapshot.entries[match.canonical_key]
            catalogue_waste = self.estimator.estimate(
                match.canonical_key, match.install_time_hours, entry.is_heavy
            )
            match = dataclasses.replace(match, waste_volume_m3=catalogue_waste)

            if override is None:
                hours = match.install_time_hours
                waste = catalogue_waste
            else:
                hours = override
                waste = self.estimator.estimate(match.canonical_key, hours, entry.is_heavy)
        else:
            hours = override
            waste = self.estimator.estimate(
                line.product_code or line.description, override or 0.0, False
            )

        return ProcessedLine(
            line=line,
            match=match,
            install_time_hours=hours,
            waste_per_unit_m3=waste,
            waste_band=describe_waste_volume(waste),
            manual_override=override is not None,
        )

    @staticmethod
    def _validate_line(index: int, line: ProductLineInput) -> None:
        prefix = f"lines[{index}]"
        if not (line.product_code or "").strip() and not (line.description or "").strip():
            raise ValidationError(
                f"Line {index} has neither a product code nor a description",
                field_name=f"{prefix}.product_code",
            )
        if isinstance(line.quantity, bool) or not isinstance(line.quantity, int):
            raise ValidationError(
                f"Line {index} quantity must be an integer, got {line.quantity!r}",
                field_name=f"{prefix}.quantity",
            )
        if line.quantity <= 0:
            raise ValidationError(
                f"Line {index} quantity must be > 0, got {line.quantity}",
                field_name=f"{prefix}.quantity",
            )
        hours = line.manual_install_time_hours
        if hours is not None and hours < 0:
            raise ValidationError(
                f"Line {index} manual install time must be >= 0, got {hours}",
                field_name=f"{prefix}.manual_install_time_hours",
            )
