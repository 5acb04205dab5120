"""Catalogue resolver - matches raw product text to canonical entries.

The resolver is pure: every call receives the catalogue snapshot it
should match against, so results depend only on the arguments.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from ..config import MatchingConfig, get_config
from ..domain.errors import UnresolvedProductError
from ..domain.models import CatalogueSnapshot, Resolved, ResolvedMatch, Unresolved
from ..matching.matchers import MatcherChain
from ..matching.suggestions import suggest_keys


@dataclass
class CatalogueResolver:
    """Resolve product codes and descriptions against a catalogue snapshot.

    The code is tried first, then the description; for each text the
    matcher chain runs exact key, alias, then family patterns.

    Attributes:
        chain: Ordered matchers
        config: Suggestion settings for unresolved lines
    """

    chain: MatcherChain = field(default_factory=MatcherChain.default)
    config: MatchingConfig = field(default_factory=lambda: get_config().matching)

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def resolve(
        self,
        raw_code: str,
        raw_description: str,
        snapshot: CatalogueSnapshot,
    ) -> ResolvedMatch:
        """Match a product line to the catalogue.

        Args:
            raw_code: Product code as written on the quote.
            raw_description: Free-text description, may be empty.
            snapshot: Catalogue to match against.

        Returns:
            Resolved with confidence exact/alias/pattern, or Unresolved.
        """
        for text in (raw_code, raw_description):
            if not text or not text.strip():
                continue
            result = self.chain.match(text, snapshot)
            if result is not None:
                self._logger.debug(
                    "Product resolved",
                    extra={
                        "code": raw_code,
                        "key": result.canonical_key,
                        "confidence": result.confidence.value,
                    },
                )
                return result

        suggestions = self._suggest(raw_code or raw_description, snapshot)
        self._logger.info(
            "Product unresolved",
            extra={"code": raw_code, "suggestions": list(suggestions)},
        )
        return Unresolved(suggestions=suggestions)

    def resolve_or_raise(
        self,
        raw_code: str,
        raw_description: str,
        snapshot: CatalogueSnapshot,
    ) -> Resolved:
        """Match a product line, raising if nothing matches.

        Raises:
            UnresolvedProductError: If no catalogue, alias or pattern match exists.
        """
        result = self.resolve(raw_code, raw_description, snapshot)
        if isinstance(result, Unresolved):
            raise UnresolvedProductError(
                f"No catalogue match for {raw_code!r}: {result.reason}",
                product_code=raw_code,
                suggestions=result.suggestions,
            )
        return result

    def _suggest(self, text: Optional[str], snapshot: CatalogueSnapshot) -> tuple[str, ...]:
        if not text:
            return ()
        return suggest_keys(
            text,
            snapshot,
            limit=self.config.suggestion_limit,
            min_score=self.config.suggestion_min_score,
        )
