"""Ordered catalogue matchers.

Each matcher looks at one piece of product text and either returns a
``Resolved`` match or None. The resolver runs them in order and the first
hit wins, so supporting a new product family means appending a
``FamilyPattern`` rather than touching the resolver.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Optional, Protocol, Sequence

from ..domain.models import CatalogueSnapshot, MatchConfidence, Resolved
from ..domain.normalization import normalize


class Matcher(Protocol):
    """A single step of the matching chain."""

    def match(self, text: str, snapshot: CatalogueSnapshot) -> Optional[Resolved]:
        """Try to match text against the snapshot.

        Args:
            text: Raw product code or description.
            snapshot: Catalogue to match against.

        Returns:
            A Resolved match, or None to let the next matcher try.
        """
        ...


def _resolved(
    snapshot: CatalogueSnapshot,
    canonical_key: str,
    confidence: MatchConfidence,
    text: str,
) -> Resolved:
    entry = snapshot.entries[canonical_key]
    return Resolved(
        canonical_key=entry.key,
        install_time_hours=entry.install_time_hours,
        waste_volume_m3=entry.waste_volume_m3,
        confidence=confidence,
        matched_text=text,
    )


@dataclass(frozen=True)
class ExactKeyMatcher:
    """Normalized text equals a normalized catalogue key."""

    def match(self, text: str, snapshot: CatalogueSnapshot) -> Optional[Resolved]:
        key = snapshot.find_key(normalize(text))
        if key is None:
            return None
        return _resolved(snapshot, key, MatchConfidence.EXACT, text)


@dataclass(frozen=True)
class AliasMatcher:
    """Normalized text equals a known alias of a catalogue key."""

    def match(self, text: str, snapshot: CatalogueSnapshot) -> Optional[Resolved]:
        key = snapshot.find_alias(normalize(text))
        if key is None:
            return None
        return _resolved(snapshot, key, MatchConfidence.ALIAS, text)


@dataclass(frozen=True)
class FamilyPattern:
    """Structural description of a product family code.

    A code such as ``FLX-4P-2816-A`` decomposes into the family token
    (``FLX``), a numeric variant (``4``) with its suffix (``P``) and an
    optional 4-digit size (``2816``).

    Attributes:
        family: Family token at the start of the code
        suffix: Letter(s) that follow the variant number
        variant_infix: Infix used by size-specific keys (FAMILY-INFIX-NP-Lsize)
        extra_templates: Family-specific generic keys tried after the
            standard ones; may use {family}, {variant} and {infix}
    """

    family: str
    suffix: str
    variant_infix: str = ""
    extra_templates: tuple[str, ...] = ()

    _GENERIC_TEMPLATES = (
        "{family} {variant}",
        "{variant} {family}",
        "{family}-{variant}",
    )

    @property
    def variant_regex(self) -> re.Pattern[str]:
        return re.compile(
            rf"{re.escape(self.family)}[-_\s]*(\d+){re.escape(self.suffix)}"
        )

    def candidate_keys(self, text: str) -> list[str]:
        """Build catalogue keys to try for text, most specific first.

        Returns an empty list when the family token is not followed by a
        variant number.
        """
        upper = text.upper()
        match = self.variant_regex.search(upper)
        if match is None:
            upper = normalize(text)
            match = self.variant_regex.search(upper)
        if match is None:
            return []

        variant = f"{match.group(1)}{self.suffix}"
        values = {"family": self.family, "variant": variant, "infix": self.variant_infix}
        candidates: list[str] = []

        size = _size_token(upper[match.end():])
        if size is not None:
            parts = [self.family, self.variant_infix, variant, f"L{size}"]
            candidates.append("-".join(part for part in parts if part))

        candidates.extend(t.format(**values) for t in self._GENERIC_TEMPLATES)
        candidates.extend(t.format(**values) for t in self.extra_templates)
        return candidates


_SIZE_TOKEN = re.compile(r"(?<!\d)L?(\d{4})(?!\d)")


def _size_token(remainder: str) -> Optional[str]:
    match = _SIZE_TOKEN.search(remainder)
    return match.group(1) if match else None


@dataclass(frozen=True)
class FamilyPatternMatcher:
    """Match codes by decomposing them into family, variant and size."""

    pattern: FamilyPattern

    def match(self, text: str, snapshot: CatalogueSnapshot) -> Optional[Resolved]:
        for candidate in self.pattern.candidate_keys(text):
            key = snapshot.find_key(normalize(candidate))
            if key is not None:
                return _resolved(snapshot, key, MatchConfidence.PATTERN, text)
        return None


FLX_PERSON_COUNT = FamilyPattern(
    family="FLX",
    suffix="P",
    variant_infix="COWORK",
    extra_templates=("{family}-{infix}-{variant}",),
)

DEFAULT_FAMILY_PATTERNS: tuple[FamilyPattern, ...] = (FLX_PERSON_COUNT,)


@dataclass(frozen=True)
class MatcherChain:
    """Ordered list of matchers; the first hit wins."""

    matchers: Sequence[Matcher] = field(default_factory=tuple)

    @classmethod
    def default(
        cls, family_patterns: Sequence[FamilyPattern] = DEFAULT_FAMILY_PATTERNS
    ) -> MatcherChain:
        """Exact key, then alias, then one matcher per product family."""
        matchers: list[Matcher] = [ExactKeyMatcher(), AliasMatcher()]
        matchers.extend(FamilyPatternMatcher(p) for p in family_patterns)
        return cls(matchers=tuple(matchers))

    def match(self, text: str, snapshot: CatalogueSnapshot) -> Optional[Resolved]:
        for matcher in self.matchers:
            result = matcher.match(text, snapshot)
            if result is not None:
                return result
        return None
