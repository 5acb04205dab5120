"""Product text matching: normalization, matcher chain and suggestions."""

from ..domain.normalization import normalize
from .matchers import (
    DEFAULT_FAMILY_PATTERNS,
    FLX_PERSON_COUNT,
    AliasMatcher,
    ExactKeyMatcher,
    FamilyPattern,
    FamilyPatternMatcher,
    Matcher,
    MatcherChain,
)
from .suggestions import suggest_keys

__all__ = [
    "normalize",
    "Matcher",
    "MatcherChain",
    "ExactKeyMatcher",
    "AliasMatcher",
    "FamilyPattern",
    "FamilyPatternMatcher",
    "FLX_PERSON_COUNT",
    "DEFAULT_FAMILY_PATTERNS",
    "suggest_keys",
]
