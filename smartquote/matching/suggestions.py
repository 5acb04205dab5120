"""Near-miss catalogue suggestions for unresolved product lines.

Uses rapidfuzz over the normalized catalogue keys. Suggestions are only
offered to the person doing manual entry; they never resolve a line.
"""

from __future__ import annotations

from rapidfuzz import fuzz, process

from ..domain.models import CatalogueSnapshot
from ..domain.normalization import normalize

# Minimum similarity score (0-100) to offer a key as a suggestion
MIN_SIMILARITY_SCORE = 70


def suggest_keys(
    text: str,
    snapshot: CatalogueSnapshot,
    limit: int = 3,
    min_score: float = MIN_SIMILARITY_SCORE,
) -> tuple[str, ...]:
    """Return the canonical keys most similar to text, best first.

    Args:
        text: Raw product code or description.
        snapshot: Catalogue to search.
        limit: Maximum number of suggestions.
        min_score: Minimum rapidfuzz ratio (0-100).

    Returns:
        Canonical keys, best match first; empty when nothing is close.
    """
    query = normalize(text)
    if not query or limit <= 0 or not snapshot.key_index:
        return ()

    choices = list(snapshot.key_index.keys())
    results = process.extract(
        query,
        choices,
        scorer=fuzz.ratio,
        limit=limit,
        score_cutoff=min_score,
    )
    return tuple(snapshot.key_index[choice] for choice, _score, _index in results)
