"""Product text normalization shared by the catalogue and the matchers."""

from __future__ import annotations

import re

_SEPARATORS = re.compile(r"[\s\-_()]+")


def normalize(text: str) -> str:
    """Reduce product text to a canonical comparable string.

    Uppercases and strips whitespace, hyphens, underscores and
    parentheses, so ``"FLX-4P"``, ``"flx_4p"`` and ``"FLX 4P"`` all
    become ``"FLX4P"``. Applying it twice changes nothing.
    """
    if not text:
        return ""
    return _SEPARATORS.sub("", text.upper())
