"""UK postcode helpers.

Postcodes are compared in their normalized form: uppercase with a single
space between the outward and inward codes (``"se14aa"`` -> ``"SE1 4AA"``).
"""

from __future__ import annotations

import re
from typing import Optional

from .errors import ValidationError

POSTCODE_PATTERN = re.compile(r"^([A-Z]{1,2}\d{1,2}[A-Z]?) ?(\d[A-Z]{2})$")

# Used to find a postcode inside free-form address text
POSTCODE_SEARCH_PATTERN = re.compile(
    r"\b([A-Z]{1,2}\d{1,2}[A-Z]?\s?\d[A-Z]{2})\b", re.IGNORECASE
)


def normalize_postcode(raw: str) -> str:
    """Normalize a UK postcode to ``OUTWARD INWARD`` form.

    Args:
        raw: Postcode as typed by a user, any case and spacing.

    Returns:
        The normalized postcode.

    Raises:
        ValidationError: If the text does not have a UK postcode shape.
    """
    compact = re.sub(r"\s+", "", raw or "").upper()
    match = POSTCODE_PATTERN.match(compact)
    if match is None:
        raise ValidationError(
            f"Invalid UK postcode: {raw!r}",
            field_name="postcode",
        )
    return f"{match.group(1)} {match.group(2)}"


def is_valid_postcode(raw: str) -> bool:
    """Check whether text has a UK postcode shape."""
    try:
        normalize_postcode(raw)
    except ValidationError:
        return False
    return True


def outward_code(postcode: str) -> str:
    """Return the outward code (``"SW1A 1AA"`` -> ``"SW1A"``)."""
    return normalize_postcode(postcode).split(" ", 1)[0]


def postcode_area(postcode: str) -> str:
    """Return the leading letters of the postcode (``"SE1 4AA"`` -> ``"SE"``)."""
    outward = outward_code(postcode)
    return re.match(r"[A-Z]+", outward).group(0)  # type: ignore[union-attr]


def find_postcode(text: str) -> Optional[str]:
    """Find the last postcode mentioned in a block of text.

    The last occurrence wins because postcodes conventionally close an
    address block.

    Returns:
        The normalized postcode, or None if the text contains none.
    """
    matches = POSTCODE_SEARCH_PATTERN.findall(text or "")
    if not matches:
        return None
    return normalize_postcode(matches[-1])
