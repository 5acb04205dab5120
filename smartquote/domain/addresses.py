"""Parsing of free-form address blocks into route stops."""

from __future__ import annotations

from .errors import ValidationError
from .models import Address, AddressRole
from .postcodes import POSTCODE_SEARCH_PATTERN, find_postcode


def parse_address(text: str, role: AddressRole = AddressRole.SITE) -> Address:
    """Build an Address from a pasted multi-line address.

    The label is the first non-empty line (the company or building name)
    unless that line holds nothing but the postcode, in which case the
    role's default label is used.

    Args:
        text: Address block, one component per line.
        role: Role of the stop in the route.

    Returns:
        The parsed address.

    Raises:
        ValidationError: If no UK postcode can be found in the text.
    """
    postcode = find_postcode(text)
    if postcode is None:
        raise ValidationError(
            "Address must contain a valid UK postcode",
            field_name=role.value,
        )

    lines = [line.strip() for line in (text or "").splitlines() if line.strip()]
    label = POSTCODE_SEARCH_PATTERN.sub("", lines[0]).strip(" ,") if lines else ""
    return Address(label=label, postcode=postcode, role=role)
