from typing import Optional

from tripscan.models.photo import UNKNOWN_PLACE

_ADDRESS_SUFFIXES = (
    " st", " ave", " rd", " blvd", " lane", " dr", " drive",
    " street", " avenue", " road", " boulevard",
)


def is_likely_venue(name: str) -> bool:
    """Street addresses and house numbers are not venues."""
    if not name:
        return False
    if name[0].isdigit():
        return False
    lower = name.lower()
    return not any(lower.endswith(suffix) for suffix in _ADDRESS_SUFFIXES)


def best_place_label(
    name: Optional[str],
    sub_locality: Optional[str],
    locality: Optional[str],
    administrative_area: Optional[str],
) -> str:
    """Venue (only when confident) > neighbourhood > city > region. Never guess."""
    name = (name or "").strip()
    sub_locality = (sub_locality or "").strip()
    locality = (locality or "").strip()

    if name and name != sub_locality and name != locality and is_likely_venue(name):
        return name
    if sub_locality:
        return sub_locality
    if locality:
        return locality
    return administrative_area or UNKNOWN_PLACE
