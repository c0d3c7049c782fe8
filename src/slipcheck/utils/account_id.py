"""Receiver account identifier helpers."""

import re
from typing import Optional

SEPARATORS = re.compile(r"[\s\-.]")
MASK_CHARACTERS = frozenset("xX*")


def normalize_account_id(value: Optional[str]) -> Optional[str]:
    """Strip separator characters from a phone number or account ID.

    Returns None for empty values so callers can treat them as unknown.
    """
    if value is None:
        return None
    cleaned = SEPARATORS.sub("", str(value))
    return cleaned or None


def is_masked(value: Optional[str]) -> bool:
    """True when the vendor replaced characters with placeholders (e.g. ``xxx-x-x1234-x``)."""
    if not value:
        return False
    return any(ch in MASK_CHARACTERS for ch in value)
