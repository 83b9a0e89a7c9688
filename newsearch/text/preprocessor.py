"""
Text preprocessing shared by indexing, mining and search.
"""
from typing import Optional


def normalize(value: Optional[str]) -> str:
    """
    Trim surrounding whitespace and lowercase.

    Returns an empty string for None or blank input, so the function is
    total and idempotent.
    """
    if value is None:
        return ""
    if not isinstance(value, str):
        value = str(value)
    if not value.strip():
        return ""
    return value.strip().lower()


def normalize_or_none(value: Optional[str]) -> Optional[str]:
    """Normalize, returning None when nothing is left."""
    normalized = normalize(value)
    return normalized or None
