"""Data normalization utilities for consistent data quality."""

import re
from typing import Optional


_NON_SLUG_CHARS = re.compile(r"[^a-z0-9]+")
_PUNCTUATION = re.compile(r"[^\w\s]")


def normalize_email(email: Optional[str]) -> Optional[str]:
    """
    Normalize email to lowercase.

    Args:
        email: Raw email input

    Returns:
        Lowercased email or None if empty
    """
    if not email or not email.strip():
        return None
    return email.strip().lower()


def normalize_name(name: Optional[str]) -> Optional[str]:
    """
    Normalize name by stripping whitespace and collapsing multiple spaces.

    Args:
        name: Raw name input

    Returns:
        Cleaned name or None if empty
    """
    if not name or not name.strip():
        return None
    return " ".join(name.split())


def slugify(value: str) -> str:
    """Lowercase, runs of non-alphanumerics become "-", no leading/trailing "-"."""
    return _NON_SLUG_CHARS.sub("-", value.strip().lower()).strip("-")


def normalize_description(value: Optional[str]) -> str:
    """Lowercase, collapse whitespace and drop punctuation (bank statement text)."""
    if not value:
        return ""
    collapsed = " ".join(value.lower().split())
    return _PUNCTUATION.sub("", collapsed).strip()
