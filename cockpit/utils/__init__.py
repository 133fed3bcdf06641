"""Utility modules."""

from cockpit.utils.normalization import (
    normalize_description,
    normalize_email,
    normalize_name,
    slugify,
)

__all__ = [
    "normalize_description",
    "normalize_email",
    "normalize_name",
    "slugify",
]
