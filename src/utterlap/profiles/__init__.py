"""Keyword profile ownership."""

from utterlap.profiles.repository import KeywordRepository, validate_keyword

__all__ = [
    "KeywordRepository",
    "validate_keyword",
]
