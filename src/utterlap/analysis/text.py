"""Utterance text normalization."""

import re

from utterlap.core.constants import STRIPPED_PUNCTUATION

_PUNCTUATION_RE = re.compile(f"[{re.escape(STRIPPED_PUNCTUATION)}]")
_WHITESPACE_RE = re.compile(r"\s+")


def normalize_text(text: str) -> str:
    """Strip question marks, periods, commas and exclamations, then lower-case."""
    return _PUNCTUATION_RE.sub("", text).lower()


def tokenize(text: str) -> list[str]:
    """Normalize text and split it into whitespace-separated tokens."""
    return [token for token in _WHITESPACE_RE.split(normalize_text(text)) if token]
