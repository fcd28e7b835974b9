"""Keyword match scoring.

The match percentage of an utterance is the share of a keyword set found
as whole tokens in the normalized utterance. Each keyword counts once no
matter how often it occurs.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Sequence

from utterlap.analysis.text import tokenize
from utterlap.core.constants import PERCENT_SUFFIX, ZERO_PERCENTAGE


def format_percentage(matched: int, total: int) -> str:
    """Format a match ratio as a whole-number percentage string.

    Halves round up, so 1 of 8 keywords is ``"13%"``.

    Args:
        matched: Number of keywords present.
        total: Size of the keyword set.

    Returns:
        Percentage string such as ``"50%"``; ``"0%"`` for an empty set.
    """
    if total <= 0:
        return ZERO_PERCENTAGE
    value = Decimal(matched / total * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return f"{int(value)}{PERCENT_SUFFIX}"


def unique_keywords(keywords: Iterable[str]) -> tuple[str, ...]:
    """Lower-case keywords and drop repeats, keeping first-seen order."""
    seen: dict[str, None] = {}
    for keyword in keywords:
        seen.setdefault(keyword.lower(), None)
    return tuple(seen)


class KeywordMatcher:
    """Scores utterances against a fixed keyword set."""

    def __init__(self, keywords: Iterable[str]) -> None:
        """Initialize the matcher.

        Args:
            keywords: Keyword tokens; case and repeats are normalized away.
        """
        self._keywords = unique_keywords(keywords)

    @property
    def keywords(self) -> tuple[str, ...]:
        """The normalized keyword set."""
        return self._keywords

    def matched_keywords(self, utterance: str | Sequence[str]) -> list[str]:
        """Keywords present in an utterance, in keyword order.

        Args:
            utterance: Raw utterance text or an already tokenized sequence.
        """
        tokens = set(tokenize(utterance) if isinstance(utterance, str) else utterance)
        return [k for k in self._keywords if k in tokens]

    def score(self, utterance: str | Sequence[str]) -> str:
        """Match percentage of an utterance."""
        if not self._keywords:
            return ZERO_PERCENTAGE
        return format_percentage(len(self.matched_keywords(utterance)), len(self._keywords))


def match_percentage(utterance: str | Sequence[str], keywords: Iterable[str]) -> str:
    """Match percentage of one utterance against a keyword set."""
    return KeywordMatcher(keywords).score(utterance)
