"""Exclusive word analysis.

Finds, per dialog, the normalized words that no other dialog's utterances
use. Exclusive words are the safest keyword candidates: adding one to a
dialog's profile cannot raise a conflict in another dialog.
"""

import logging
from collections import Counter
from dataclasses import dataclass

from utterlap.analysis.text import tokenize
from utterlap.core.constants import DEFAULT_SUGGESTION_LIMIT
from utterlap.models.corpus import Corpus


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KeywordSuggestion:
    """An exclusive word ranked by how often its dialog uses it."""

    word: str
    occurrences: int
    utterance_count: int

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "word": self.word,
            "occurrences": self.occurrences,
            "utterance_count": self.utterance_count,
        }


class ExclusiveWordsAnalyzer:
    """Computes words exclusive to each dialog of a corpus."""

    def __init__(self, corpus: Corpus) -> None:
        """Initialize the analyzer.

        Args:
            corpus: The corpus snapshot to analyze.
        """
        self._corpus = corpus
        self._occurrences: dict[str, Counter[str]] = {}
        self._utterance_counts: dict[str, Counter[str]] = {}
        self._first_seen: dict[str, list[str]] = {}
        self._owners: dict[str, set[str]] = {}
        self._build_index()

    def _build_index(self) -> None:
        """Index word usage per dialog."""
        for utterance in self._corpus.utterances:
            dialog_key = utterance.dialog_key
            occurrences = self._occurrences.setdefault(dialog_key, Counter())
            utterance_counts = self._utterance_counts.setdefault(dialog_key, Counter())
            first_seen = self._first_seen.setdefault(dialog_key, [])

            tokens = tokenize(utterance.text)
            occurrences.update(tokens)
            utterance_counts.update(set(tokens))

            for token in tokens:
                owners = self._owners.setdefault(token, set())
                if dialog_key not in owners:
                    owners.add(dialog_key)
                    first_seen.append(token)

    def exclusive_words(self, dialog_key: str) -> list[str]:
        """Words used only by this dialog, in first-seen order."""
        return [
            word
            for word in self._first_seen.get(dialog_key, [])
            if self._owners[word] == {dialog_key}
        ]

    def analyze(self) -> dict[str, list[str]]:
        """Exclusive words of every dialog in the corpus.

        Dialogs without utterances map to an empty list.
        """
        result = {key: self.exclusive_words(key) for key in self._corpus.dialog_keys}
        logger.debug(
            f"Exclusive word analysis over {len(result)} dialogs: "
            f"{sum(len(v) for v in result.values())} exclusive words"
        )
        return result

    def suggest_keywords(
        self,
        dialog_key: str,
        limit: int = DEFAULT_SUGGESTION_LIMIT,
        exclude: set[str] | None = None,
    ) -> list[KeywordSuggestion]:
        """Rank a dialog's exclusive words by usage.

        Args:
            dialog_key: The dialog to suggest keywords for.
            limit: Maximum number of suggestions.
            exclude: Words to leave out, such as existing keywords.

        Returns:
            Suggestions ordered by the number of utterances using the word,
            then total occurrences, then first-seen order.
        """
        exclude = exclude or set()
        words = [w for w in self.exclusive_words(dialog_key) if w not in exclude]
        occurrences = self._occurrences.get(dialog_key, Counter())
        utterance_counts = self._utterance_counts.get(dialog_key, Counter())

        ranked = sorted(
            enumerate(words),
            key=lambda item: (-utterance_counts[item[1]], -occurrences[item[1]], item[0]),
        )
        return [
            KeywordSuggestion(
                word=word,
                occurrences=occurrences[word],
                utterance_count=utterance_counts[word],
            )
            for _, word in ranked[:limit]
        ]
