"""Keyword profile repository.

Owns ``keywordsByDialog``: the keyword set of every dialog plus the cached
self-match statuses of the dialog's own utterances. Every keyword change
triggers a full status recomputation for that dialog and is written
through to the state store before the call returns.
"""

import logging
import re

from utterlap.analysis.status import DialogStatusCalculator
from utterlap.analysis.text import normalize_text
from utterlap.core.constants import KEYWORDS_BY_DIALOG_KEY
from utterlap.core.exceptions import KeywordValidationError, StoreError
from utterlap.models.corpus import Corpus
from utterlap.models.keyword import KeywordProfile
from utterlap.storage.kv import KeyValueStore, MemoryKeyValueStore


logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"\s")


def validate_keyword(keyword: str, dialog_key: str | None = None) -> str:
    """Normalize a keyword and reject unusable input.

    The keyword is trimmed, stripped of the punctuation that tokenization
    removes, and lower-cased.

    Args:
        keyword: Raw keyword as typed by the author.
        dialog_key: Dialog the keyword is meant for, for error details.

    Returns:
        The normalized keyword.

    Raises:
        KeywordValidationError: If the keyword is empty or contains whitespace.
    """
    trimmed = keyword.strip()
    if _WHITESPACE_RE.search(trimmed):
        raise KeywordValidationError(
            "Keyword must be a single word",
            keyword=keyword,
            dialog_key=dialog_key,
        )

    normalized = normalize_text(trimmed)
    if not normalized:
        raise KeywordValidationError(
            "Keyword must not be empty",
            keyword=keyword,
            dialog_key=dialog_key,
        )
    return normalized


class KeywordRepository:
    """Owns keyword profiles and their status caches."""

    def __init__(
        self,
        store: KeyValueStore | None = None,
        calculator: DialogStatusCalculator | None = None,
    ) -> None:
        """Initialize the repository and load persisted profiles.

        Args:
            store: State store; an in-memory store is used when omitted.
            calculator: Status calculator used on every keyword change.
        """
        self._store = store if store is not None else MemoryKeyValueStore()
        self._calculator = calculator or DialogStatusCalculator()
        self._profiles: dict[str, KeywordProfile] = {}
        self._load()

    def _load(self) -> None:
        """Load ``keywordsByDialog`` from the store."""
        data = self._store.get(KEYWORDS_BY_DIALOG_KEY, {}) or {}
        if not isinstance(data, dict):
            raise StoreError(
                f"{KEYWORDS_BY_DIALOG_KEY} must be a mapping",
                operation="load",
            )
        self._profiles = {
            dialog_key: KeywordProfile.from_dict(dialog_key, entry)
            for dialog_key, entry in data.items()
        }
        logger.debug(f"Loaded keyword profiles for {len(self._profiles)} dialogs")

    def _persist(self) -> None:
        self._store.set(KEYWORDS_BY_DIALOG_KEY, self.snapshot())

    def _recompute(self, corpus: Corpus, dialog_key: str, keywords: tuple[str, ...]) -> KeywordProfile:
        profile = self._calculator.build_profile(corpus.utterances, dialog_key, keywords)
        self._profiles[dialog_key] = profile
        self._persist()
        return profile

    def add_keyword(self, corpus: Corpus, dialog_key: str, keyword: str) -> KeywordProfile:
        """Add a keyword to a dialog's profile.

        Adding a keyword that is already present leaves the keyword set
        unchanged but still refreshes the statuses.

        Args:
            corpus: Current corpus snapshot.
            dialog_key: The dialog owning the profile.
            keyword: The keyword to add.

        Returns:
            The updated profile.

        Raises:
            KeywordValidationError: If the keyword is empty or contains whitespace.
            DialogNotFoundError: If the dialog does not exist.
        """
        normalized = validate_keyword(keyword, dialog_key)
        corpus.get_dialog(dialog_key)

        keywords = self.get_profile(dialog_key).keywords
        if normalized in keywords:
            logger.debug(f"Keyword {normalized!r} already in profile of {dialog_key}")
        else:
            keywords = keywords + (normalized,)
            logger.info(f"Added keyword {normalized!r} to {dialog_key}")

        return self._recompute(corpus, dialog_key, keywords)

    def remove_keyword(self, corpus: Corpus, dialog_key: str, keyword: str) -> KeywordProfile:
        """Remove a keyword from a dialog's profile.

        Removing an absent keyword is not an error.

        Raises:
            DialogNotFoundError: If the dialog does not exist.
        """
        corpus.get_dialog(dialog_key)
        target = normalize_text(keyword.strip())

        keywords = self.get_profile(dialog_key).keywords
        if target in keywords:
            keywords = tuple(k for k in keywords if k != target)
            logger.info(f"Removed keyword {target!r} from {dialog_key}")
        else:
            logger.debug(f"Keyword {target!r} not in profile of {dialog_key}")

        return self._recompute(corpus, dialog_key, keywords)

    def refresh(self, corpus: Corpus, dialog_key: str) -> KeywordProfile:
        """Recompute a dialog's statuses without changing its keywords."""
        corpus.get_dialog(dialog_key)
        return self._recompute(corpus, dialog_key, self.get_profile(dialog_key).keywords)

    def clear(self, dialog_key: str) -> bool:
        """Drop a dialog's profile entirely.

        Returns:
            True if a profile existed.
        """
        if dialog_key not in self._profiles:
            return False
        del self._profiles[dialog_key]
        self._persist()
        logger.info(f"Cleared keyword profile of {dialog_key}")
        return True

    def get_profile(self, dialog_key: str) -> KeywordProfile:
        """Get a dialog's profile; dialogs without one get an empty profile."""
        return self._profiles.get(dialog_key) or KeywordProfile(dialog_key=dialog_key)

    def keywords(self, dialog_key: str) -> tuple[str, ...]:
        """Get a dialog's keyword set."""
        return self.get_profile(dialog_key).keywords

    @property
    def dialog_keys(self) -> list[str]:
        """Dialogs that have a stored profile."""
        return list(self._profiles)

    def snapshot(self) -> dict[str, dict]:
        """Copy of ``keywordsByDialog`` in its persisted layout."""
        return {key: profile.to_dict() for key, profile in self._profiles.items()}
