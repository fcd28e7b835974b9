"""Analysis session.

Single holder of the keyword repository and the resolution ledger for one
corpus snapshot. Every user event (select a dialog, add or remove a
keyword, record an action, toggle a flag) runs to completion here before
the next one; reads always go through the owning component.
"""

import logging
from pathlib import Path
from typing import Self

from utterlap.analysis.alternatives import generate_alternatives
from utterlap.analysis.exclusive import ExclusiveWordsAnalyzer, KeywordSuggestion
from utterlap.conflicts.aggregator import ConflictAggregator, display_state
from utterlap.conflicts.ledger import ResolutionLedger
from utterlap.conflicts.scanner import ConflictScanner
from utterlap.core.config import UtterlapConfig
from utterlap.core.exceptions import DialogNotFoundError
from utterlap.models.conflict import ConflictReport, ConflictSummary, UtteranceDisplay
from utterlap.models.corpus import Corpus, Utterance
from utterlap.models.keyword import KeywordProfile
from utterlap.models.resolution import Action, LedgerResult
from utterlap.profiles.repository import KeywordRepository
from utterlap.storage.corpus import load_corpus
from utterlap.storage.kv import KeyValueStore, MemoryKeyValueStore, open_store


logger = logging.getLogger(__name__)


class AnalysisSession:
    """Wires keyword profiles, scanning, the ledger and aggregation together.

    Example:
        session = AnalysisSession(corpus)
        session.select_dialog("Billing")
        session.add_keyword("refund")
        summary = session.analyze()
        session.set_action("Support", "I want a refund now", Remove())
    """

    def __init__(
        self,
        corpus: Corpus,
        store: KeyValueStore | None = None,
        config: UtterlapConfig | None = None,
    ) -> None:
        """Initialize the session.

        Args:
            corpus: Corpus snapshot from the entity collaborator.
            store: State store shared by the repository and the ledger.
            config: Configuration; defaults when omitted.
        """
        self._config = config or UtterlapConfig()
        self._store = store if store is not None else MemoryKeyValueStore()
        self._corpus = corpus
        self._active_dialog_key: str | None = None

        self._repository = KeywordRepository(self._store)
        self._ledger = ResolutionLedger(self._store)
        self._scanner = ConflictScanner()
        self._aggregator = ConflictAggregator(self._config.analysis.min_positive_percentage)

    @classmethod
    def from_workspace(
        cls,
        base_path: Path | None = None,
        config: UtterlapConfig | None = None,
    ) -> Self:
        """Open a session over a workspace's corpus and state store."""
        config = config or UtterlapConfig.load(base_path)
        corpus = load_corpus(config.corpus_path(base_path))
        return cls(corpus, open_store(config, base_path), config)

    @property
    def corpus(self) -> Corpus:
        return self._corpus

    @property
    def config(self) -> UtterlapConfig:
        return self._config

    @property
    def repository(self) -> KeywordRepository:
        return self._repository

    @property
    def ledger(self) -> ResolutionLedger:
        return self._ledger

    @property
    def active_dialog_key(self) -> str | None:
        """The currently selected dialog, if any."""
        return self._active_dialog_key

    def close(self) -> None:
        """Release the state store, if it holds a connection."""
        close = getattr(self._store, "close", None)
        if callable(close):
            close()

    def _resolve_dialog(self, dialog_key: str | None) -> str:
        key = dialog_key or self._active_dialog_key
        if key is None:
            raise DialogNotFoundError("No dialog selected")
        self._corpus.get_dialog(key)
        return key

    def replace_corpus(self, corpus: Corpus) -> None:
        """Adopt a new corpus snapshot from the entity collaborator.

        Cached statuses of the active dialog are recomputed; a selected
        dialog that no longer exists is deselected.
        """
        self._corpus = corpus
        if self._active_dialog_key is None:
            return
        if corpus.has_dialog(self._active_dialog_key):
            self._repository.refresh(corpus, self._active_dialog_key)
        else:
            logger.info(f"Active dialog {self._active_dialog_key} left the corpus")
            self._active_dialog_key = None

    def select_dialog(self, dialog_key: str) -> KeywordProfile:
        """Make a dialog active and refresh its statuses.

        Raises:
            DialogNotFoundError: If the dialog does not exist.
        """
        self._corpus.get_dialog(dialog_key)
        self._active_dialog_key = dialog_key
        logger.debug(f"Selected dialog {dialog_key}")
        return self._repository.refresh(self._corpus, dialog_key)

    def add_keyword(self, keyword: str, dialog_key: str | None = None) -> KeywordProfile:
        """Add a keyword to a dialog (the active one by default)."""
        return self._repository.add_keyword(self._corpus, self._resolve_dialog(dialog_key), keyword)

    def remove_keyword(self, keyword: str, dialog_key: str | None = None) -> KeywordProfile:
        """Remove a keyword from a dialog (the active one by default)."""
        return self._repository.remove_keyword(
            self._corpus, self._resolve_dialog(dialog_key), keyword
        )

    def profile(self, dialog_key: str | None = None) -> KeywordProfile:
        """Keyword profile of a dialog (the active one by default)."""
        return self._repository.get_profile(self._resolve_dialog(dialog_key))

    def status_view(self, dialog_key: str | None = None) -> list[UtteranceDisplay]:
        """A dialog's own utterances with their self-match status.

        Utterances not yet scored carry an empty percentage.
        """
        key = self._resolve_dialog(dialog_key)
        profile = self._repository.get_profile(key)
        entries = self._ledger.entries()
        return [
            display_state(u.text, profile.status_of(u.text), entries.get(u.text), key)
            for u in self._corpus.utterances_for(key)
        ]

    def scan(self, dialog_key: str | None = None) -> ConflictReport:
        """Conflict report for a dialog (the active one by default)."""
        key = self._resolve_dialog(dialog_key)
        return self._scanner.scan_corpus(self._corpus, key, self._repository.keywords(key))

    def analyze(self, dialog_key: str | None = None) -> ConflictSummary:
        """Scan a dialog and aggregate the report against the ledger."""
        report = self.scan(dialog_key)
        return self._aggregator.summarize(report, self._ledger.entries())

    def set_action(self, dialog_key: str, utterance_text: str, action: Action) -> LedgerResult:
        """Record, replace or toggle off an action on an utterance."""
        return self._ledger.set_action(self._corpus, dialog_key, utterance_text, action)

    def toggle_flag(
        self,
        dialog_key: str,
        utterance_text: str,
        source_dialog_key: str | None = None,
    ) -> LedgerResult:
        """Toggle a flag on an utterance, raised from the active dialog by default."""
        source = self._resolve_dialog(source_dialog_key)
        return self._ledger.toggle_flag(self._corpus, dialog_key, utterance_text, source)

    def exclusive_words(self) -> dict[str, list[str]]:
        """Words exclusive to each dialog."""
        return ExclusiveWordsAnalyzer(self._corpus).analyze()

    def suggest_keywords(
        self,
        dialog_key: str | None = None,
        limit: int | None = None,
    ) -> list[KeywordSuggestion]:
        """Exclusive words of a dialog not yet in its keyword set."""
        key = self._resolve_dialog(dialog_key)
        return ExclusiveWordsAnalyzer(self._corpus).suggest_keywords(
            key,
            limit=limit if limit is not None else self._config.analysis.suggestion_limit,
            exclude=set(self._repository.keywords(key)),
        )

    def alternatives(self, dialog_key: str | None = None) -> list[tuple[Utterance, list[str]]]:
        """Spelling variants of a dialog's utterances, shortest utterance first."""
        key = self._resolve_dialog(dialog_key)
        return [(u, generate_alternatives(u)) for u in self._corpus.sorted_by_word_count(key)]
