"""Resolution ledger.

Records the remediation decision for each conflicting utterance. Entries
are keyed by raw utterance text, so identical wording in two dialogs is
one remediation subject.

Per entry:
- ``action`` is an exclusive slot (remove, edit, move). Requesting the
  stored kind again clears it and discards its parameter.
- ``flagged_from`` is an ordered set of dialog keys, toggled one at a time
  and never touched by action changes.

An entry with no action and no flags is deleted. Entries are never
dropped by anything other than these two operations.
"""

import logging
from types import MappingProxyType
from typing import Mapping

from utterlap.core.constants import TODO_LIST_KEY
from utterlap.core.exceptions import StoreError
from utterlap.models.corpus import Corpus
from utterlap.models.resolution import Action, LedgerResult, ResolutionEntry
from utterlap.storage.kv import KeyValueStore, MemoryKeyValueStore


logger = logging.getLogger(__name__)


class ResolutionLedger:
    """Owns the ``toDoList`` of remediation entries."""

    def __init__(self, store: KeyValueStore | None = None) -> None:
        """Initialize the ledger and load persisted entries.

        Args:
            store: State store; an in-memory store is used when omitted.

        Raises:
            StoreError: If the persisted ledger is not a mapping.
            LedgerError: If a persisted entry cannot be decoded.
        """
        self._store = store if store is not None else MemoryKeyValueStore()
        self._entries: dict[str, ResolutionEntry] = {}
        self._load()

    def _load(self) -> None:
        data = self._store.get(TODO_LIST_KEY, {}) or {}
        if not isinstance(data, dict):
            raise StoreError(f"{TODO_LIST_KEY} must be a mapping", operation="load")

        for text, raw in data.items():
            entry = ResolutionEntry.from_dict(text, raw)
            if entry.is_empty:
                logger.debug(f"Dropping empty persisted ledger entry: {text!r}")
                continue
            self._entries[text] = entry
        logger.debug(f"Loaded {len(self._entries)} ledger entries")

    def _persist(self) -> None:
        self._store.set(TODO_LIST_KEY, self.snapshot())

    def _reject(self, corpus: Corpus, dialog_key: str, utterance_text: str) -> LedgerResult | None:
        """Check that the utterance resolves under the dialog.

        Returns:
            A failed result when it does not, otherwise None.
        """
        if corpus.find_utterance(dialog_key, utterance_text) is not None:
            return None

        error = f"Utterance {utterance_text!r} not found in dialog {dialog_key!r}"
        logger.warning(f"Ledger update rejected: {error}")
        return LedgerResult(
            success=False,
            utterance_text=utterance_text,
            dialog_key=dialog_key,
            entry=self._entries.get(utterance_text),
            error=error,
        )

    def _commit(self, entry: ResolutionEntry) -> ResolutionEntry | None:
        """Store an entry, or delete it when it became empty."""
        if entry.is_empty:
            self._entries.pop(entry.utterance_text, None)
            stored = None
        else:
            self._entries[entry.utterance_text] = entry
            stored = entry
        self._persist()
        return stored

    def set_action(
        self,
        corpus: Corpus,
        dialog_key: str,
        utterance_text: str,
        action: Action,
    ) -> LedgerResult:
        """Set, replace or toggle off the remediation action of an utterance.

        Args:
            corpus: Current corpus snapshot.
            dialog_key: Dialog the utterance currently belongs to.
            utterance_text: Text of the utterance.
            action: The requested action. If an action of the same kind is
                already stored, the slot is cleared instead.

        Returns:
            Result carrying the stored entry, or None if it was deleted.
        """
        rejected = self._reject(corpus, dialog_key, utterance_text)
        if rejected is not None:
            return rejected

        current = self._entries.get(utterance_text) or ResolutionEntry(utterance_text)

        if current.action_kind == action.kind:
            updated = current.with_action(None)
            change = f"cleared {action.kind.value}"
        else:
            updated = current.with_action(action)
            change = f"set {action.kind.value}"
            if current.action is not None:
                change = f"replaced {current.action.kind.value} with {action.kind.value}"

        stored = self._commit(updated)
        logger.info(f"Ledger {utterance_text!r} ({dialog_key}): {change}")

        return LedgerResult(
            success=True,
            utterance_text=utterance_text,
            dialog_key=dialog_key,
            entry=stored,
            changes=[change],
        )

    def toggle_flag(
        self,
        corpus: Corpus,
        dialog_key: str,
        utterance_text: str,
        source_dialog_key: str,
    ) -> LedgerResult:
        """Add or remove a dialog from an utterance's flags.

        Args:
            corpus: Current corpus snapshot.
            dialog_key: Dialog the utterance currently belongs to.
            utterance_text: Text of the utterance.
            source_dialog_key: The dialog raising or withdrawing the flag.

        Returns:
            Result carrying the stored entry, or None if it was deleted.
        """
        rejected = self._reject(corpus, dialog_key, utterance_text)
        if rejected is not None:
            return rejected

        current = self._entries.get(utterance_text) or ResolutionEntry(utterance_text)
        updated = current.with_flag_toggled(source_dialog_key)
        change = (
            f"flagged from {source_dialog_key}"
            if updated.is_flagged_from(source_dialog_key)
            else f"unflagged from {source_dialog_key}"
        )

        stored = self._commit(updated)
        logger.info(f"Ledger {utterance_text!r} ({dialog_key}): {change}")

        return LedgerResult(
            success=True,
            utterance_text=utterance_text,
            dialog_key=dialog_key,
            entry=stored,
            changes=[change],
        )

    def get(self, utterance_text: str) -> ResolutionEntry | None:
        """Get the entry of an utterance text."""
        return self._entries.get(utterance_text)

    def entries(self) -> Mapping[str, ResolutionEntry]:
        """Read-only copy of all entries."""
        return MappingProxyType(dict(self._entries))

    def snapshot(self) -> dict[str, dict]:
        """Copy of ``toDoList`` in its persisted layout."""
        return {text: entry.to_dict() for text, entry in self._entries.items()}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, utterance_text: object) -> bool:
        return utterance_text in self._entries
