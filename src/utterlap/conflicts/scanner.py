"""Cross-dialog conflict scanning.

Scores the utterances of every dialog other than the active one against
the active dialog's keywords. An utterance with a positive score looks
like it belongs to the active dialog: a classification conflict.
"""

import logging
import time
from typing import Iterable

from utterlap.analysis.matcher import KeywordMatcher
from utterlap.models.conflict import ConflictMatch, ConflictReport
from utterlap.models.corpus import Corpus, Dialog, Utterance


logger = logging.getLogger(__name__)


class ConflictScanner:
    """Builds conflict reports. Scanning never mutates any state."""

    def scan(
        self,
        utterances: Iterable[Utterance],
        dialogs: Iterable[Dialog],
        active_dialog_key: str,
        keywords: Iterable[str],
    ) -> ConflictReport:
        """Score every other dialog's utterances against the active keywords.

        Args:
            utterances: Full utterance collection.
            dialogs: Full dialog collection; report keys follow its order.
            active_dialog_key: The dialog whose keywords are used. It never
                appears in the report.
            keywords: The active dialog's keyword set.

        Returns:
            The conflict report. Each other dialog maps to its utterances in
            collection order, including zero scores.
        """
        started = time.perf_counter()
        matcher = KeywordMatcher(keywords)

        by_dialog: dict[str, list[Utterance]] = {}
        for utterance in utterances:
            by_dialog.setdefault(utterance.dialog_key, []).append(utterance)

        matches: dict[str, list[ConflictMatch]] = {}
        for dialog in dialogs:
            if dialog.dialog_key == active_dialog_key:
                continue
            matches[dialog.dialog_key] = [
                ConflictMatch(utterance_text=u.text, percentage=matcher.score(u.text))
                for u in by_dialog.get(dialog.dialog_key, [])
            ]

        report = ConflictReport(
            active_dialog_key=active_dialog_key,
            keywords=matcher.keywords,
            matches=matches,
        )

        duration_ms = (time.perf_counter() - started) * 1000
        positives = sum(1 for v in report.matches.values() for m in v if m.is_positive)
        logger.info(
            f"Scanned {report.total_utterances} utterances in "
            f"{len(report.matches)} dialogs against {active_dialog_key}: "
            f"{positives} positive matches ({duration_ms:.1f}ms)"
        )
        return report

    def scan_corpus(
        self,
        corpus: Corpus,
        active_dialog_key: str,
        keywords: Iterable[str],
    ) -> ConflictReport:
        """Scan a corpus snapshot."""
        return self.scan(corpus.utterances, corpus.dialogs, active_dialog_key, keywords)
