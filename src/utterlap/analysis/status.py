"""Self-match statuses of a dialog's own utterances."""

import logging
from typing import Iterable

from utterlap.analysis.matcher import KeywordMatcher
from utterlap.models.corpus import Utterance
from utterlap.models.keyword import KeywordProfile


logger = logging.getLogger(__name__)


class DialogStatusCalculator:
    """Scores a dialog's utterances against the dialog's own keywords.

    The result is a display aid for the keyword author; conflict detection
    across dialogs lives in ``utterlap.conflicts.scanner``.
    """

    def compute(
        self,
        utterances: Iterable[Utterance],
        dialog_key: str,
        keywords: Iterable[str],
    ) -> dict[str, str]:
        """Recompute the status of every utterance owned by a dialog.

        Args:
            utterances: Full utterance collection; only ``dialog_key``'s
                utterances are scored.
            dialog_key: The dialog whose utterances are scored.
            keywords: The dialog's keyword set.

        Returns:
            Mapping of utterance text to percentage string.
        """
        matcher = KeywordMatcher(keywords)
        statuses: dict[str, str] = {}

        for utterance in utterances:
            if utterance.dialog_key != dialog_key:
                continue
            statuses[utterance.text] = matcher.score(utterance.text)

        logger.debug(
            f"Computed {len(statuses)} statuses for dialog {dialog_key} "
            f"({len(matcher.keywords)} keywords)"
        )
        return statuses

    def build_profile(
        self,
        utterances: Iterable[Utterance],
        dialog_key: str,
        keywords: Iterable[str],
    ) -> KeywordProfile:
        """Compute statuses and pair them with the keyword set."""
        keyword_set = tuple(keywords)
        return KeywordProfile(
            dialog_key=dialog_key,
            keywords=keyword_set,
            statuses=self.compute(utterances, dialog_key, keyword_set),
        )
