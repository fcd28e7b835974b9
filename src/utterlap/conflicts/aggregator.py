"""Conflict aggregation.

Combines a conflict report with the resolution ledger to decide, per
interfering dialog, how many conflicts remain open and whether the
recorded remediation resolves them.
"""

import logging
from typing import Mapping

from utterlap.core.constants import (
    DEFAULT_MIN_POSITIVE_PERCENTAGE,
    DisplayState,
    ResolutionState,
)
from utterlap.models.conflict import (
    ConflictMatch,
    ConflictReport,
    ConflictSummary,
    DialogResolution,
    UtteranceDisplay,
)
from utterlap.models.resolution import Edit, Move, Remove, ResolutionEntry


logger = logging.getLogger(__name__)


def display_state(
    utterance_text: str,
    percentage: str,
    entry: ResolutionEntry | None,
    viewer_dialog_key: str,
) -> UtteranceDisplay:
    """Display state of one utterance as seen from a dialog.

    A flag raised by the viewing dialog takes precedence over the action.
    """
    if entry is not None and entry.is_flagged_from(viewer_dialog_key):
        detail = f"flagged from --> {', '.join(entry.flagged_from)}"
        return UtteranceDisplay(utterance_text, percentage, DisplayState.FLAGGED, detail)

    action = entry.action if entry is not None else None
    if isinstance(action, Edit):
        state = DisplayState.EDITED
    elif isinstance(action, Move):
        state = DisplayState.MOVED
    elif isinstance(action, Remove):
        state = DisplayState.DELETED
    else:
        return UtteranceDisplay(utterance_text, percentage, DisplayState.PENDING)

    return UtteranceDisplay(utterance_text, percentage, state, action.describe())


class ConflictAggregator:
    """Classifies the dialogs of a conflict report as resolved or not."""

    def __init__(self, min_positive_percentage: int = DEFAULT_MIN_POSITIVE_PERCENTAGE) -> None:
        """Initialize the aggregator.

        Args:
            min_positive_percentage: Lowest score counted as a conflict.
                The default of 1 counts every score above ``0%``.
        """
        self._threshold = min_positive_percentage

    def _is_positive(self, match: ConflictMatch) -> bool:
        return match.score >= self._threshold

    def positive_match_count(
        self,
        matches: tuple[ConflictMatch, ...],
        entries: Mapping[str, ResolutionEntry],
        active_dialog_key: str,
    ) -> int:
        """Count positive matches without remediation from the active dialog."""
        count = 0
        for match in matches:
            if not self._is_positive(match):
                continue
            entry = entries.get(match.utterance_text)
            if entry is not None and entry.touched_from(active_dialog_key):
                continue
            count += 1
        return count

    def change_count(
        self,
        matches: tuple[ConflictMatch, ...],
        entries: Mapping[str, ResolutionEntry],
        active_dialog_key: str,
    ) -> int:
        """Count utterances with an action or a flag from the active dialog."""
        count = 0
        for match in matches:
            entry = entries.get(match.utterance_text)
            if entry is not None and entry.touched_from(active_dialog_key):
                count += 1
        return count

    def resolve_dialog(
        self,
        report: ConflictReport,
        dialog_key: str,
        entries: Mapping[str, ResolutionEntry],
    ) -> DialogResolution:
        """Aggregate one interfering dialog of a report.

        A dialog is resolved when it had conflicts and the number of
        remediated utterances equals exactly the number of conflicts.
        Remediating extra zero-score utterances therefore leaves it
        partially resolved.
        """
        active = report.active_dialog_key
        matches = report.matches_for(dialog_key)

        raw_positive = self.positive_match_count(matches, {}, active)
        positive = self.positive_match_count(matches, entries, active)
        changes = self.change_count(matches, entries, active)
        is_resolved = raw_positive > 0 and raw_positive == changes

        if raw_positive == 0:
            state = ResolutionState.CLEAR
        elif is_resolved:
            state = ResolutionState.RESOLVED
        elif positive == raw_positive:
            state = ResolutionState.UNRESOLVED
        else:
            state = ResolutionState.PARTIAL

        return DialogResolution(
            dialog_key=dialog_key,
            total_utterances=len(matches),
            raw_positive_count=raw_positive,
            positive_match_count=positive,
            change_count=changes,
            is_resolved=is_resolved,
            state=state,
            utterances=[
                display_state(
                    m.utterance_text, m.percentage, entries.get(m.utterance_text), active
                )
                for m in matches
            ],
        )

    def summarize(
        self,
        report: ConflictReport,
        entries: Mapping[str, ResolutionEntry],
    ) -> ConflictSummary:
        """Aggregate every dialog of a report.

        Args:
            report: Conflict report produced with the active dialog.
            entries: Snapshot of the resolution ledger.

        Returns:
            Summary with one resolution per report dialog, in report order.
        """
        summary = ConflictSummary(
            active_dialog_key=report.active_dialog_key,
            keywords=list(report.keywords),
            dialogs=[
                self.resolve_dialog(report, dialog_key, entries)
                for dialog_key in report.dialog_keys
            ],
        )
        logger.debug(
            f"Summary for {report.active_dialog_key}: "
            f"{summary.conflicting_dialog_count} conflicting dialogs, {summary.by_state()}"
        )
        return summary
