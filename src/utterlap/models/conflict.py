"""Conflict report and aggregation data models."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from utterlap.core.constants import DisplayState, ResolutionState


def parse_percentage(percentage: str) -> int:
    """Parse a ``"NN%"`` string into its integer value.

    Unparseable values count as zero.
    """
    try:
        return int(percentage.strip().rstrip("%"))
    except (AttributeError, ValueError):
        return 0


@dataclass(frozen=True)
class ConflictMatch:
    """Score of one utterance against the active dialog's keywords."""

    utterance_text: str
    percentage: str

    @property
    def score(self) -> int:
        """Integer value of the percentage."""
        return parse_percentage(self.percentage)

    @property
    def is_positive(self) -> bool:
        """Check if any keyword matched."""
        return self.score > 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {"utterance": self.utterance_text, "percentage": self.percentage}


@dataclass(frozen=True)
class ConflictReport:
    """Scores of every other dialog's utterances for one active dialog."""

    active_dialog_key: str
    keywords: tuple[str, ...]
    matches: Mapping[str, tuple[ConflictMatch, ...]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "matches",
            MappingProxyType({k: tuple(v) for k, v in self.matches.items()}),
        )

    @property
    def dialog_keys(self) -> list[str]:
        """Other dialogs in scan order."""
        return list(self.matches.keys())

    def matches_for(self, dialog_key: str) -> tuple[ConflictMatch, ...]:
        """Scored utterances of one other dialog."""
        return self.matches.get(dialog_key, ())

    @property
    def total_utterances(self) -> int:
        """Number of scored utterances across all dialogs."""
        return sum(len(v) for v in self.matches.values())

    def to_dict(self) -> dict[str, list[dict[str, str]]]:
        """Convert to the ``ConflictReport`` layout."""
        return {k: [m.to_dict() for m in v] for k, v in self.matches.items()}


@dataclass(frozen=True)
class UtteranceDisplay:
    """Display state of one reported utterance."""

    utterance_text: str
    percentage: str
    state: DisplayState
    detail: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "utterance": self.utterance_text,
            "percentage": self.percentage,
            "state": self.state.value,
            "detail": self.detail,
        }


@dataclass
class DialogResolution:
    """Aggregated conflict state of one interfering dialog."""

    dialog_key: str
    total_utterances: int
    raw_positive_count: int
    positive_match_count: int
    change_count: int
    is_resolved: bool
    state: ResolutionState
    utterances: list[UtteranceDisplay] = field(default_factory=list)

    @property
    def has_conflict(self) -> bool:
        """Check if unresolved positive matches remain."""
        return self.positive_match_count > 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "dialog_key": self.dialog_key,
            "total_utterances": self.total_utterances,
            "raw_positive_count": self.raw_positive_count,
            "positive_match_count": self.positive_match_count,
            "change_count": self.change_count,
            "is_resolved": self.is_resolved,
            "state": self.state.value,
            "utterances": [u.to_dict() for u in self.utterances],
        }


@dataclass
class ConflictSummary:
    """Aggregation of a conflict report against the resolution ledger."""

    active_dialog_key: str
    keywords: list[str]
    dialogs: list[DialogResolution] = field(default_factory=list)

    @property
    def conflicting_dialog_count(self) -> int:
        """Number of other dialogs with unresolved positive matches."""
        return sum(1 for d in self.dialogs if d.positive_match_count > 0)

    @property
    def is_resolved(self) -> bool:
        """Check if every dialog that had conflicts is resolved."""
        affected = [d for d in self.dialogs if d.raw_positive_count > 0]
        return bool(affected) and all(d.is_resolved for d in affected)

    def get(self, dialog_key: str) -> DialogResolution | None:
        """Get the aggregation of one dialog."""
        for dialog in self.dialogs:
            if dialog.dialog_key == dialog_key:
                return dialog
        return None

    def by_state(self) -> dict[str, int]:
        """Count dialogs per resolution state."""
        counts: dict[str, int] = {}
        for dialog in self.dialogs:
            counts[dialog.state.value] = counts.get(dialog.state.value, 0) + 1
        return counts

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "active_dialog_key": self.active_dialog_key,
            "keywords": self.keywords,
            "conflicting_dialog_count": self.conflicting_dialog_count,
            "is_resolved": self.is_resolved,
            "by_state": self.by_state(),
            "dialogs": [d.to_dict() for d in self.dialogs],
        }
