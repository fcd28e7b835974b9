"""utterlap data models."""

from utterlap.models.conflict import (
    ConflictMatch,
    ConflictReport,
    ConflictSummary,
    DialogResolution,
    UtteranceDisplay,
    parse_percentage,
)
from utterlap.models.corpus import Corpus, Dialog, Service, Utterance
from utterlap.models.keyword import KeywordProfile
from utterlap.models.resolution import (
    Action,
    Edit,
    LedgerResult,
    Move,
    Remove,
    ResolutionEntry,
    action_from_dict,
)

__all__ = [
    # Corpus models
    "Utterance",
    "Dialog",
    "Service",
    "Corpus",
    # Keyword models
    "KeywordProfile",
    # Resolution models
    "Action",
    "Remove",
    "Edit",
    "Move",
    "ResolutionEntry",
    "LedgerResult",
    "action_from_dict",
    # Conflict models
    "ConflictMatch",
    "ConflictReport",
    "UtteranceDisplay",
    "DialogResolution",
    "ConflictSummary",
    "parse_percentage",
]
