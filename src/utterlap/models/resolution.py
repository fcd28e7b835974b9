"""Resolution ledger data models.

A ledger entry records, per utterance text, at most one remediation
action (remove, edit, move) and, independently, the set of dialogs that
flagged the utterance as noted-but-undecided.
"""

from dataclasses import dataclass, field
from typing import Any, ClassVar, Union

from utterlap.core.constants import ActionKind
from utterlap.core.exceptions import LedgerError


@dataclass(frozen=True)
class Remove:
    """Delete the utterance from its dialog."""

    kind: ClassVar[ActionKind] = ActionKind.REMOVE

    def describe(self) -> str:
        return "deleted"


@dataclass(frozen=True)
class Edit:
    """Replace the utterance text."""

    text: str
    kind: ClassVar[ActionKind] = ActionKind.EDIT

    def describe(self) -> str:
        return f"edited to --> {self.text}"


@dataclass(frozen=True)
class Move:
    """Reassign the utterance to another dialog."""

    target_dialog_key: str
    kind: ClassVar[ActionKind] = ActionKind.MOVE

    def describe(self) -> str:
        return f"moved to --> {self.target_dialog_key}"


Action = Union[Remove, Edit, Move]


def action_from_dict(data: dict[str, Any]) -> Action | None:
    """Decode the action slot of a persisted ``toDoList`` entry.

    The legacy ``"flag"`` action value carries no remediation; flags live
    in ``flaggedFrom`` only, so it decodes to no action.

    Raises:
        LedgerError: If the action is unknown or misses its parameter.
    """
    raw = data.get("action")
    if raw in (None, "", "flag"):
        return None

    try:
        kind = ActionKind(raw)
    except ValueError as e:
        raise LedgerError(f"Unknown ledger action: {raw}") from e

    if kind == ActionKind.REMOVE:
        return Remove()
    if kind == ActionKind.EDIT:
        if data.get("editedText") is None:
            raise LedgerError("Edit action requires editedText")
        return Edit(text=data["editedText"])
    if data.get("newDialogKey") is None:
        raise LedgerError("Move action requires newDialogKey")
    return Move(target_dialog_key=data["newDialogKey"])


@dataclass(frozen=True)
class ResolutionEntry:
    """Remediation state of one utterance text."""

    utterance_text: str
    action: Action | None = None
    flagged_from: tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        """An entry with no action and no flags must not be stored."""
        return self.action is None and not self.flagged_from

    @property
    def has_action(self) -> bool:
        """Check if a remediation action is recorded."""
        return self.action is not None

    @property
    def action_kind(self) -> ActionKind | None:
        """Kind of the recorded action, if any."""
        return self.action.kind if self.action is not None else None

    def is_flagged_from(self, dialog_key: str) -> bool:
        """Check if a dialog flagged this utterance."""
        return dialog_key in self.flagged_from

    def touched_from(self, dialog_key: str) -> bool:
        """Check if remediation covers this utterance when viewed from a dialog."""
        return self.has_action or self.is_flagged_from(dialog_key)

    def with_action(self, action: Action | None) -> "ResolutionEntry":
        """Return a copy with the action slot replaced."""
        return ResolutionEntry(self.utterance_text, action, self.flagged_from)

    def with_flag_toggled(self, dialog_key: str) -> "ResolutionEntry":
        """Return a copy with a dialog added to or removed from the flags."""
        if dialog_key in self.flagged_from:
            flags = tuple(k for k in self.flagged_from if k != dialog_key)
        else:
            flags = self.flagged_from + (dialog_key,)
        return ResolutionEntry(self.utterance_text, self.action, flags)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the ``toDoList`` entry layout."""
        data: dict[str, Any] = {
            "action": self.action.kind.value if self.action is not None else None,
            "flaggedFrom": list(self.flagged_from),
        }
        if isinstance(self.action, Edit):
            data["editedText"] = self.action.text
        elif isinstance(self.action, Move):
            data["newDialogKey"] = self.action.target_dialog_key
        return data

    @classmethod
    def from_dict(cls, utterance_text: str, data: dict[str, Any]) -> "ResolutionEntry":
        """Create from a ``toDoList`` entry."""
        try:
            action = action_from_dict(data)
        except LedgerError as e:
            raise LedgerError(e.message, utterance_text=utterance_text) from e

        flags: list[str] = []
        for dialog_key in data.get("flaggedFrom") or []:
            if dialog_key not in flags:
                flags.append(dialog_key)

        return cls(utterance_text=utterance_text, action=action, flagged_from=tuple(flags))


@dataclass
class LedgerResult:
    """Result of a ledger mutation."""

    success: bool
    utterance_text: str
    dialog_key: str
    entry: ResolutionEntry | None = None
    error: str | None = None
    changes: list[str] = field(default_factory=list)

    @property
    def entry_removed(self) -> bool:
        """Check if the mutation left no entry behind."""
        return self.success and self.entry is None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "success": self.success,
            "utterance": self.utterance_text,
            "dialog_key": self.dialog_key,
            "entry": self.entry.to_dict() if self.entry else None,
            "error": self.error,
            "changes": self.changes,
        }
