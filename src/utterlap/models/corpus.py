"""Corpus data models.

Utterances, dialogs and services are owned by the entity-management
collaborator. This module only gives them a typed, immutable shape and
the lookups the analysis components need. Serialized field names follow
the collaborator's document layout (``utterance``, ``dialogKey``, ...).
"""

from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator

from utterlap.core.exceptions import DialogNotFoundError


@dataclass(frozen=True)
class Utterance:
    """A training utterance assigned to a dialog."""

    text: str
    dialog_key: str
    is_question: bool = False
    is_imperative: bool = False

    @property
    def word_count(self) -> int:
        """Number of whitespace-separated words."""
        return len(self.text.split())

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "utterance": self.text,
            "dialogKey": self.dialog_key,
            "isQuestion": self.is_question,
            "isImperative": self.is_imperative,
            "objectType": "utterance",
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Utterance":
        """Create from dictionary."""
        return cls(
            text=data["utterance"],
            dialog_key=data["dialogKey"],
            is_question=bool(data.get("isQuestion", False)),
            is_imperative=bool(data.get("isImperative", False)),
        )


@dataclass(frozen=True)
class Dialog:
    """An intent bucket owning utterances."""

    dialog_key: str
    service_key: str = ""
    description: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "dialogKey": self.dialog_key,
            "serviceKey": self.service_key,
            "description": self.description,
            "objectType": "dialog",
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Dialog":
        """Create from dictionary."""
        return cls(
            dialog_key=data["dialogKey"],
            service_key=data.get("serviceKey", "") or "",
            description=data.get("description", "") or "",
        )


@dataclass(frozen=True)
class Service:
    """A grouping of dialogs."""

    name: str
    description: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "name": self.name,
            "description": self.description,
            "objectType": "service",
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Service":
        """Create from dictionary."""
        return cls(
            name=data["name"],
            description=data.get("description", "") or "",
        )


@dataclass(frozen=True)
class Corpus:
    """Immutable snapshot of utterances, dialogs and services."""

    utterances: tuple[Utterance, ...] = ()
    dialogs: tuple[Dialog, ...] = ()
    services: tuple[Service, ...] = ()
    _by_dialog: dict[str, tuple[Utterance, ...]] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        grouped: dict[str, list[Utterance]] = {}
        for utterance in self.utterances:
            grouped.setdefault(utterance.dialog_key, []).append(utterance)
        object.__setattr__(
            self, "_by_dialog", {k: tuple(v) for k, v in grouped.items()}
        )

    @classmethod
    def build(
        cls,
        utterances: Iterable[Utterance] = (),
        dialogs: Iterable[Dialog] = (),
        services: Iterable[Service] = (),
    ) -> "Corpus":
        """Create a corpus from any iterables."""
        return cls(tuple(utterances), tuple(dialogs), tuple(services))

    def __iter__(self) -> Iterator[Utterance]:
        return iter(self.utterances)

    @property
    def dialog_keys(self) -> list[str]:
        """Dialog keys in collection order."""
        return [d.dialog_key for d in self.dialogs]

    def has_dialog(self, dialog_key: str) -> bool:
        """Check whether a dialog exists."""
        return any(d.dialog_key == dialog_key for d in self.dialogs)

    def get_dialog(self, dialog_key: str) -> Dialog:
        """Get a dialog by key.

        Raises:
            DialogNotFoundError: If no dialog has this key.
        """
        for dialog in self.dialogs:
            if dialog.dialog_key == dialog_key:
                return dialog
        raise DialogNotFoundError(f"Dialog not found: {dialog_key}", dialog_key=dialog_key)

    def utterances_for(self, dialog_key: str) -> tuple[Utterance, ...]:
        """Utterances owned by a dialog, in collection order."""
        return self._by_dialog.get(dialog_key, ())

    def find_utterance(self, dialog_key: str, text: str) -> Utterance | None:
        """Resolve an utterance by its owning dialog and exact text."""
        for utterance in self.utterances_for(dialog_key):
            if utterance.text == text:
                return utterance
        return None

    def dialogs_for_service(self, service_key: str) -> list[Dialog]:
        """Dialogs grouped under a service."""
        return [d for d in self.dialogs if d.service_key == service_key]

    def sorted_by_word_count(self, dialog_key: str) -> list[Utterance]:
        """A dialog's utterances ordered from shortest to longest."""
        return sorted(self.utterances_for(dialog_key), key=lambda u: u.word_count)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the combined document layout."""
        return {
            "utterances": [u.to_dict() for u in self.utterances],
            "dialogs": [d.to_dict() for d in self.dialogs],
            "services": [s.to_dict() for s in self.services],
        }
