"""Keyword profile data models."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping


@dataclass(frozen=True)
class KeywordProfile:
    """The keyword set of one dialog and its cached self-match statuses.

    ``keywords`` keeps insertion order and holds unique lowercase tokens.
    ``statuses`` maps utterance text to the last computed percentage string.
    """

    dialog_key: str
    keywords: tuple[str, ...] = ()
    statuses: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "statuses", MappingProxyType(dict(self.statuses)))

    def __contains__(self, keyword: object) -> bool:
        return keyword in self.keywords

    @property
    def is_empty(self) -> bool:
        """Check if the profile has no keywords."""
        return not self.keywords

    def status_of(self, utterance_text: str) -> str:
        """Get the cached status of an utterance, or an empty string."""
        return self.statuses.get(utterance_text, "")

    def to_dict(self) -> dict[str, Any]:
        """Convert to the ``keywordsByDialog`` entry layout."""
        return {
            "keywords": list(self.keywords),
            "statuses": dict(self.statuses),
        }

    @classmethod
    def from_dict(cls, dialog_key: str, data: dict[str, Any]) -> "KeywordProfile":
        """Create from a ``keywordsByDialog`` entry."""
        return cls(
            dialog_key=dialog_key,
            keywords=tuple(data.get("keywords", [])),
            statuses=dict(data.get("statuses", {})),
        )
