"""utterlap system constants and default values."""

from enum import Enum
from pathlib import Path
from typing import Final


class ActionKind(str, Enum):
    """Remediation actions that can be recorded for an utterance."""

    REMOVE = "remove"
    EDIT = "edit"
    MOVE = "move"


class DisplayState(str, Enum):
    """Per-utterance display state in a conflict report."""

    PENDING = "pending"
    EDITED = "edited"
    MOVED = "moved"
    DELETED = "deleted"
    FLAGGED = "flagged"


class ResolutionState(str, Enum):
    """Resolution state of one interfering dialog."""

    CLEAR = "clear"
    UNRESOLVED = "unresolved"
    PARTIAL = "partial"
    RESOLVED = "resolved"


class StorageBackend(str, Enum):
    """Supported key-value storage backends."""

    SQLITE = "sqlite"
    JSON = "json"
    MEMORY = "memory"


# Text normalization
STRIPPED_PUNCTUATION: Final[str] = "¿?.,!"

# Percentage formatting
PERCENT_SUFFIX: Final[str] = "%"
ZERO_PERCENTAGE: Final[str] = "0%"

# Persisted state keys
KEYWORDS_BY_DIALOG_KEY: Final[str] = "keywordsByDialog"
TODO_LIST_KEY: Final[str] = "toDoList"

# Workspace layout
UTTERLAP_ROOT_DIR: Final[str] = ".utterlap"
CONFIG_FILE: Final[str] = "config.json"
DEFAULT_CORPUS_FILE: Final[str] = "corpus.json"
DEFAULT_STATE_DB: Final[str] = "state.db"
DEFAULT_STATE_FILE: Final[str] = "state.json"

# Logging
DEFAULT_LOG_LEVEL: Final[str] = "WARNING"
DEFAULT_LOG_FORMAT: Final[str] = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
VALID_LOG_LEVELS: Final[tuple[str, ...]] = ("DEBUG", "INFO", "WARNING", "ERROR")

# Analysis
DEFAULT_MIN_POSITIVE_PERCENTAGE: Final[int] = 1
DEFAULT_SUGGESTION_LIMIT: Final[int] = 10


def get_utterlap_root(base_path: Path | None = None) -> Path:
    """Get the .utterlap root directory path."""
    if base_path is None:
        base_path = Path.cwd()
    return base_path / UTTERLAP_ROOT_DIR


def get_config_path(base_path: Path | None = None) -> Path:
    """Get the configuration file path."""
    return get_utterlap_root(base_path) / CONFIG_FILE
