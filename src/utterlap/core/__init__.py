"""Core constants, configuration, and exceptions."""

from utterlap.core.config import UtterlapConfig
from utterlap.core.constants import (
    ActionKind,
    DisplayState,
    ResolutionState,
    StorageBackend,
)
from utterlap.core.exceptions import UtterlapError

__all__ = [
    "ActionKind",
    "DisplayState",
    "ResolutionState",
    "StorageBackend",
    "UtterlapConfig",
    "UtterlapError",
]
