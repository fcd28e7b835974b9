"""utterlap - keyword overlap analysis for intent-classification corpora.

Scores every other dialog's utterances against the keyword profile of an
active dialog, surfaces likely classification conflicts, and tracks the
remediation decisions authors record for them.
"""

__version__ = "0.1.0"

from utterlap.core import (
    ActionKind,
    DisplayState,
    ResolutionState,
    UtterlapConfig,
    UtterlapError,
)

__all__ = [
    "__version__",
    # Core enums
    "ActionKind",
    "DisplayState",
    "ResolutionState",
    # Config
    "UtterlapConfig",
    # Base exception
    "UtterlapError",
]
