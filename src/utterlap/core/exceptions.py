"""utterlap custom exception hierarchy."""

from pathlib import Path
from typing import Any


class UtterlapError(Exception):
    """Base exception for all utterlap errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message


class ConfigurationError(UtterlapError):
    """Raised when configuration is invalid or missing."""

    pass


class ValidationError(UtterlapError):
    """Base exception for rejected user input."""

    pass


class KeywordValidationError(ValidationError):
    """Raised when a keyword is empty or contains whitespace."""

    def __init__(
        self,
        message: str,
        keyword: str | None = None,
        dialog_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if keyword is not None:
            details["keyword"] = repr(keyword)
        if dialog_key:
            details["dialog_key"] = dialog_key
        super().__init__(message, details)
        self.keyword = keyword
        self.dialog_key = dialog_key


class CorpusError(UtterlapError):
    """Base exception for corpus loading and lookups."""

    def __init__(
        self, message: str, path: Path | None = None, details: dict[str, Any] | None = None
    ) -> None:
        details = details or {}
        if path:
            details["path"] = str(path)
        super().__init__(message, details)
        self.path = path


class DialogNotFoundError(CorpusError):
    """Raised when a dialog key does not exist in the corpus."""

    def __init__(
        self,
        message: str,
        dialog_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if dialog_key:
            details["dialog_key"] = dialog_key
        super().__init__(message, details=details)
        self.dialog_key = dialog_key


class StoreError(UtterlapError):
    """Raised when key-value storage operations fail."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if operation:
            details["operation"] = operation
        super().__init__(message, details)
        self.operation = operation


class LedgerError(UtterlapError):
    """Raised when persisted ledger data cannot be interpreted."""

    def __init__(
        self,
        message: str,
        utterance_text: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if utterance_text is not None:
            details["utterance"] = repr(utterance_text)
        super().__init__(message, details)
        self.utterance_text = utterance_text
