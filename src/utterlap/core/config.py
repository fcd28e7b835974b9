"""utterlap configuration loading and validation."""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Self

from utterlap.core.constants import (
    DEFAULT_CORPUS_FILE,
    DEFAULT_LOG_FORMAT,
    DEFAULT_LOG_LEVEL,
    DEFAULT_MIN_POSITIVE_PERCENTAGE,
    DEFAULT_STATE_DB,
    DEFAULT_STATE_FILE,
    DEFAULT_SUGGESTION_LIMIT,
    VALID_LOG_LEVELS,
    StorageBackend,
    get_config_path,
    get_utterlap_root,
)
from utterlap.core.exceptions import ConfigurationError


@dataclass(frozen=True)
class StorageConfig:
    """Storage backend and file locations, relative to the .utterlap root."""

    backend: str = StorageBackend.SQLITE.value
    state_db: str = DEFAULT_STATE_DB
    state_file: str = DEFAULT_STATE_FILE
    corpus_file: str = DEFAULT_CORPUS_FILE

    def __post_init__(self) -> None:
        try:
            StorageBackend(self.backend)
        except ValueError as e:
            raise ConfigurationError(
                f"Unknown storage backend: {self.backend}",
                details={"valid": ", ".join(b.value for b in StorageBackend)},
            ) from e


@dataclass(frozen=True)
class AnalysisConfig:
    """Conflict analysis configuration."""

    min_positive_percentage: int = DEFAULT_MIN_POSITIVE_PERCENTAGE
    suggestion_limit: int = DEFAULT_SUGGESTION_LIMIT

    def __post_init__(self) -> None:
        if not 1 <= self.min_positive_percentage <= 100:
            raise ConfigurationError(
                "min_positive_percentage must be between 1 and 100",
                details={"value": self.min_positive_percentage},
            )


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration."""

    level: str = DEFAULT_LOG_LEVEL
    format: str = DEFAULT_LOG_FORMAT

    def __post_init__(self) -> None:
        if self.level.upper() not in VALID_LOG_LEVELS:
            raise ConfigurationError(
                f"Invalid log level: {self.level}",
                details={"valid": ", ".join(VALID_LOG_LEVELS)},
            )


@dataclass(frozen=True)
class UtterlapConfig:
    """Complete utterlap configuration."""

    version: str = "1.0"
    storage: StorageConfig = field(default_factory=StorageConfig)
    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Create config from dictionary."""
        return cls(
            version=data.get("version", "1.0"),
            storage=StorageConfig(**data.get("storage", {})),
            analysis=AnalysisConfig(**data.get("analysis", {})),
            logging=LoggingConfig(**data.get("logging", {})),
        )

    @classmethod
    def load(cls, base_path: Path | None = None) -> Self:
        """Load configuration from file or use defaults."""
        config_path = get_config_path(base_path)

        if not config_path.exists():
            return cls()

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = json.load(f)
            return cls.from_dict(data)
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"Invalid JSON in config file: {e}",
                details={"path": str(config_path)},
            ) from e
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                f"Invalid configuration values: {e}",
                details={"path": str(config_path)},
            ) from e

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary."""
        return {
            "version": self.version,
            "storage": {
                "backend": self.storage.backend,
                "state_db": self.storage.state_db,
                "state_file": self.storage.state_file,
                "corpus_file": self.storage.corpus_file,
            },
            "analysis": {
                "min_positive_percentage": self.analysis.min_positive_percentage,
                "suggestion_limit": self.analysis.suggestion_limit,
            },
            "logging": {
                "level": self.logging.level,
                "format": self.logging.format,
            },
        }

    def save(self, base_path: Path | None = None) -> None:
        """Save configuration to file."""
        config_path = get_config_path(base_path)
        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)

    def corpus_path(self, base_path: Path | None = None) -> Path:
        """Resolve the corpus document path."""
        return get_utterlap_root(base_path) / self.storage.corpus_file

    def state_path(self, base_path: Path | None = None) -> Path:
        """Resolve the state store path for the configured backend."""
        root = get_utterlap_root(base_path)
        if self.storage.backend == StorageBackend.JSON.value:
            return root / self.storage.state_file
        return root / self.storage.state_db
