"""Key-value persistence for keyword profiles and the resolution ledger.

Persisted state is two nested JSON-compatible maps, ``keywordsByDialog``
and ``toDoList``. The analysis core only reads and writes whole values by
key; every backend hands out deep copies so callers never share state
with the store.
"""

import json
import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Generator, Protocol, runtime_checkable

from utterlap.core.config import UtterlapConfig
from utterlap.core.constants import StorageBackend
from utterlap.core.exceptions import StoreError


logger = logging.getLogger(__name__)


def _copy(value: Any) -> Any:
    """Deep-copy a JSON-compatible value."""
    return json.loads(json.dumps(value))


@runtime_checkable
class KeyValueStore(Protocol):
    """Read/write interface of the storage collaborator."""

    def get(self, key: str, default: Any = None) -> Any:
        ...

    def set(self, key: str, value: Any) -> None:
        ...

    def delete(self, key: str) -> bool:
        ...

    def keys(self) -> list[str]:
        ...


class MemoryKeyValueStore:
    """Process-local store, used for tests and one-shot analyses."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, str] = {}
        for key, value in (initial or {}).items():
            self.set(key, value)

    def get(self, key: str, default: Any = None) -> Any:
        raw = self._data.get(key)
        return json.loads(raw) if raw is not None else default

    def set(self, key: str, value: Any) -> None:
        try:
            self._data[key] = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise StoreError(f"Value for {key} is not serializable: {e}", operation="set")

    def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None

    def keys(self) -> list[str]:
        return sorted(self._data)


class JsonFileKeyValueStore:
    """Store backed by a single JSON document."""

    def __init__(self, path: Path) -> None:
        """Initialize the store.

        Args:
            path: Path to the JSON state file; created on first write.
        """
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise StoreError(
                f"Invalid JSON in state file: {e}",
                operation="read",
                details={"path": str(self._path)},
            ) from e
        if not isinstance(data, dict):
            raise StoreError(
                "State file must contain a JSON object",
                operation="read",
                details={"path": str(self._path)},
            )
        return data

    def _write(self, data: dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            tmp_path.replace(self._path)
        except (OSError, TypeError, ValueError) as e:
            raise StoreError(f"Failed to write state file: {e}", operation="write")

    def get(self, key: str, default: Any = None) -> Any:
        data = self._read()
        return _copy(data[key]) if key in data else default

    def set(self, key: str, value: Any) -> None:
        try:
            value = _copy(value)
        except (TypeError, ValueError) as e:
            raise StoreError(f"Value for {key} is not serializable: {e}", operation="set")

        data = self._read()
        data[key] = value
        self._write(data)

    def delete(self, key: str) -> bool:
        data = self._read()
        if key not in data:
            return False
        del data[key]
        self._write(data)
        return True

    def keys(self) -> list[str]:
        return sorted(self._read())


KV_SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS kv_state (
    key TEXT PRIMARY KEY,
    value_json TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS kv_meta (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
"""

INIT_META_SQL = """
INSERT OR IGNORE INTO kv_meta (key, value, updated_at) VALUES
    ('schema_version', '1', datetime('now'));
"""


class SQLiteKeyValueStore:
    """SQLite-backed store.

    Example:
        store = SQLiteKeyValueStore(Path(".utterlap/state.db"))
        store.initialize()
        store.set("toDoList", {})
    """

    def __init__(self, db_path: Path) -> None:
        """Initialize the store.

        Args:
            db_path: Path to SQLite database file.
        """
        self._db_path = db_path
        self._connection: sqlite3.Connection | None = None

    @contextmanager
    def _get_connection(self) -> Generator[sqlite3.Connection, None, None]:
        """Get a database connection."""
        if self._connection is None:
            self._connection = self._create_connection()
        yield self._connection

    def _create_connection(self) -> sqlite3.Connection:
        """Create and configure a database connection."""
        self._db_path.parent.mkdir(parents=True, exist_ok=True)

        conn = sqlite3.connect(str(self._db_path))
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode = WAL")
        conn.execute("PRAGMA synchronous = NORMAL")

        return conn

    def initialize(self) -> None:
        """Create tables if they do not exist."""
        try:
            with self._get_connection() as conn:
                conn.executescript(KV_SCHEMA_SQL)
                conn.executescript(INIT_META_SQL)
                conn.commit()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to initialize state store: {e}", operation="initialize")

    def close(self) -> None:
        """Close the database connection."""
        if self._connection is not None:
            self._connection.close()
            self._connection = None

    def get(self, key: str, default: Any = None) -> Any:
        try:
            with self._get_connection() as conn:
                row = conn.execute(
                    "SELECT value_json FROM kv_state WHERE key = ?", (key,)
                ).fetchone()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to read {key}: {e}", operation="get")
        return json.loads(row["value_json"]) if row else default

    def set(self, key: str, value: Any) -> None:
        try:
            payload = json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise StoreError(f"Value for {key} is not serializable: {e}", operation="set")

        try:
            with self._get_connection() as conn:
                conn.execute(
                    """
                    INSERT INTO kv_state (key, value_json, updated_at)
                    VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET
                        value_json = excluded.value_json,
                        updated_at = excluded.updated_at
                    """,
                    (key, payload, datetime.now(timezone.utc).isoformat()),
                )
                conn.commit()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to write {key}: {e}", operation="set")

    def delete(self, key: str) -> bool:
        try:
            with self._get_connection() as conn:
                cursor = conn.execute("DELETE FROM kv_state WHERE key = ?", (key,))
                conn.commit()
                return cursor.rowcount > 0
        except sqlite3.Error as e:
            raise StoreError(f"Failed to delete {key}: {e}", operation="delete")

    def keys(self) -> list[str]:
        try:
            with self._get_connection() as conn:
                rows = conn.execute("SELECT key FROM kv_state ORDER BY key").fetchall()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to list keys: {e}", operation="keys")
        return [row["key"] for row in rows]


def open_store(config: UtterlapConfig, base_path: Path | None = None) -> KeyValueStore:
    """Open the state store selected by the configuration."""
    backend = StorageBackend(config.storage.backend)

    if backend == StorageBackend.MEMORY:
        return MemoryKeyValueStore()

    path = config.state_path(base_path)
    logger.debug(f"Opening {backend.value} state store at {path}")

    if backend == StorageBackend.JSON:
        return JsonFileKeyValueStore(path)

    store = SQLiteKeyValueStore(path)
    store.initialize()
    return store
