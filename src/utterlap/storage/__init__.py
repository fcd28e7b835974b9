"""Persistence: key-value state stores and the corpus document."""

from utterlap.storage.corpus import load_corpus, parse_corpus, save_corpus
from utterlap.storage.kv import (
    JsonFileKeyValueStore,
    KeyValueStore,
    MemoryKeyValueStore,
    SQLiteKeyValueStore,
    open_store,
)

__all__ = [
    "KeyValueStore",
    "MemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "SQLiteKeyValueStore",
    "open_store",
    "load_corpus",
    "parse_corpus",
    "save_corpus",
]
