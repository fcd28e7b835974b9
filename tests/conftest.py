"""Pytest configuration and fixtures for utterlap tests."""

import json
import shutil
import tempfile
from pathlib import Path
from typing import Generator

import pytest

from utterlap.core.config import StorageConfig, UtterlapConfig
from utterlap.models.corpus import Corpus, Dialog, Service, Utterance
from utterlap.storage.kv import MemoryKeyValueStore


SAMPLE_CORPUS = {
    "services": [
        {"name": "Accounts", "description": "Billing and payments"},
        {"name": "Help", "description": "Customer support"},
    ],
    "dialogs": [
        {"dialogKey": "Billing", "serviceKey": "Accounts"},
        {"dialogKey": "Support", "serviceKey": "Help"},
        {"dialogKey": "Greeting", "serviceKey": "Help"},
        {"dialogKey": "Empty", "serviceKey": "Help"},
    ],
    "utterances": [
        {"utterance": "I want to pay my bill", "dialogKey": "Billing"},
        {"utterance": "How much is my invoice?", "dialogKey": "Billing", "isQuestion": True},
        {"utterance": "My bill is wrong, I want a refund", "dialogKey": "Support"},
        {"utterance": "The app crashes", "dialogKey": "Support"},
        {"utterance": "I need help with my invoice", "dialogKey": "Support"},
        {"utterance": "Hello there!", "dialogKey": "Greeting"},
        {"utterance": "Good morning", "dialogKey": "Greeting"},
    ],
}


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    tmp = Path(tempfile.mkdtemp())
    yield tmp
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def corpus() -> Corpus:
    """Create the sample corpus.

    Billing and Support share the words "bill" and "invoice"; Greeting
    shares nothing; Empty owns no utterances.
    """
    return Corpus.build(
        utterances=[Utterance.from_dict(u) for u in SAMPLE_CORPUS["utterances"]],
        dialogs=[Dialog.from_dict(d) for d in SAMPLE_CORPUS["dialogs"]],
        services=[Service.from_dict(s) for s in SAMPLE_CORPUS["services"]],
    )


@pytest.fixture
def refund_corpus() -> Corpus:
    """Create a two-dialog corpus with a single refund conflict."""
    return Corpus.build(
        utterances=[
            Utterance("I was charged twice", "Billing"),
            Utterance("I want a refund now", "Support"),
            Utterance("My screen is black", "Support"),
        ],
        dialogs=[Dialog("Billing"), Dialog("Support")],
    )


@pytest.fixture
def store() -> MemoryKeyValueStore:
    """Create an empty in-memory state store."""
    return MemoryKeyValueStore()


@pytest.fixture
def workspace(temp_dir: Path) -> Path:
    """Create an initialized workspace holding the sample corpus."""
    config = UtterlapConfig(storage=StorageConfig(backend="json"))
    config.save(temp_dir)
    corpus_path = config.corpus_path(temp_dir)
    corpus_path.write_text(json.dumps(SAMPLE_CORPUS), encoding="utf-8")
    return temp_dir


@pytest.fixture
def sample_corpus_file(temp_dir: Path) -> Path:
    """Write the sample corpus as a flat list document."""
    items = (
        [dict(s, objectType="service") for s in SAMPLE_CORPUS["services"]]
        + [dict(d, objectType="dialog") for d in SAMPLE_CORPUS["dialogs"]]
        + [dict(u, objectType="utterance") for u in SAMPLE_CORPUS["utterances"]]
    )
    path = temp_dir / "export.json"
    path.write_text(json.dumps(items), encoding="utf-8")
    return path


@pytest.fixture
def sample_corpus_data() -> dict:
    """The sample corpus as a grouped document."""
    return json.loads(json.dumps(SAMPLE_CORPUS))
