"""Tests for KeywordRepository."""

import pytest

from utterlap.core.constants import KEYWORDS_BY_DIALOG_KEY
from utterlap.core.exceptions import (
    DialogNotFoundError,
    KeywordValidationError,
    StoreError,
)
from utterlap.profiles.repository import KeywordRepository, validate_keyword
from utterlap.storage.kv import MemoryKeyValueStore


@pytest.fixture
def repository(store) -> KeywordRepository:
    return KeywordRepository(store)


class TestValidateKeyword:
    """Tests for validate_keyword."""

    def test_normalizes(self):
        assert validate_keyword("  Refund ") == "refund"
        assert validate_keyword("¿Factura?") == "factura"

    @pytest.mark.parametrize("keyword", ["", "   ", "?!"])
    def test_empty_rejected(self, keyword):
        with pytest.raises(KeywordValidationError, match="must not be empty"):
            validate_keyword(keyword, "Billing")

    @pytest.mark.parametrize("keyword", ["pay bill", "pay\tbill", " a b "])
    def test_whitespace_rejected(self, keyword):
        with pytest.raises(KeywordValidationError, match="single word") as exc_info:
            validate_keyword(keyword, "Billing")
        assert exc_info.value.dialog_key == "Billing"


class TestKeywordRepository:
    """Tests for KeywordRepository."""

    def test_add_keyword_recomputes_statuses(self, repository, corpus):
        profile = repository.add_keyword(corpus, "Billing", "bill")

        assert profile.keywords == ("bill",)
        assert profile.statuses == {
            "I want to pay my bill": "100%",
            "How much is my invoice?": "0%",
        }

        profile = repository.add_keyword(corpus, "Billing", "invoice")
        assert profile.status_of("How much is my invoice?") == "50%"

    def test_insertion_order_and_dedupe(self, repository, corpus):
        repository.add_keyword(corpus, "Billing", "invoice")
        repository.add_keyword(corpus, "Billing", "bill")
        profile = repository.add_keyword(corpus, "Billing", "INVOICE")

        assert profile.keywords == ("invoice", "bill")

    def test_invalid_keyword_leaves_state(self, repository, corpus, store):
        repository.add_keyword(corpus, "Billing", "bill")
        before = store.get(KEYWORDS_BY_DIALOG_KEY)

        with pytest.raises(KeywordValidationError):
            repository.add_keyword(corpus, "Billing", "pay bill")

        assert repository.keywords("Billing") == ("bill",)
        assert store.get(KEYWORDS_BY_DIALOG_KEY) == before

    def test_unknown_dialog(self, repository, corpus):
        with pytest.raises(DialogNotFoundError):
            repository.add_keyword(corpus, "Nope", "bill")

    def test_remove_keyword(self, repository, corpus):
        repository.add_keyword(corpus, "Billing", "bill")
        repository.add_keyword(corpus, "Billing", "invoice")

        profile = repository.remove_keyword(corpus, "Billing", "Bill")

        assert profile.keywords == ("invoice",)
        assert profile.status_of("I want to pay my bill") == "0%"

    def test_remove_absent_keyword(self, repository, corpus):
        profile = repository.remove_keyword(corpus, "Billing", "nothing")
        assert profile.keywords == ()
        assert set(profile.statuses.values()) == {"0%"}

    def test_refresh_drops_stale_statuses(self, repository, corpus):
        stale = MemoryKeyValueStore(
            {
                KEYWORDS_BY_DIALOG_KEY: {
                    "Billing": {"keywords": ["bill"], "statuses": {"gone": "100%"}}
                }
            }
        )
        repository = KeywordRepository(stale)

        profile = repository.refresh(corpus, "Billing")

        assert "gone" not in profile.statuses
        assert profile.status_of("I want to pay my bill") == "100%"

    def test_written_through_and_reloaded(self, repository, corpus, store):
        repository.add_keyword(corpus, "Support", "refund")

        assert store.get(KEYWORDS_BY_DIALOG_KEY)["Support"]["keywords"] == ["refund"]
        assert KeywordRepository(store).snapshot() == repository.snapshot()

    def test_get_profile_without_keywords(self, repository):
        profile = repository.get_profile("Greeting")
        assert profile.is_empty
        assert repository.dialog_keys == []

    def test_clear(self, repository, corpus):
        repository.add_keyword(corpus, "Billing", "bill")

        assert repository.clear("Billing")
        assert not repository.clear("Billing")
        assert repository.keywords("Billing") == ()

    def test_snapshot_is_a_copy(self, repository, corpus):
        repository.add_keyword(corpus, "Billing", "bill")
        snapshot = repository.snapshot()
        snapshot["Billing"]["keywords"].append("hacked")

        assert repository.keywords("Billing") == ("bill",)

    def test_invalid_layout(self):
        with pytest.raises(StoreError):
            KeywordRepository(MemoryKeyValueStore({KEYWORDS_BY_DIALOG_KEY: "bad"}))
