"""Tests for ConflictScanner."""

import pytest

from utterlap.conflicts.scanner import ConflictScanner
from utterlap.models.conflict import ConflictMatch
from utterlap.models.corpus import Dialog, Utterance


@pytest.fixture
def scanner() -> ConflictScanner:
    return ConflictScanner()


class TestConflictScanner:
    """Tests for ConflictScanner."""

    def test_refund_conflict(self, scanner, refund_corpus):
        report = scanner.scan_corpus(refund_corpus, "Billing", ["refund"])

        assert ConflictMatch("I want a refund now", "100%") in report.matches_for("Support")

    def test_active_dialog_never_reported(self, scanner, corpus):
        for active in corpus.dialog_keys:
            report = scanner.scan_corpus(corpus, active, ["bill", "invoice"])
            assert active not in report.matches

    def test_keeps_collection_order(self, scanner, corpus):
        report = scanner.scan_corpus(corpus, "Billing", ["bill", "invoice"])

        assert report.dialog_keys == ["Support", "Greeting", "Empty"]
        assert [m.utterance_text for m in report.matches_for("Support")] == [
            "My bill is wrong, I want a refund",
            "The app crashes",
            "I need help with my invoice",
        ]

    def test_includes_zero_scores(self, scanner, corpus):
        report = scanner.scan_corpus(corpus, "Billing", ["bill", "invoice"])

        assert [m.percentage for m in report.matches_for("Support")] == ["50%", "0%", "50%"]
        assert [m.percentage for m in report.matches_for("Greeting")] == ["0%", "0%"]

    def test_dialog_without_utterances(self, scanner, corpus):
        report = scanner.scan_corpus(corpus, "Billing", ["bill"])
        assert report.matches_for("Empty") == ()

    def test_empty_keywords(self, scanner, corpus):
        report = scanner.scan_corpus(corpus, "Billing", [])

        assert report.keywords == ()
        assert all(m.percentage == "0%" for v in report.matches.values() for m in v)

    def test_raw_collections(self, scanner):
        report = scanner.scan(
            utterances=[Utterance("reset my password", "Support")],
            dialogs=[Dialog("Login"), Dialog("Support")],
            active_dialog_key="Login",
            keywords=["Password", "password"],
        )

        assert report.keywords == ("password",)
        assert report.to_dict() == {
            "Support": [{"utterance": "reset my password", "percentage": "100%"}]
        }

    def test_read_only(self, scanner, corpus):
        before = corpus.to_dict()
        scanner.scan_corpus(corpus, "Billing", ["bill"])
        assert corpus.to_dict() == before
