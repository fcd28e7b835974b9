"""End-to-end tests for AnalysisSession."""

import pytest

from utterlap.core.config import AnalysisConfig, UtterlapConfig
from utterlap.core.constants import (
    KEYWORDS_BY_DIALOG_KEY,
    TODO_LIST_KEY,
    DisplayState,
    ResolutionState,
)
from utterlap.core.exceptions import DialogNotFoundError, KeywordValidationError
from utterlap.models.corpus import Corpus, Dialog, Utterance
from utterlap.models.resolution import Edit, Move, Remove
from utterlap.session import AnalysisSession
from utterlap.storage.kv import JsonFileKeyValueStore


WRONG_BILL = "My bill is wrong, I want a refund"
INVOICE_HELP = "I need help with my invoice"


@pytest.fixture
def session(corpus, store) -> AnalysisSession:
    return AnalysisSession(corpus, store)


class TestAnalysisSession:
    """Tests for AnalysisSession."""

    def test_requires_selected_dialog(self, session):
        with pytest.raises(DialogNotFoundError, match="No dialog selected"):
            session.add_keyword("bill")

    def test_select_unknown_dialog(self, session):
        with pytest.raises(DialogNotFoundError):
            session.select_dialog("Nope")
        assert session.active_dialog_key is None

    def test_full_workflow(self, session, store):
        session.select_dialog("Billing")
        session.add_keyword("bill")
        session.add_keyword("invoice")

        summary = session.analyze()
        support = summary.get("Support")
        assert support.state == ResolutionState.UNRESOLVED
        assert summary.conflicting_dialog_count == 1

        assert session.set_action("Support", WRONG_BILL, Remove()).success
        assert session.toggle_flag("Support", INVOICE_HELP).success

        summary = session.analyze()
        assert summary.get("Support").state == ResolutionState.RESOLVED
        assert summary.is_resolved

        assert store.get(KEYWORDS_BY_DIALOG_KEY)["Billing"]["keywords"] == ["bill", "invoice"]
        assert store.get(TODO_LIST_KEY)[INVOICE_HELP]["flaggedFrom"] == ["Billing"]

    def test_read_after_write(self, session):
        session.select_dialog("Billing")
        session.add_keyword("bill")
        assert session.scan().keywords == ("bill",)

        session.remove_keyword("bill")
        assert session.scan().keywords == ()

    def test_invalid_keyword(self, session):
        session.select_dialog("Billing")
        with pytest.raises(KeywordValidationError):
            session.add_keyword("pay bill")
        assert session.profile().is_empty

    def test_contract_violation(self, session):
        result = session.set_action("Billing", WRONG_BILL, Edit("x"))

        assert not result.success
        assert len(session.ledger) == 0

    def test_flag_is_per_viewer(self, session):
        session.select_dialog("Billing")
        session.add_keyword("bill")
        session.toggle_flag("Support", WRONG_BILL, "Greeting")

        rows = session.analyze().get("Support").utterances
        assert rows[0].state == DisplayState.PENDING

        rows = session.analyze("Greeting").get("Support").utterances
        assert rows[0].state == DisplayState.FLAGGED

    def test_status_view(self, session):
        session.select_dialog("Support")
        session.add_keyword("refund")
        session.set_action("Support", "The app crashes", Move("Greeting"))

        rows = session.status_view()

        assert [r.percentage for r in rows] == ["100%", "0%", "0%"]
        assert rows[1].state == DisplayState.MOVED

    def test_replace_corpus(self, session):
        session.select_dialog("Greeting")
        session.replace_corpus(
            Corpus.build(
                utterances=[Utterance("Pay now", "Billing")],
                dialogs=[Dialog("Billing")],
            )
        )
        assert session.active_dialog_key is None

    def test_replace_corpus_refreshes_statuses(self, session):
        session.select_dialog("Billing")
        session.add_keyword("pay")
        session.replace_corpus(
            Corpus.build(
                utterances=[Utterance("Pay now", "Billing")],
                dialogs=[Dialog("Billing")],
            )
        )
        assert dict(session.profile().statuses) == {"Pay now": "100%"}

    def test_suggestions_skip_existing_keywords(self, session):
        session.select_dialog("Billing")
        session.add_keyword("pay")

        words = [s.word for s in session.suggest_keywords()]

        assert words == ["to", "how", "much"]

    def test_suggestion_limit_from_config(self, corpus):
        config = UtterlapConfig(analysis=AnalysisConfig(suggestion_limit=1))
        session = AnalysisSession(corpus, config=config)

        assert [s.word for s in session.suggest_keywords("Support")] == ["wrong"]

    def test_alternatives_sorted_by_word_count(self, session):
        pairs = session.alternatives("Support")
        assert [u.text for u, _ in pairs][0] == "The app crashes"

    def test_exclusive_words(self, session):
        assert session.exclusive_words()["Empty"] == []


class TestWorkspace:
    """Tests for sessions opened over a workspace."""

    def test_state_survives_sessions(self, workspace):
        session = AnalysisSession.from_workspace(workspace)
        session.select_dialog("Billing")
        session.add_keyword("bill")
        session.set_action("Support", WRONG_BILL, Remove())
        session.close()

        reopened = AnalysisSession.from_workspace(workspace)
        assert reopened.profile("Billing").keywords == ("bill",)
        assert reopened.ledger.get(WRONG_BILL).action == Remove()
        assert isinstance(reopened._store, JsonFileKeyValueStore)
        reopened.close()
