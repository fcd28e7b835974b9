"""Tests for resolution ledger models."""

import pytest

from utterlap.core.constants import ActionKind
from utterlap.core.exceptions import LedgerError
from utterlap.models.resolution import (
    Edit,
    LedgerResult,
    Move,
    Remove,
    ResolutionEntry,
    action_from_dict,
)


class TestActionFromDict:
    """Tests for action_from_dict."""

    @pytest.mark.parametrize("raw", [None, "", "flag"])
    def test_no_action(self, raw):
        assert action_from_dict({"action": raw}) is None

    def test_actions(self):
        assert action_from_dict({"action": "remove"}) == Remove()
        assert action_from_dict({"action": "edit", "editedText": "hi"}) == Edit("hi")
        assert action_from_dict({"action": "move", "newDialogKey": "Support"}) == Move("Support")

    def test_unknown_action(self):
        with pytest.raises(LedgerError, match="Unknown ledger action"):
            action_from_dict({"action": "archive"})

    def test_missing_parameter(self):
        with pytest.raises(LedgerError, match="editedText"):
            action_from_dict({"action": "edit"})
        with pytest.raises(LedgerError, match="newDialogKey"):
            action_from_dict({"action": "move"})


class TestResolutionEntry:
    """Tests for ResolutionEntry."""

    def test_empty(self):
        assert ResolutionEntry("hi").is_empty
        assert not ResolutionEntry("hi", Remove()).is_empty
        assert not ResolutionEntry("hi", flagged_from=("Billing",)).is_empty

    def test_action_kind(self):
        assert ResolutionEntry("hi").action_kind is None
        assert ResolutionEntry("hi", Move("Support")).action_kind == ActionKind.MOVE

    def test_touched_from(self):
        flagged = ResolutionEntry("hi", flagged_from=("Billing",))
        assert flagged.touched_from("Billing")
        assert not flagged.touched_from("Support")
        assert ResolutionEntry("hi", Remove()).touched_from("Support")

    def test_with_flag_toggled(self):
        entry = ResolutionEntry("hi", Remove())
        toggled = entry.with_flag_toggled("Billing")

        assert toggled.flagged_from == ("Billing",)
        assert toggled.with_flag_toggled("Billing") == entry

    def test_with_action_keeps_flags(self):
        entry = ResolutionEntry("hi", Remove(), ("Billing",))
        assert entry.with_action(None).flagged_from == ("Billing",)

    def test_to_dict(self):
        assert ResolutionEntry("hi", Edit("hello"), ("Billing",)).to_dict() == {
            "action": "edit",
            "flaggedFrom": ["Billing"],
            "editedText": "hello",
        }
        assert ResolutionEntry("hi", flagged_from=("Billing",)).to_dict() == {
            "action": None,
            "flaggedFrom": ["Billing"],
        }

    def test_from_dict_error_names_utterance(self):
        with pytest.raises(LedgerError) as exc_info:
            ResolutionEntry.from_dict("hi", {"action": "move"})
        assert exc_info.value.utterance_text == "hi"


class TestLedgerResult:
    """Tests for LedgerResult."""

    def test_entry_removed(self):
        assert LedgerResult(True, "hi", "Support").entry_removed
        assert not LedgerResult(False, "hi", "Support", error="nope").entry_removed

    def test_to_dict(self):
        result = LedgerResult(True, "hi", "Support", ResolutionEntry("hi", Remove()), changes=["set remove"])
        assert result.to_dict() == {
            "success": True,
            "utterance": "hi",
            "dialog_key": "Support",
            "entry": {"action": "remove", "flaggedFrom": []},
            "error": None,
            "changes": ["set remove"],
        }
