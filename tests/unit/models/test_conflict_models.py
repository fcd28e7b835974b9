"""Tests for conflict report models."""

import pytest

from utterlap.core.constants import DisplayState, ResolutionState
from utterlap.models.conflict import (
    ConflictMatch,
    ConflictReport,
    ConflictSummary,
    DialogResolution,
    UtteranceDisplay,
    parse_percentage,
)


def _resolution(key: str, raw: int, resolved: bool) -> DialogResolution:
    return DialogResolution(
        dialog_key=key,
        total_utterances=raw,
        raw_positive_count=raw,
        positive_match_count=0 if resolved else raw,
        change_count=raw if resolved else 0,
        is_resolved=resolved,
        state=ResolutionState.RESOLVED if resolved else ResolutionState.UNRESOLVED,
    )


@pytest.mark.parametrize(
    "value,expected", [("50%", 50), ("0%", 0), ("100%", 100), ("", 0), ("n/a", 0)]
)
def test_parse_percentage(value, expected):
    assert parse_percentage(value) == expected


class TestConflictMatch:
    """Tests for ConflictMatch."""

    def test_positive(self):
        assert ConflictMatch("hi", "13%").is_positive
        assert not ConflictMatch("hi", "0%").is_positive

    def test_to_dict(self):
        assert ConflictMatch("hi", "50%").to_dict() == {"utterance": "hi", "percentage": "50%"}


class TestConflictReport:
    """Tests for ConflictReport."""

    def test_immutable_matches(self):
        source = {"Support": [ConflictMatch("hi", "50%")]}
        report = ConflictReport("Billing", ("bill",), source)
        source["Support"].append(ConflictMatch("bye", "0%"))

        assert report.matches_for("Support") == (ConflictMatch("hi", "50%"),)
        with pytest.raises(TypeError):
            report.matches["Greeting"] = ()

    def test_totals(self):
        report = ConflictReport(
            "Billing",
            ("bill",),
            {"Support": [ConflictMatch("a", "0%"), ConflictMatch("b", "100%")], "Empty": []},
        )
        assert report.total_utterances == 2
        assert report.dialog_keys == ["Support", "Empty"]
        assert report.matches_for("Missing") == ()


class TestConflictSummary:
    """Tests for ConflictSummary."""

    def test_resolved_requires_all_affected(self):
        summary = ConflictSummary(
            "Billing", ["bill"], [_resolution("Support", 2, True), _resolution("Greeting", 1, False)]
        )
        assert not summary.is_resolved
        assert summary.conflicting_dialog_count == 1

    def test_resolved(self):
        summary = ConflictSummary("Billing", ["bill"], [_resolution("Support", 2, True)])
        assert summary.is_resolved
        assert summary.get("Support").change_count == 2
        assert summary.get("Missing") is None

    def test_to_dict(self):
        resolution = _resolution("Support", 1, False)
        resolution.utterances.append(UtteranceDisplay("hi", "100%", DisplayState.PENDING))
        data = ConflictSummary("Billing", ["bill"], [resolution]).to_dict()

        assert data["by_state"] == {"unresolved": 1}
        assert data["dialogs"][0]["utterances"] == [
            {"utterance": "hi", "percentage": "100%", "state": "pending", "detail": None}
        ]
