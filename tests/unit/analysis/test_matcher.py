"""Tests for keyword match scoring."""

import pytest

from utterlap.analysis.matcher import (
    KeywordMatcher,
    format_percentage,
    match_percentage,
    unique_keywords,
)


class TestFormatPercentage:
    """Tests for format_percentage."""

    @pytest.mark.parametrize(
        "matched,total,expected",
        [
            (0, 2, "0%"),
            (1, 2, "50%"),
            (2, 2, "100%"),
            (1, 3, "33%"),
            (2, 3, "67%"),
            (1, 8, "13%"),
            (5, 8, "63%"),
        ],
    )
    def test_rounds_half_up(self, matched, total, expected):
        assert format_percentage(matched, total) == expected

    def test_empty_set_is_zero(self):
        assert format_percentage(0, 0) == "0%"


class TestUniqueKeywords:
    """Tests for unique_keywords."""

    def test_lowercases_and_dedupes(self):
        assert unique_keywords(["Bill", "invoice", "bill"]) == ("bill", "invoice")

    def test_preserves_order(self):
        assert unique_keywords(["z", "a", "m"]) == ("z", "a", "m")


class TestKeywordMatcher:
    """Tests for KeywordMatcher."""

    def test_empty_keywords_always_zero(self):
        matcher = KeywordMatcher([])
        assert matcher.score("reset my password") == "0%"
        assert matcher.score("") == "0%"

    def test_full_match(self):
        matcher = KeywordMatcher(["reset", "password"])
        assert matcher.score("I want to reset my password please") == "100%"

    def test_partial_match(self):
        matcher = KeywordMatcher(["bill", "invoice"])
        assert matcher.score("Where is my bill?") == "50%"

    def test_repeated_token_counts_once(self):
        matcher = KeywordMatcher(["bill", "invoice"])
        assert matcher.score("bill bill bill") == "50%"

    def test_whole_token_only(self):
        matcher = KeywordMatcher(["bill"])
        assert matcher.score("billing question") == "0%"

    def test_case_and_punctuation_insensitive(self):
        matcher = KeywordMatcher(["refund"])
        assert matcher.score("REFUND!") == "100%"

    def test_matched_keywords_in_keyword_order(self):
        matcher = KeywordMatcher(["invoice", "bill", "refund"])
        assert matcher.matched_keywords("my bill and my invoice") == ["invoice", "bill"]

    def test_accepts_tokens(self):
        matcher = KeywordMatcher(["pay"])
        assert matcher.score(["i", "pay"]) == "100%"


def test_match_percentage():
    assert match_percentage("reset password", ["reset", "login"]) == "50%"
    assert match_percentage("anything", []) == "0%"
