"""Text analysis: normalization, keyword scoring and word statistics."""

from utterlap.analysis.alternatives import generate_alternatives
from utterlap.analysis.exclusive import ExclusiveWordsAnalyzer, KeywordSuggestion
from utterlap.analysis.matcher import KeywordMatcher, format_percentage, match_percentage
from utterlap.analysis.status import DialogStatusCalculator
from utterlap.analysis.text import normalize_text, tokenize

__all__ = [
    "normalize_text",
    "tokenize",
    "KeywordMatcher",
    "format_percentage",
    "match_percentage",
    "DialogStatusCalculator",
    "ExclusiveWordsAnalyzer",
    "KeywordSuggestion",
    "generate_alternatives",
]
