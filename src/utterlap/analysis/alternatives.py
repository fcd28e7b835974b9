"""Colloquial spelling variants of Spanish utterances.

Users of a deployed chatbot rarely type carefully. Each rule below mimics
a common informal spelling so authors can check that a dialog's training
data still covers it.
"""

import re
import unicodedata
from typing import Callable

from utterlap.models.corpus import Utterance

_NON_ALNUM_RE = re.compile(r"[^a-z0-9\s]")
_QU_RE = re.compile(r"qu")
_PARA_RE = re.compile(r"\bpara\b")


def strip_accents(text: str) -> str:
    """Lower-case, remove diacritics and anything but letters, digits and spaces."""
    decomposed = unicodedata.normalize("NFD", text.lower())
    without_marks = "".join(c for c in decomposed if not unicodedata.combining(c))
    return _NON_ALNUM_RE.sub("", without_marks)


def _words(text: str) -> list[str]:
    return text.split(" ")


def _drop_final(letter: str) -> Callable[[str], str]:
    def rule(text: str) -> str:
        return " ".join(w[:-1] if w.endswith(letter) else w for w in _words(text))

    return rule


def _drop_initial_h(text: str) -> str:
    return " ".join(w[1:] if w.startswith("h") else w for w in _words(text))


def _qu_to_k(text: str) -> str:
    return _QU_RE.sub("k", text)


def _ll_to_y(text: str) -> str:
    return text.replace("ll", "y")


def _para_to_pa(text: str) -> str:
    return _PARA_RE.sub("pa", text)


# (applies, transform) pairs, in output order
_RULES: list[tuple[Callable[[str], bool], Callable[[str], str]]] = [
    (lambda t: any(w.endswith("s") for w in _words(t)), _drop_final("s")),
    (lambda t: any(w.endswith("r") for w in _words(t)), _drop_final("r")),
    (lambda t: any("qu" in w for w in _words(t)), _qu_to_k),
    (lambda t: t.startswith("h") or " h" in t, _drop_initial_h),
    (lambda t: "ll" in t, _ll_to_y),
    (lambda t: "para" in t, _para_to_pa),
]


def generate_alternatives(utterance: Utterance | str) -> list[str]:
    """Generate informal spelling variants of an utterance.

    Args:
        utterance: An utterance or its raw text.

    Returns:
        Distinct variants in rule order. The normalized text itself is
        only included when a rule happens to leave it unchanged.
    """
    text = utterance.text if isinstance(utterance, Utterance) else utterance
    normalized = strip_accents(text)

    alternatives: dict[str, None] = {}
    for applies, transform in _RULES:
        if applies(normalized):
            alternatives.setdefault(transform(normalized), None)
    return list(alternatives)
