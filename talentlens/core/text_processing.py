from __future__ import annotations

import re
import unicodedata
from typing import Iterable, List, Optional, Set

# NOTE: This module is the shared text layer.
# Keywords, field matching and the filter stages all tokenize through it.

_PUNCTUATION_RE = re.compile(r"[.,;:!?()\"']")

# Tokens shorter than this are dropped.
MIN_TOKEN_LENGTH = 4

# Fixed list. Keep stable; scores depend on it.
_STOPWORDS = {
    "and", "the", "to", "of", "in", "on", "with", "for",
    "a", "an", "our", "we", "is", "are",
}


def clean_text(text: Optional[str]) -> str:
    """
    Deterministic pre-tokenization cleanup.

    - NFKC unicode normalization (smart quotes, full-width chars)
    - non-breaking spaces become plain spaces
    - whitespace collapsed
    """
    if not text:
        return ""
    t = unicodedata.normalize("NFKC", text)
    t = t.replace("\u00a0", " ")
    return " ".join(t.split())


def normalize(text: Optional[str]) -> List[str]:
    """
    Ordered token stream: lower-cased, punctuation stripped, short words and
    stop-words removed. Never raises; empty input yields an empty list.
    """
    cleaned = clean_text(text).lower()
    if not cleaned:
        return []
    out: List[str] = []
    for raw in cleaned.split():
        tok = _PUNCTUATION_RE.sub("", raw)
        if len(tok) < MIN_TOKEN_LENGTH:
            continue
        if tok in _STOPWORDS:
            continue
        out.append(tok)
    return out


def significant_words(text: Optional[str]) -> Set[str]:
    """Token set derived from normalize()."""
    return set(normalize(text))


def words_overlap(a: str, b: str) -> bool:
    # "developer" vs "developers": containment either way counts as shared
    return a in b or b in a


def shared_words(requested: Iterable[str], available: Iterable[str]) -> List[str]:
    """Requested words (in order) that overlap any available word."""
    pool = list(available)
    return [w for w in requested if any(words_overlap(w, p) for p in pool)]


def fold(text: Optional[str]) -> str:
    """Case-folded, whitespace-collapsed form used for phrase comparisons."""
    return clean_text(text).lower()
