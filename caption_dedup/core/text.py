"""Text normalization and similarity scoring for caption comparison.

WHY: Auto-generated captions repeat the same spoken content with small
differences: casing, punctuation, a "[Music]" marker, one extra word at
the end. Deciding whether two captions carry the same content needs a
canonical comparison form and a few cheap similarity measures.

HOW: normalize_text() produces the comparison form. Three measures build
on it: containment, edit-distance similarity (Levenshtein relative to the
longer string), and word overlap over "significant" tokens.
are_similar_captions() ORs them together in a fixed order.

RULES:
- Normalization: lowercase, noise markers removed, non-word characters
  become spaces, whitespace collapsed and trimmed
- Normalized text is only used for comparison, never written to output
- Levenshtein uses unit cost for insert, delete and substitute
- Word overlap counts tokens of the first text that appear in the second
"""

from __future__ import annotations

import re
from typing import List

from rapidfuzz.distance import Levenshtein

# Bracketed non-speech markers inserted by auto-captioning.
_NOISE_MARKER_RE = re.compile(
    r"\[\s*(?:music|m[uú]sica|musique|musik|applause|aplausos|laughter|risos|risas)\s*\]",
    re.IGNORECASE,
)

_NON_WORD_RE = re.compile(r"[^\w\s]")
_WHITESPACE_RE = re.compile(r"\s+")

# Word-overlap fallback in the similarity test.
_WORD_MIN_LENGTH = 2
_WORD_OVERLAP_THRESHOLD = 0.6


def normalize_text(text: str) -> str:
    """Return the comparison form of a caption's text.

    >>> normalize_text("[Music] Hello,  WORLD!")
    'hello world'
    """
    lowered = text.lower()
    lowered = _NOISE_MARKER_RE.sub("", lowered)
    lowered = _NON_WORD_RE.sub(" ", lowered)
    return _WHITESPACE_RE.sub(" ", lowered).strip()


def significant_words(text: str, min_length: int) -> List[str]:
    """Whitespace tokens strictly longer than ``min_length`` characters."""
    return [w for w in text.split() if len(w) > min_length]


def levenshtein(a: str, b: str) -> int:
    """Classic unit-cost edit distance between two strings."""
    return Levenshtein.distance(a, b)


def edit_similarity(a: str, b: str) -> float:
    """Similarity score in [0, 1] relative to the longer string.

    RULES:
    - Equal strings (including two empty strings) score 1.0
    - If the shorter string is a substring of the longer one, the score is
      len(shorter) / len(longer)
    - Otherwise (len(longer) - levenshtein) / len(longer)
    """
    if a == b:
        return 1.0

    longer, shorter = (a, b) if len(a) > len(b) else (b, a)

    if shorter in longer:
        return len(shorter) / len(longer)

    return (len(longer) - levenshtein(a, b)) / len(longer)


def word_overlap_ratio(words_a: List[str], words_b: List[str], denominator: int) -> float:
    """Count words of ``words_a`` present in ``words_b`` over ``denominator``."""
    if denominator <= 0:
        return 0.0
    lookup = set(words_b)
    common = [w for w in words_a if w in lookup]
    return len(common) / denominator


def are_similar_captions(
    text_a: str,
    text_b: str,
    similarity_threshold: float,
    accept_containment: bool = True,
) -> bool:
    """Decide whether two normalized caption texts carry the same content.

    WHY: This is the grouping predicate. Rolling auto-captions produce exact
    repeats, growing prefixes, one-character ASR corrections and reordered
    fragments; each rule below catches one of those shapes.

    HOW: Four rules, OR-ed and evaluated in order, stopping at the first
    match:
      1. exact equality
      2. containment in either direction (when accept_containment)
      3. edit_similarity >= similarity_threshold
      4. word overlap: tokens longer than 2 chars, shared / max(len) >= 0.6

    RULES:
    - Both inputs must already be normalized
    - An empty token list on either side fails rule 4
    """
    if text_a == text_b:
        return True

    if accept_containment and (text_b in text_a or text_a in text_b):
        return True

    if edit_similarity(text_a, text_b) >= similarity_threshold:
        return True

    words_a = significant_words(text_a, _WORD_MIN_LENGTH)
    words_b = significant_words(text_b, _WORD_MIN_LENGTH)
    if not words_a or not words_b:
        return False

    ratio = word_overlap_ratio(words_a, words_b, max(len(words_a), len(words_b)))
    return ratio >= _WORD_OVERLAP_THRESHOLD
