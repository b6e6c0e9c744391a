"""
Word-level comparison of two texts.

Texts are split on runs of whitespace and compared as sets of exact,
case-sensitive tokens. No normalization of case, accents or punctuation
is applied.
"""

import re
from typing import Union

from mirror_mode.models import ComparisonResult, ComparisonRow, ExtractedText

WHITESPACE = re.compile(r"\s+")

TextLike = Union[str, ExtractedText]


def tokenize(text: TextLike) -> list[str]:
    """Split text into words, dropping the empty fragments around whitespace."""
    return [token for token in WHITESPACE.split(str(text)) if token]


def word_set(text: TextLike) -> dict[str, None]:
    """
    Unique tokens of a text in first-seen order.

    A dict keyed by token serves as an insertion-ordered set.
    """
    return dict.fromkeys(tokenize(text))


def compare(reference: TextLike, candidate: TextLike) -> ComparisonResult:
    """
    Compare the words of a reference text against a candidate text.

    Rows come in a fixed order: every reference word in first-seen order,
    then the words only the candidate has, also in first-seen order.

    Args:
        reference: Baseline text (or ExtractedText)
        candidate: Text checked against the baseline

    Returns:
        ComparisonResult with one row per distinct word and the set sizes
    """
    reference_words = word_set(reference)
    candidate_words = word_set(candidate)

    rows = [
        ComparisonRow(word=word, in_reference=True, in_candidate=word in candidate_words)
        for word in reference_words
    ]
    rows.extend(
        ComparisonRow(word=word, in_reference=False, in_candidate=True)
        for word in candidate_words
        if word not in reference_words
    )

    return ComparisonResult(
        rows=tuple(rows),
        total_distinct_words=len(rows),
        reference_word_count=len(reference_words),
        candidate_word_count=len(candidate_words),
    )
