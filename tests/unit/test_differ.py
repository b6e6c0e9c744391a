"""
Unit tests for tokenization and word comparison.
"""

import pytest

from mirror_mode.compare.differ import compare, tokenize, word_set
from mirror_mode.models import ComparisonRow, ExtractedText


def as_tuples(result):
    return [(row.word, row.in_reference, row.in_candidate) for row in result.rows]


class TestTokenize:
    """Test whitespace tokenization."""

    @pytest.mark.parametrize("text,expected", [
        ("", []),
        ("   \t\n ", []),
        ("uno", ["uno"]),
        ("  uno  dos\n\ttres  ", ["uno", "dos", "tres"]),
        ("a b", ["a", "b"]),
    ])
    def test_tokens(self, text, expected):
        assert tokenize(text) == expected

    def test_no_normalization(self):
        assert tokenize("Hola hola HOLA, café") == ["Hola", "hola", "HOLA,", "café"]

    def test_word_set_keeps_first_seen_order(self):
        assert list(word_set("b a b c a")) == ["b", "a", "c"]

    def test_accepts_extracted_text(self):
        assert tokenize(ExtractedText.from_ocr("  x y  ")) == ["x", "y"]


class TestCompare:
    """Test the comparison rows and counts."""

    def test_overlapping_texts(self):
        result = compare("cat dog bird", "dog bird fish")

        assert as_tuples(result) == [
            ("cat", True, False),
            ("dog", True, True),
            ("bird", True, True),
            ("fish", False, True),
        ]
        assert result.total_distinct_words == 4
        assert result.reference_word_count == 3
        assert result.candidate_word_count == 3

    def test_both_empty(self):
        result = compare("", "")

        assert result.rows == ()
        assert result.total_distinct_words == 0
        assert result.reference_word_count == 0
        assert result.candidate_word_count == 0

    def test_repeated_reference_word(self):
        result = compare("a a a", "")

        assert as_tuples(result) == [("a", True, False)]
        assert result.total_distinct_words == 1
        assert result.reference_word_count == 1
        assert result.candidate_word_count == 0

    def test_identical_texts(self):
        result = compare("one two", "one two")

        assert as_tuples(result) == [("one", True, True), ("two", True, True)]
        assert result.total_distinct_words == 2
        assert result.reference_word_count == 2
        assert result.candidate_word_count == 2
        assert result.is_identical

    def test_candidate_only_words_follow_candidate_order(self):
        result = compare("x", "z y x z")

        assert [row.word for row in result.rows] == ["x", "z", "y"]
        assert result.candidate_only == ["z", "y"]
        assert result.reference_only == []

    def test_case_sensitive(self):
        result = compare("Hola", "hola")

        assert as_tuples(result) == [("Hola", True, False), ("hola", False, True)]

    @pytest.mark.parametrize("reference,candidate", [
        ("cat dog bird", "dog bird fish"),
        ("a b c d", "e f"),
        ("same same", "same"),
        ("", "only candidate words here"),
        ("la casa  roja\n la casa", "casa azul\tla"),
    ])
    def test_completeness_and_counts(self, reference, candidate):
        result = compare(reference, candidate)
        ref_words = set(tokenize(reference))
        cand_words = set(tokenize(candidate))
        words = [row.word for row in result.rows]

        assert sorted(words) == sorted(ref_words | cand_words)
        assert len(words) == len(set(words))
        assert result.total_distinct_words == len(result.rows)
        assert result.reference_word_count == len(ref_words)
        assert result.candidate_word_count == len(cand_words)
        assert result.common_word_count == len(ref_words & cand_words)
        for row in result.rows:
            assert row.in_reference == (row.word in ref_words)
            assert row.in_candidate == (row.word in cand_words)

    def test_to_dict(self):
        data = compare("a b", "b c").to_dict()

        assert data["rows"][0] == {"word": "a", "in_reference": True, "in_candidate": False}
        assert data["total_distinct_words"] == 3
        assert data["common_word_count"] == 1


class TestComparisonRow:
    """Test ComparisonRow invariants."""

    def test_row_must_be_on_a_side(self):
        with pytest.raises(ValueError):
            ComparisonRow(word="ghost", in_reference=False, in_candidate=False)

    def test_rows_are_immutable(self):
        row = ComparisonRow(word="a", in_reference=True, in_candidate=False)

        with pytest.raises(AttributeError):
            row.in_candidate = True
