"""
Unit tests for the shared value types.
"""

from mirror_mode.models import ComparisonResult, ExtractedText, PreprocessedImage, TextStatus


def test_extracted_text_states():
    assert ExtractedText.no_input("spa").status is TextStatus.NO_INPUT
    assert ExtractedText.from_ocr(" \n").status is TextStatus.EMPTY
    assert ExtractedText.from_ocr(" hola ").status is TextStatus.TEXT
    assert str(ExtractedText.from_ocr(" hola ")) == "hola"


def test_empty_comparison_result():
    result = ComparisonResult()

    assert result.rows == ()
    assert result.common_word_count == 0
    assert result.is_identical


def test_preprocessed_placeholder():
    assert PreprocessedImage(image=None).is_empty
