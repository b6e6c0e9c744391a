"""
Value types shared by the preprocessing, extraction and comparison steps.

All types are frozen dataclasses: a comparison run creates fresh instances
and nothing is mutated after construction, so two extraction tasks running
side by side never share mutable state.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Union

import numpy as np
from PIL import Image

# Anything the preprocessor knows how to decode
ImageInput = Union[str, Path, bytes, Image.Image, np.ndarray]


@dataclass(frozen=True)
class PreprocessedImage:
    """Grayscale image derived from one input, ready for OCR."""
    image: Optional[Image.Image]
    original_size: tuple[int, int] = (0, 0)
    mode: str = ""

    @property
    def is_empty(self) -> bool:
        """True for the placeholder produced when no input was supplied."""
        return self.image is None

    @property
    def size(self) -> tuple[int, int]:
        return self.image.size if self.image is not None else (0, 0)


class TextStatus(Enum):
    """Why an ExtractedText holds the text it holds."""
    NO_INPUT = "no_input"  # No image was supplied
    EMPTY = "empty"        # OCR ran but recognized nothing
    TEXT = "text"          # OCR recognized some text


@dataclass(frozen=True)
class ExtractedText:
    """Trimmed OCR output for one source image."""
    text: str
    status: TextStatus
    language: str = ""

    @classmethod
    def no_input(cls, language: str = "") -> "ExtractedText":
        return cls(text="", status=TextStatus.NO_INPUT, language=language)

    @classmethod
    def from_ocr(cls, raw_text: str, language: str = "") -> "ExtractedText":
        text = raw_text.strip()
        status = TextStatus.TEXT if text else TextStatus.EMPTY
        return cls(text=text, status=status, language=language)

    @property
    def has_input(self) -> bool:
        return self.status is not TextStatus.NO_INPUT

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class ComparisonRow:
    """One distinct word and the sides it occurs on."""
    word: str
    in_reference: bool
    in_candidate: bool

    def __post_init__(self):
        if not (self.in_reference or self.in_candidate):
            raise ValueError(f"Word {self.word!r} must occur on at least one side")

    @property
    def in_both(self) -> bool:
        return self.in_reference and self.in_candidate

    def to_dict(self) -> dict[str, Any]:
        return {
            "word": self.word,
            "in_reference": self.in_reference,
            "in_candidate": self.in_candidate,
        }


@dataclass(frozen=True)
class ComparisonResult:
    """
    Word-level comparison of a reference text against a candidate text.

    Rows list every word of the reference (first-seen order) followed by
    the words only the candidate contains (first-seen order).
    """
    rows: tuple[ComparisonRow, ...] = ()
    total_distinct_words: int = 0
    reference_word_count: int = 0
    candidate_word_count: int = 0

    @property
    def common_word_count(self) -> int:
        """Words present on both sides (inclusion-exclusion)."""
        return self.reference_word_count + self.candidate_word_count - self.total_distinct_words

    @property
    def reference_only(self) -> list[str]:
        return [row.word for row in self.rows if not row.in_candidate]

    @property
    def candidate_only(self) -> list[str]:
        return [row.word for row in self.rows if not row.in_reference]

    @property
    def is_identical(self) -> bool:
        """True when both sides have exactly the same word set."""
        return all(row.in_both for row in self.rows)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary format for serialization."""
        return {
            "rows": [row.to_dict() for row in self.rows],
            "total_distinct_words": self.total_distinct_words,
            "reference_word_count": self.reference_word_count,
            "candidate_word_count": self.candidate_word_count,
            "common_word_count": self.common_word_count,
        }


@dataclass(frozen=True)
class PipelineResult:
    """Everything produced by one image-to-diff run."""
    reference: ExtractedText
    candidate: ExtractedText
    comparison: ComparisonResult
    processing_time_seconds: float = 0.0
