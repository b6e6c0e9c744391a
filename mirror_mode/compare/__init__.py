"""Comparison module for word-level diffs of extracted text."""

from .differ import compare, tokenize, word_set
from .pipeline import ComparisonPipeline

__all__ = ["ComparisonPipeline", "compare", "tokenize", "word_set"]
