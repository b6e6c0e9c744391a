"""OCR module for image preprocessing and text extraction."""

from .engine import OCREngine, TesseractEngine
from .extractor import OCRExtractor, ScanStatus
from .preprocessor import ImagePreprocessor

__all__ = ["ImagePreprocessor", "OCREngine", "OCRExtractor", "ScanStatus", "TesseractEngine"]
