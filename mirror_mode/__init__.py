"""
Mirror Mode - OCR-based word comparison of two images.

This package provides functionality for:
- Grayscale preprocessing of images for OCR
- Text extraction with Tesseract
- Word-level comparison of a reference image against a candidate image
- Excel export of comparison results
"""

__version__ = "0.1.0"
__author__ = "QA Lab"
