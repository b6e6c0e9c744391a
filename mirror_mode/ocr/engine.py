"""
OCR engines.

An engine turns one preprocessed image into text for a given language.
The extractor only depends on the OCREngine interface, so Tesseract can
be swapped for another recognizer (or a fake one in tests).
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

import numpy as np
import pytesseract
from PIL import Image

from mirror_mode.config import TesseractConfig, get_config

logger = logging.getLogger(__name__)


class OCREngine(ABC):
    """Abstract base class for OCR engines."""

    @abstractmethod
    def recognize(self, image: Image.Image, language: str) -> str:
        """Recognize the text in an image."""
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the engine can be used on this system."""
        pass

    @abstractmethod
    def get_engine_name(self) -> str:
        """Get the engine name."""
        pass


class TesseractEngine(OCREngine):
    """OCR engine backed by the Tesseract binary via pytesseract."""

    def __init__(self, config: Optional[TesseractConfig] = None):
        """
        Initialize the Tesseract engine.

        Args:
            config: Tesseract configuration (uses default if not provided)
        """
        self.config = config or get_config().tesseract

        # Set Tesseract command path if configured
        if self.config.tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = self.config.tesseract_cmd

    def get_engine_name(self) -> str:
        return "Tesseract"

    def is_available(self) -> bool:
        try:
            pytesseract.get_tesseract_version()
            return True
        except pytesseract.TesseractNotFoundError as e:
            logger.debug(f"Tesseract not available: {e}")
            return False

    def recognize(self, image: Image.Image, language: str) -> str:
        """
        Run Tesseract on an image.

        Raises whatever pytesseract raises: TesseractNotFoundError,
        TesseractError, or RuntimeError when the configured timeout expires.
        """
        # pytesseract works best with PIL Images in RGB, L, or 1 mode
        if image.mode in ("RGBA", "LA"):
            # Transparent areas read as white paper, not as black
            background = Image.new("RGBA", image.size, "white")
            image = Image.alpha_composite(background, image.convert("RGBA")).convert("RGB")
        elif image.mode not in ("RGB", "L", "1"):
            image = image.convert("RGB")

        img_array = np.array(image)
        logger.debug(f"Image array shape: {img_array.shape}, dtype: {img_array.dtype}")

        return pytesseract.image_to_string(
            img_array,
            lang=language,
            config=self.config.get_config_string(),
            timeout=self.config.timeout_seconds,
        )
