"""
OCR extraction module.

Runs the preprocessor and an OCR engine on one image and returns the
trimmed text. While any extraction is in flight the shared ScanStatus
reports that scanning is in progress.
"""

import logging
import threading
import time
from contextlib import contextmanager
from typing import Callable, Iterator, Optional

from mirror_mode.config import get_config
from mirror_mode.errors import ExtractionError
from mirror_mode.models import ExtractedText, ImageInput
from mirror_mode.ocr.engine import OCREngine, TesseractEngine
from mirror_mode.ocr.preprocessor import ImagePreprocessor

logger = logging.getLogger(__name__)

ScanListener = Callable[[bool], None]


class ScanStatus:
    """
    Thread-safe "scanning in progress" flag.

    Backed by a counter rather than a boolean: every extraction increments
    it on entry and decrements it on exit, and the flag is true while the
    counter is above zero. Overlapping extractions therefore keep the flag
    raised until the last one finishes.

    Listeners are called with True when the status goes from idle to
    scanning and with False when it returns to idle.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._active = 0
        self._listeners: list[ScanListener] = []

    @property
    def is_scanning(self) -> bool:
        with self._lock:
            return self._active > 0

    @property
    def active_count(self) -> int:
        with self._lock:
            return self._active

    def add_listener(self, listener: ScanListener) -> None:
        with self._lock:
            self._listeners.append(listener)

    def remove_listener(self, listener: ScanListener) -> None:
        with self._lock:
            self._listeners.remove(listener)

    def begin(self) -> None:
        with self._lock:
            self._active += 1
            started = self._active == 1
            listeners = list(self._listeners)
        if started:
            self._notify(listeners, True)

    def end(self) -> None:
        with self._lock:
            if self._active == 0:
                raise RuntimeError("ScanStatus.end() called without a matching begin()")
            self._active -= 1
            finished = self._active == 0
            listeners = list(self._listeners)
        if finished:
            self._notify(listeners, False)

    @contextmanager
    def scanning(self) -> Iterator["ScanStatus"]:
        """Hold the status raised for the duration of a with-block."""
        self.begin()
        try:
            yield self
        finally:
            self.end()

    def _notify(self, listeners: list[ScanListener], scanning: bool) -> None:
        for listener in listeners:
            listener(scanning)


class OCRExtractor:
    """
    Extracts text from a single image.

    Supports:
    - Missing input (returns empty text without touching OCR)
    - Grayscale preprocessing
    - Any OCREngine implementation (Tesseract by default)
    """

    def __init__(
        self,
        engine: Optional[OCREngine] = None,
        preprocessor: Optional[ImagePreprocessor] = None,
        status: Optional[ScanStatus] = None,
        language: Optional[str] = None,
    ):
        """
        Initialize the OCR extractor.

        Args:
            engine: OCR engine to invoke (Tesseract if not provided)
            preprocessor: Image preprocessor (grayscale by default)
            status: Scan status to report progress on; share one instance
                between extractors that feed the same display
            language: Default OCR language code (from config if not provided)
        """
        self.engine = engine or TesseractEngine()
        self.preprocessor = preprocessor or ImagePreprocessor()
        self.status = status or ScanStatus()
        self.language = language or get_config().language

    @property
    def is_scanning(self) -> bool:
        return self.status.is_scanning

    def extract(self, image: Optional[ImageInput], language: Optional[str] = None) -> ExtractedText:
        """
        Extract text from an image.

        Args:
            image: Image to read, or None if no image has been supplied
            language: OCR language code (defaults to the extractor's language)

        Returns:
            ExtractedText whose status tells apart a missing image, an
            image with no recognizable text, and recognized text

        Raises:
            DecodeError: If the image cannot be decoded
            ExtractionError: If the OCR engine fails
        """
        language = language or self.language

        if image is None:
            return ExtractedText.no_input(language)

        with self.status.scanning():
            start_time = time.time()
            preprocessed = self.preprocessor.preprocess(image)

            try:
                raw_text = self.engine.recognize(preprocessed.image, language)
            except ExtractionError:
                raise
            except Exception as e:
                logger.exception(f"{self.engine.get_engine_name()} OCR failed")
                raise ExtractionError(
                    f"{self.engine.get_engine_name()} could not read the image", cause=e
                ) from e

            result = ExtractedText.from_ocr(raw_text or "", language)
            logger.info(
                f"OCR finished in {time.time() - start_time:.2f}s "
                f"({len(result.text)} chars, lang={language})"
            )
            if not result.text:
                logger.warning("OCR produced empty result - image may be blank or unreadable")

            return result

    def extract_text(self, image: Optional[ImageInput], language: Optional[str] = None) -> str:
        """
        Extract text from an image as a plain string.

        Returns "" both when no image is supplied and when nothing was
        recognized; use extract() to tell those cases apart.
        """
        return self.extract(image, language).text


def extract_text(image: Optional[ImageInput], language: Optional[str] = None) -> str:
    """
    Convenience function to extract text from an image with Tesseract.

    Args:
        image: Image as file path, bytes, PIL Image or numpy array
        language: OCR language code

    Returns:
        Trimmed recognized text
    """
    extractor = OCRExtractor(language=language)
    return extractor.extract_text(image)
