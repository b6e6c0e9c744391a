"""
Image-to-diff pipeline.

Reads the text of a reference image and a candidate image, then compares
their words. The two extractions are independent and run side by side
unless concurrency is switched off in the configuration.
"""

import logging
import time
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Optional

from mirror_mode.compare.differ import compare
from mirror_mode.config import get_config
from mirror_mode.models import ExtractedText, ImageInput, PipelineResult
from mirror_mode.ocr.extractor import OCRExtractor, ScanStatus

logger = logging.getLogger(__name__)


class ComparisonPipeline:
    """
    Compares the words found in two images.

    The extractor's ScanStatus stays raised for the whole run, covering
    both extractions, and drops only once both have finished.
    """

    def __init__(
        self,
        extractor: Optional[OCRExtractor] = None,
        concurrent: Optional[bool] = None,
        language: Optional[str] = None,
    ):
        """
        Initialize the pipeline.

        Args:
            extractor: OCR extractor used for both images
            concurrent: Run both extractions at once (from config if not provided)
            language: OCR language for both images (extractor default if not provided)
        """
        self.extractor = extractor or OCRExtractor()
        self.concurrent = get_config().concurrent_extraction if concurrent is None else concurrent
        self.language = language

    @property
    def status(self) -> ScanStatus:
        return self.extractor.status

    @property
    def is_scanning(self) -> bool:
        return self.status.is_scanning

    def compare_images(
        self,
        reference: Optional[ImageInput],
        candidate: Optional[ImageInput],
    ) -> PipelineResult:
        """
        Extract text from both images and compare their words.

        A missing image counts as an image without words. When an
        extraction fails the other one still runs to completion, then the
        first failure (reference before candidate) is raised.

        Raises:
            DecodeError: If either image cannot be decoded
            ExtractionError: If OCR fails on either image
        """
        start_time = time.time()

        with self.status.scanning():
            if self.concurrent:
                reference_text, candidate_text = self._extract_concurrently(reference, candidate)
            else:
                reference_text = self.extractor.extract(reference, self.language)
                candidate_text = self.extractor.extract(candidate, self.language)

        comparison = compare(reference_text, candidate_text)
        processing_time = time.time() - start_time

        logger.info(
            f"Compared images in {processing_time:.2f}s: "
            f"{comparison.total_distinct_words} distinct words "
            f"(reference {comparison.reference_word_count}, "
            f"candidate {comparison.candidate_word_count}, "
            f"common {comparison.common_word_count})"
        )

        return PipelineResult(
            reference=reference_text,
            candidate=candidate_text,
            comparison=comparison,
            processing_time_seconds=processing_time,
        )

    def compare_texts(self, reference_text: str, candidate_text: str) -> PipelineResult:
        """Compare two already-extracted texts without running OCR."""
        reference = ExtractedText.from_ocr(reference_text)
        candidate = ExtractedText.from_ocr(candidate_text)
        return PipelineResult(
            reference=reference,
            candidate=candidate,
            comparison=compare(reference, candidate),
        )

    def _extract_concurrently(
        self,
        reference: Optional[ImageInput],
        candidate: Optional[ImageInput],
    ) -> tuple[ExtractedText, ExtractedText]:
        """Run both extractions on worker threads and wait for both."""
        with ThreadPoolExecutor(max_workers=2, thread_name_prefix="ocr") as executor:
            futures: list[Future] = [
                executor.submit(self.extractor.extract, image, self.language)
                for image in (reference, candidate)
            ]
            # Wait for both before raising so no extraction is left running
            errors = [future.exception() for future in futures]

        for error in errors:
            if error is not None:
                raise error

        return futures[0].result(), futures[1].result()


def compare_images(
    reference: Optional[ImageInput],
    candidate: Optional[ImageInput],
    language: Optional[str] = None,
) -> PipelineResult:
    """
    Convenience function to compare two images with Tesseract.

    Args:
        reference: Baseline image
        candidate: Image checked against the baseline
        language: OCR language code

    Returns:
        PipelineResult with both texts and their comparison
    """
    pipeline = ComparisonPipeline(language=language)
    return pipeline.compare_images(reference, candidate)
