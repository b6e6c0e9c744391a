"""
Unit tests for the image-to-diff pipeline.
"""

import threading

import pytest

from mirror_mode.compare.pipeline import ComparisonPipeline
from mirror_mode.errors import DecodeError, ExtractionError
from mirror_mode.models import TextStatus
from mirror_mode.ocr.extractor import OCRExtractor

REFERENCE_WIDTH = 4
CANDIDATE_WIDTH = 6


@pytest.fixture
def images(image_factory):
    return image_factory(width=REFERENCE_WIDTH), image_factory(width=CANDIDATE_WIDTH)


@pytest.fixture
def scenario_engine(engine_factory):
    return engine_factory(texts={
        REFERENCE_WIDTH: "cat dog bird\n",
        CANDIDATE_WIDTH: "  dog bird fish",
    })


def rows_of(result):
    return [(row.word, row.in_reference, row.in_candidate) for row in result.comparison.rows]


class TestComparisonPipeline:
    """Test the ComparisonPipeline class."""

    @pytest.mark.parametrize("concurrent", [True, False])
    def test_compare_images(self, scenario_engine, images, concurrent):
        pipeline = ComparisonPipeline(
            extractor=OCRExtractor(engine=scenario_engine, language="spa"),
            concurrent=concurrent,
        )

        result = pipeline.compare_images(*images)

        assert result.reference.text == "cat dog bird"
        assert result.candidate.text == "dog bird fish"
        assert rows_of(result) == [
            ("cat", True, False),
            ("dog", True, True),
            ("bird", True, True),
            ("fish", False, True),
        ]
        assert len(scenario_engine.calls) == 2
        assert result.processing_time_seconds >= 0
        assert not pipeline.is_scanning

    def test_language_passed_to_both_extractions(self, scenario_engine, images):
        pipeline = ComparisonPipeline(
            extractor=OCRExtractor(engine=scenario_engine, language="spa"),
            language="eng",
        )

        pipeline.compare_images(*images)

        assert [language for _, language in scenario_engine.calls] == ["eng", "eng"]

    def test_missing_image_compares_as_empty(self, scenario_engine, images):
        pipeline = ComparisonPipeline(extractor=OCRExtractor(engine=scenario_engine, language="spa"))

        result = pipeline.compare_images(images[0], None)

        assert result.candidate.status is TextStatus.NO_INPUT
        assert result.comparison.reference_word_count == 3
        assert result.comparison.candidate_word_count == 0
        assert len(scenario_engine.calls) == 1

    def test_extractions_run_concurrently(self, engine_factory, images):
        barrier = threading.Barrier(2, timeout=5)
        seen_scanning = []

        class RendezvousEngine(engine_factory):
            def recognize(self, image, language):
                # Both extractions must be in flight to pass the barrier
                barrier.wait()
                seen_scanning.append(pipeline.is_scanning)
                return "palabra"

        pipeline = ComparisonPipeline(
            extractor=OCRExtractor(engine=RendezvousEngine(), language="spa"),
            concurrent=True,
        )

        result = pipeline.compare_images(*images)

        assert result.comparison.total_distinct_words == 1
        assert seen_scanning == [True, True]

    def test_status_covers_whole_run(self, scenario_engine, images):
        pipeline = ComparisonPipeline(extractor=OCRExtractor(engine=scenario_engine, language="spa"))
        events = []
        pipeline.status.add_listener(events.append)

        pipeline.compare_images(*images)

        assert events == [True, False]

    @pytest.mark.parametrize("concurrent", [True, False])
    def test_extraction_failure_propagates(self, engine_factory, images, concurrent):
        finished = []

        class FlakyEngine(engine_factory):
            def recognize(self, image, language):
                if image.size[0] == REFERENCE_WIDTH:
                    raise RuntimeError("engine fault")
                finished.append(image.size[0])
                return "ok"

        pipeline = ComparisonPipeline(
            extractor=OCRExtractor(engine=FlakyEngine(), language="spa"),
            concurrent=concurrent,
        )

        with pytest.raises(ExtractionError, match="engine fault"):
            pipeline.compare_images(*images)

        assert not pipeline.is_scanning
        if concurrent:
            # The other extraction still ran to completion
            assert finished == [CANDIDATE_WIDTH]

    def test_reference_failure_reported_first(self, fake_engine, image_factory):
        pipeline = ComparisonPipeline(
            extractor=OCRExtractor(engine=fake_engine, language="spa"),
            concurrent=True,
        )

        with pytest.raises(DecodeError) as exc_info:
            pipeline.compare_images(b"bad reference", b"bad candidate!")

        assert "13 bytes" in str(exc_info.value)
        assert not pipeline.is_scanning

    def test_concurrency_default_from_config(self, fake_engine, monkeypatch):
        monkeypatch.setenv("MIRROR_CONCURRENT_EXTRACTION", "false")

        pipeline = ComparisonPipeline(extractor=OCRExtractor(engine=fake_engine, language="spa"))

        assert pipeline.concurrent is False

    def test_compare_texts(self, fake_engine):
        pipeline = ComparisonPipeline(extractor=OCRExtractor(engine=fake_engine, language="spa"))

        result = pipeline.compare_texts("one two", "one two")

        assert result.comparison.is_identical
        assert result.comparison.total_distinct_words == 2
        assert fake_engine.calls == []
