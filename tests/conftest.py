"""
Pytest configuration and shared fixtures.

Images are generated in memory and OCR is replaced by a fake engine, so
the suite does not need a Tesseract installation.
"""

import sys
import threading
from io import BytesIO
from pathlib import Path

import numpy as np
import pytest
from PIL import Image

sys.path.insert(0, str(Path(__file__).parent.parent))

from mirror_mode.config import reset_config
from mirror_mode.ocr.engine import OCREngine


class FakeEngine(OCREngine):
    """OCR engine returning canned text keyed by image width."""

    def __init__(self, texts=None, default="", error=None, delay=0.0):
        self.texts = texts or {}
        self.default = default
        self.error = error
        self.delay = delay
        self.calls = []
        self._lock = threading.Lock()

    def recognize(self, image, language):
        with self._lock:
            self.calls.append((image, language))
        if self.delay:
            threading.Event().wait(self.delay)
        if self.error is not None:
            raise self.error
        return self.texts.get(image.size[0], self.default)

    def is_available(self):
        return True

    def get_engine_name(self):
        return "Fake"


def make_image(width=4, height=3, color=(10, 20, 31), mode="RGB"):
    """Create a solid-color PIL image."""
    return Image.new(mode, (width, height), color)


def encode(image, fmt="PNG"):
    """Encode a PIL image to bytes."""
    buffer = BytesIO()
    image.save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture(autouse=True)
def fresh_config(monkeypatch):
    """Rebuild global configuration for every test without a real Tesseract lookup."""
    monkeypatch.setattr("mirror_mode.config.TesseractConfig.find_tesseract", staticmethod(lambda: None))
    reset_config()
    yield
    reset_config()


@pytest.fixture
def fake_engine():
    return FakeEngine()


@pytest.fixture
def rgb_image():
    return make_image()


@pytest.fixture
def png_bytes(rgb_image):
    return encode(rgb_image)


@pytest.fixture
def random_rgba():
    """A small RGBA array with varied pixel values."""
    rng = np.random.default_rng(1234)
    return rng.integers(0, 256, size=(5, 7, 4), dtype=np.uint8)


@pytest.fixture
def engine_factory():
    """Build FakeEngine instances with custom behaviour."""
    return FakeEngine


@pytest.fixture
def image_factory():
    return make_image


@pytest.fixture
def encoder():
    return encode
