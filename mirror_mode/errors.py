"""Exceptions raised by the image-to-diff pipeline."""

from typing import Optional


class MirrorModeError(Exception):
    """Base exception for Mirror Mode errors."""
    pass


class DecodeError(MirrorModeError):
    """Image data could not be interpreted."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Could not decode image ({source}): {reason}")


class ExtractionError(MirrorModeError):
    """OCR invocation failed for an image."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.cause = cause
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
