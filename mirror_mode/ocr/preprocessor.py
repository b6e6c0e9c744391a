"""
Image preprocessing module for OCR optimization.

Converts images to unweighted grayscale before text recognition:
every pixel's red, green and blue channels are replaced with their
arithmetic mean, rounded to the nearest integer. Alpha is preserved
and output dimensions always match the input.
"""

import logging
from io import BytesIO
from pathlib import Path
from typing import Optional

import cv2
import numpy as np
from PIL import Image

from mirror_mode.errors import DecodeError
from mirror_mode.models import ImageInput, PreprocessedImage

logger = logging.getLogger(__name__)

# Modes whose pixels are already a single gray level (plus optional alpha)
GRAY_MODES = ("L", "LA")
COLOR_MODES = ("RGB", "RGBA")
# Single-channel modes holding more than 8 bits per pixel
HIGH_DEPTH_MODES = ("I;16", "I;16L", "I;16B", "I;16N", "I", "F")


def average_channels(pixels: np.ndarray) -> np.ndarray:
    """
    Replace the first three channels of an HxWxC uint8 array with their mean.

    The mean is rounded to nearest as (r + g + b + 1) // 3; a sum divided
    by three never lands on .5, so there is no tie to break. Any fourth
    channel is copied through untouched.
    """
    if pixels.ndim != 3 or pixels.shape[2] not in (3, 4):
        raise ValueError(f"Expected an HxWx3 or HxWx4 array, got shape {pixels.shape}")

    wide = pixels.astype(np.uint16)
    mean = (wide[..., 0] + wide[..., 1] + wide[..., 2] + 1) // 3

    result = pixels.copy()
    result[..., :3] = mean.astype(np.uint8)[..., np.newaxis]
    return result


class ImagePreprocessor:
    """
    Preprocesses images for optimal OCR results.

    Accepts file paths, encoded bytes, PIL images and OpenCV arrays.
    The caller's input is never modified; a new image is always returned.
    """

    def preprocess(self, image_input: Optional[ImageInput]) -> PreprocessedImage:
        """
        Preprocess an image for OCR.

        Args:
            image_input: Image as file path, bytes, PIL Image or numpy array,
                or None when no image has been chosen yet

        Returns:
            PreprocessedImage holding the grayscale image, or an empty
            placeholder when image_input is None

        Raises:
            DecodeError: If the image data cannot be decoded
            TypeError: If image_input is of an unsupported type
        """
        if image_input is None:
            return PreprocessedImage(image=None)

        pil_image = self._load_image(image_input)
        original_size = pil_image.size
        pil_image = self._normalize_mode(pil_image)

        if pil_image.mode in GRAY_MODES:
            processed = pil_image.copy()
        else:
            processed = Image.fromarray(average_channels(np.array(pil_image)))

        logger.debug(
            f"Preprocessed {original_size[0]}x{original_size[1]} image "
            f"({pil_image.mode} -> {processed.mode})"
        )
        return PreprocessedImage(
            image=processed,
            original_size=original_size,
            mode=processed.mode,
        )

    def _load_image(self, image_input: ImageInput) -> Image.Image:
        """Load image from various input types."""
        if isinstance(image_input, np.ndarray):
            return self._from_array(image_input)

        if isinstance(image_input, Image.Image):
            source = "PIL image"
        elif isinstance(image_input, (bytes, bytearray)):
            source = f"{len(image_input)} bytes"
        elif isinstance(image_input, (str, Path)):
            source = str(image_input)
        else:
            raise TypeError(f"Unsupported image input type: {type(image_input)}")

        try:
            if isinstance(image_input, Image.Image):
                pil_image = image_input
            elif isinstance(image_input, (bytes, bytearray)):
                pil_image = Image.open(BytesIO(image_input))
            else:
                pil_image = Image.open(str(image_input))
            # Force load the image data (some formats are lazy-loaded)
            pil_image.load()
        except (OSError, SyntaxError, ValueError, Image.DecompressionBombError) as e:
            raise DecodeError(source, str(e)) from e

        return pil_image

    def _from_array(self, array: np.ndarray) -> Image.Image:
        """Wrap an OpenCV-style array (BGR/BGRA channel order) as a PIL image."""
        source = f"array {array.shape}"
        if array.dtype != np.uint8:
            raise DecodeError(source, f"unsupported dtype {array.dtype}, expected uint8")

        if array.ndim == 2:
            return Image.fromarray(array)
        if array.ndim == 3 and array.shape[2] == 3:
            return Image.fromarray(cv2.cvtColor(array, cv2.COLOR_BGR2RGB))
        if array.ndim == 3 and array.shape[2] == 4:
            return Image.fromarray(cv2.cvtColor(array, cv2.COLOR_BGRA2RGBA))

        raise DecodeError(source, "expected a 2-D, HxWx3 or HxWx4 array")

    def _normalize_mode(self, image: Image.Image) -> Image.Image:
        """Bring the image into L, LA, RGB or RGBA mode."""
        if image.mode in GRAY_MODES or image.mode in COLOR_MODES:
            return image

        if image.mode in HIGH_DEPTH_MODES:
            return self._to_8bit_gray(image)

        if image.mode == "PA" or (image.mode == "P" and "transparency" in image.info):
            return image.convert("RGBA")

        # Palette, CMYK, bilevel and other modes
        return image.convert("RGB")

    def _to_8bit_gray(self, image: Image.Image) -> Image.Image:
        """
        Scale a 16-bit (or 32-bit int / float) gray image down to mode L.

        Values are read on the 16-bit scale, clipped to 0..65535 and keep
        their top 8 bits.
        """
        pixels = np.clip(np.array(image), 0, 65535).astype(np.uint32)
        return Image.fromarray((pixels >> 8).astype(np.uint8))


def preprocess_image(image_input: Optional[ImageInput]) -> PreprocessedImage:
    """
    Convenience function to preprocess an image.

    Args:
        image_input: Image as file path, bytes, PIL Image or numpy array

    Returns:
        PreprocessedImage with the grayscale image
    """
    preprocessor = ImagePreprocessor()
    return preprocessor.preprocess(image_input)
