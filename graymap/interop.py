"""Conversions between PixelBuffer and numpy arrays / Pillow images."""

from __future__ import annotations

import numpy as np
from PIL import Image

from .buffer import PixelBuffer
from .instrumentation import Instrumentation


def to_array(img: PixelBuffer) -> np.ndarray:
    """Return a (height, width) uint8 copy of img's samples."""
    return img.to_array()


def from_array(
    array: np.ndarray,
    maxval: int | None = None,
    instrumentation: Instrumentation | None = None,
) -> PixelBuffer:
    """Build a PixelBuffer from a 2-D integer array with samples in [0, 255]."""
    return PixelBuffer.from_array(array, maxval, instrumentation=instrumentation)


def to_pil_image(img: PixelBuffer) -> Image.Image:
    """Convert to a Pillow image in mode "L". maxval is not carried over."""
    return Image.fromarray(img.to_array())


def from_pil_image(
    image: Image.Image,
    maxval: int | None = None,
    instrumentation: Instrumentation | None = None,
) -> PixelBuffer:
    """Build a PixelBuffer from a Pillow image in mode "L".

    Raises:
        ValueError: If the image is not single-channel 8-bit grayscale.
    """
    if image.mode != "L":
        raise ValueError(f"Expected an 8-bit grayscale image (mode 'L'), got mode {image.mode!r}")
    return PixelBuffer.from_array(
        np.asarray(image, dtype=np.uint8), maxval, instrumentation=instrumentation
    )
