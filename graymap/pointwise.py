"""
Per-pixel transformations.

All functions modify the buffer in place and keep its dimensions and maxval.
"""

from __future__ import annotations

import math
from numbers import Real

import numpy as np

from .buffer import PixelBuffer
from .config import PIX_MAX


def round_half_up(values: np.ndarray) -> np.ndarray:
    """Round to the nearest integer, halves rounded up."""
    return np.floor(values + 0.5)


def negate(img: PixelBuffer) -> None:
    """Replace every sample s with 255 - s.

    The fixed format ceiling is used, not img.maxval, so negate is its own
    inverse for any buffer.
    """
    samples = img.to_array()
    img.write_rect(0, 0, PIX_MAX - samples)


def threshold(img: PixelBuffer, level: int) -> None:
    """Binarize: samples below level become 0, all others become maxval."""
    samples = img.to_array()
    below = samples.astype(np.int32) < level
    img.write_rect(0, 0, np.where(below, 0, img.maxval).astype(np.uint8))


def brighten(img: PixelBuffer, factor: float) -> None:
    """Multiply every sample by factor, rounding and saturating at maxval.

    Raises:
        ValueError: If factor is negative, infinite or not a real number.
    """
    if not isinstance(factor, Real) or not 0 <= factor < math.inf:
        raise ValueError(f"factor must be a non-negative number, got {factor!r}")
    samples = img.to_array().astype(np.float64)
    scaled = np.clip(round_half_up(samples * factor), 0, img.maxval)
    img.write_rect(0, 0, scaled.astype(np.uint8))
