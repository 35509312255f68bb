"""
Whole-buffer geometric transforms.

rotate90, mirror and crop return a new buffer and never touch their source.
paste and blend modify the destination buffer in place.
"""

from __future__ import annotations

import math
from numbers import Real

import numpy as np

from .buffer import PixelBuffer
from .errors import InvalidRegion
from .pointwise import round_half_up


def _require_rect(img: PixelBuffer, x: int, y: int, w: int, h: int) -> None:
    if not img.valid_rect(x, y, w, h):
        raise InvalidRegion(
            f"Rectangle ({x}, {y}, {w}, {h}) does not fit in "
            f"{img.width}x{img.height} image"
        )


def rotate90(img: PixelBuffer) -> PixelBuffer:
    """Rotate a quarter turn counter-clockwise.

    The result is height x width; the pixel at (x, y) moves to
    (y, width - 1 - x).
    """
    rotated = img.blank_like(width=img.height, height=img.width)
    rotated.write_rect(0, 0, np.rot90(img.to_array()))
    return rotated


def mirror(img: PixelBuffer) -> PixelBuffer:
    """Flip horizontally: (x, y) moves to (width - 1 - x, y)."""
    mirrored = img.blank_like()
    mirrored.write_rect(0, 0, np.fliplr(img.to_array()))
    return mirrored


def crop(img: PixelBuffer, x: int, y: int, w: int, h: int) -> PixelBuffer:
    """Copy the rectangle (x, y, w, h) into a new w x h buffer.

    Raises:
        InvalidRegion: If the rectangle does not fit inside img.
    """
    _require_rect(img, x, y, w, h)
    cropped = img.blank_like(width=w, height=h)
    cropped.write_rect(0, 0, img.read_rect(x, y, w, h))
    return cropped


def paste(dst: PixelBuffer, x: int, y: int, src: PixelBuffer) -> None:
    """Overwrite dst's region at (x, y) with the samples of src.

    Raises:
        InvalidRegion: If src placed at (x, y) does not fit inside dst.
    """
    _require_rect(dst, x, y, src.width, src.height)
    dst.write_rect(x, y, src.to_array())


def blend(dst: PixelBuffer, x: int, y: int, src: PixelBuffer, alpha: float) -> None:
    """Mix src into dst's region at (x, y): alpha * dst + (1 - alpha) * src.

    Results are rounded and clamped to [0, dst.maxval]. Values of alpha
    outside [0, 1] extrapolate.

    Raises:
        ValueError: If alpha is not a finite real number.
        InvalidRegion: If src placed at (x, y) does not fit inside dst.
    """
    if not isinstance(alpha, Real) or not math.isfinite(alpha):
        raise ValueError(f"alpha must be a finite number, got {alpha!r}")
    _require_rect(dst, x, y, src.width, src.height)
    under = dst.read_rect(x, y, src.width, src.height).astype(np.float64)
    over = src.to_array().astype(np.float64)
    mixed = round_half_up(alpha * under + (1.0 - alpha) * over)
    dst.write_rect(x, y, np.clip(mixed, 0, dst.maxval).astype(np.uint8))
