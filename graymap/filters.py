"""
Neighbourhood filters.

The box blur replaces each pixel with the mean of the (2dx+1) x (2dy+1)
window centred on it. Windows are clipped at the border: only in-bounds
neighbours contribute to the sum and to the divisor, so the window shrinks
near edges and corners instead of being padded or wrapped.
"""

from __future__ import annotations

import cv2
import numpy as np

from .buffer import PixelBuffer


def _window_counts(length: int, radius: int) -> np.ndarray:
    """Number of in-bounds positions in each clipped 1-D window."""
    pos = np.arange(length)
    return np.minimum(pos + radius, length - 1) - np.maximum(pos - radius, 0) + 1


def window_sums(samples: np.ndarray, dx: int, dy: int) -> np.ndarray:
    """Sum of each clipped window as an int64 array (zero padding outside)."""
    summed = cv2.boxFilter(
        samples.astype(np.float64),
        -1,
        (2 * dx + 1, 2 * dy + 1),
        normalize=False,
        borderType=cv2.BORDER_CONSTANT,
    )
    return np.rint(summed).astype(np.int64)


def blur(img: PixelBuffer, dx: int, dy: int) -> PixelBuffer:
    """Return a box-blurred copy of img.

    Every mean is computed from a snapshot of the original samples, so the
    result never depends on the order pixels are written. Means are rounded
    half up and clamped to [0, maxval]. img itself is left unchanged.

    Args:
        img: Source image.
        dx: Horizontal half-width of the window (>= 0).
        dy: Vertical half-height of the window (>= 0).

    Raises:
        ValueError: If dx or dy is negative.
    """
    if dx < 0 or dy < 0:
        raise ValueError(f"dx and dy must be non-negative, got dx={dx}, dy={dy}")

    blurred = img.blank_like()
    if img.size == 0:
        return blurred

    # A window wider than the image clips to the same neighbourhood
    dx = min(int(dx), img.width - 1)
    dy = min(int(dy), img.height - 1)

    snapshot = img.to_array()
    sums = window_sums(snapshot, dx, dy)
    counts = np.outer(_window_counts(img.height, dy), _window_counts(img.width, dx))
    means = (2 * sums + counts) // (2 * counts)
    blurred.write_rect(0, 0, np.clip(means, 0, img.maxval).astype(np.uint8))
    return blurred
