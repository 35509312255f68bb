"""
Exact sub-image localization.

locate() is a brute-force scan: every anchor is tested in row-major order
and the first exact match wins. Worst case is
O(W1 * H1 * W2 * H2); there is no skip table or other shortcut, so the
first-match order is always that of the plain scan.
"""

from __future__ import annotations

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

from .buffer import PixelBuffer
from .errors import OutOfBounds


def matches_at(haystack: PixelBuffer, x: int, y: int, needle: PixelBuffer) -> bool:
    """True if needle equals the region of haystack anchored at (x, y).

    Raises:
        OutOfBounds: If (x, y) is not a valid position in haystack, or if the
            needle placed there extends past haystack's border.
    """
    if not haystack.valid_pos(x, y):
        raise OutOfBounds(
            f"Anchor ({x}, {y}) outside {haystack.width}x{haystack.height} image"
        )
    region = haystack.read_rect(x, y, needle.width, needle.height)
    return bool(np.array_equal(region, needle.to_array()))


def locate(haystack: PixelBuffer, needle: PixelBuffer) -> tuple[int, int] | None:
    """Find the first (x, y), in row-major order, where needle occurs.

    Returns:
        The anchor of the first match, or None if needle does not occur.
        An empty needle matches at (0, 0) whenever that is a valid position
        in haystack; a needle larger than haystack never matches. Any
        anchor returned satisfies matches_at.
    """
    nw, nh = needle.width, needle.height
    if nw > haystack.width or nh > haystack.height:
        return None
    if nw == 0 or nh == 0:
        return (0, 0) if haystack.valid_pos(0, 0) else None

    hay = haystack.to_array()
    pattern = needle.to_array()
    for y in range(haystack.height - nh + 1):
        band = hay[y : y + nh]
        # windows[x] is the nh x nw region anchored at (x, y)
        windows = sliding_window_view(band, (nh, nw))[0]
        hits = np.flatnonzero((windows == pattern).all(axis=(1, 2)))
        if hits.size:
            return int(hits[0]), y
    return None
