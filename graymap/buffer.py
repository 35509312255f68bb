"""
The 8-bit grayscale pixel buffer.

A PixelBuffer owns a row-major (height, width) uint8 numpy array. All
algorithms in this package read and write it through the bounds-checked
accessors below; every accessor copies, so no two buffers ever share storage.
Each pixel touched by an accessor is counted on the injected Instrumentation.
"""

from __future__ import annotations

import logging
from numbers import Integral

import numpy as np

from .config import DEFAULT_MAXVAL, PIX_MAX, PIXMEM_COUNTER
from .errors import (
    AllocationFailed,
    BufferReleased,
    InvalidDimension,
    InvalidMaxval,
    InvalidSample,
    OutOfBounds,
)
from .instrumentation import NULL_INSTRUMENTATION, Instrumentation

logger = logging.getLogger(__name__)


def _is_int(value) -> bool:
    return isinstance(value, Integral) and not isinstance(value, bool)


def validate_dimensions(width, height) -> None:
    """Raise InvalidDimension unless width and height are non-negative ints."""
    for name, value in (("width", width), ("height", height)):
        if not _is_int(value):
            raise InvalidDimension(f"{name} must be int, got {type(value).__name__}")
        if value < 0:
            raise InvalidDimension(f"{name} must be non-negative, got {value}")


def validate_maxval(maxval) -> None:
    """Raise InvalidMaxval unless 0 < maxval <= 255."""
    if not _is_int(maxval) or not 0 < maxval <= PIX_MAX:
        raise InvalidMaxval(f"maxval must be an integer in (0, {PIX_MAX}], got {maxval!r}")


class PixelBuffer:
    """A width x height raster of 8-bit samples with a white level of maxval.

    Args:
        width: Number of columns (>= 0).
        height: Number of rows (>= 0).
        maxval: White level, in (0, 255].
        instrumentation: Collector for access counts. Defaults to a no-op.
        strict: Reject writes of samples greater than maxval.

    Raises:
        InvalidDimension: If width or height is negative.
        InvalidMaxval: If maxval is out of range.
        AllocationFailed: If the pixel array cannot be allocated.
    """

    def __init__(
        self,
        width: int,
        height: int,
        maxval: int = DEFAULT_MAXVAL,
        *,
        instrumentation: Instrumentation | None = None,
        strict: bool = False,
    ) -> None:
        validate_dimensions(width, height)
        validate_maxval(maxval)
        try:
            pixels = np.zeros((height, width), dtype=np.uint8)
        except MemoryError as e:
            raise AllocationFailed(
                f"Cannot allocate {width}x{height} pixel array"
            ) from e
        self._width = int(width)
        self._height = int(height)
        self._maxval = int(maxval)
        self._pixels: np.ndarray | None = pixels
        self.instrumentation = instrumentation or NULL_INSTRUMENTATION
        self.strict = strict

    @classmethod
    def from_array(
        cls,
        array,
        maxval: int | None = None,
        *,
        instrumentation: Instrumentation | None = None,
        strict: bool = False,
    ) -> PixelBuffer:
        """Build a buffer holding a copy of a 2-D integer array.

        maxval defaults to 255. Samples must lie in [0, 255] (and in
        [0, maxval] for strict buffers).
        """
        arr = np.asarray(array)
        if arr.ndim != 2:
            raise InvalidDimension(
                f"Expected a 2D array, got {arr.ndim}D array with shape {arr.shape}"
            )
        height, width = arr.shape
        img = cls(
            width,
            height,
            DEFAULT_MAXVAL if maxval is None else maxval,
            instrumentation=instrumentation,
            strict=strict,
        )
        img.write_rect(0, 0, arr)
        return img

    def blank_like(self, width: int | None = None, height: int | None = None) -> PixelBuffer:
        """New all-zero buffer with this buffer's maxval, strictness and instrumentation."""
        return PixelBuffer(
            self.width if width is None else width,
            self.height if height is None else height,
            self.maxval,
            instrumentation=self.instrumentation,
            strict=self.strict,
        )

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def maxval(self) -> int:
        return self._maxval

    @property
    def size(self) -> int:
        """Number of pixels (width * height)."""
        return self._width * self._height

    @property
    def released(self) -> bool:
        return self._pixels is None

    def _storage(self) -> np.ndarray:
        if self._pixels is None:
            raise BufferReleased("Pixel buffer has been released")
        return self._pixels

    def _count(self, n: int) -> None:
        if n:
            self.instrumentation.increment(PIXMEM_COUNTER, n)

    # ------------------------------------------------------------------
    # Position checks
    # ------------------------------------------------------------------

    def valid_pos(self, x: int, y: int) -> bool:
        """True if (x, y) is inside the buffer."""
        return 0 <= x < self._width and 0 <= y < self._height

    def valid_rect(self, x: int, y: int, w: int, h: int) -> bool:
        """True if the rectangle (x, y, w, h) fits inside the buffer."""
        return (
            x >= 0
            and y >= 0
            and w >= 0
            and h >= 0
            and x + w <= self._width
            and y + h <= self._height
        )

    def _check_pos(self, x: int, y: int) -> None:
        if not (_is_int(x) and _is_int(y)) or not self.valid_pos(x, y):
            raise OutOfBounds(
                f"Position ({x}, {y}) outside {self._width}x{self._height} buffer"
            )

    def _check_rect(self, x: int, y: int, w: int, h: int) -> None:
        if not all(_is_int(v) for v in (x, y, w, h)) or not self.valid_rect(x, y, w, h):
            raise OutOfBounds(
                f"Rectangle ({x}, {y}, {w}, {h}) outside "
                f"{self._width}x{self._height} buffer"
            )

    def _check_sample(self, value) -> int:
        if not _is_int(value) or not 0 <= value <= PIX_MAX:
            raise InvalidSample(f"Sample must be an integer in [0, {PIX_MAX}], got {value!r}")
        if self.strict and value > self._maxval:
            raise InvalidSample(f"Sample {value} exceeds maxval {self._maxval}")
        return int(value)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def get_pixel(self, x: int, y: int) -> int:
        """Return the sample at (x, y).

        Raises:
            OutOfBounds: If (x, y) is not a valid position.
        """
        pixels = self._storage()
        self._check_pos(x, y)
        self._count(1)
        return int(pixels[y, x])

    def set_pixel(self, x: int, y: int, value: int) -> None:
        """Store value at (x, y).

        Raises:
            OutOfBounds: If (x, y) is not a valid position.
            InvalidSample: If value is not a storable sample.
        """
        pixels = self._storage()
        self._check_pos(x, y)
        pixels[y, x] = self._check_sample(value)
        self._count(1)

    def read_rect(self, x: int, y: int, w: int, h: int) -> np.ndarray:
        """Return a (h, w) uint8 copy of the given rectangle."""
        pixels = self._storage()
        self._check_rect(x, y, w, h)
        self._count(w * h)
        return pixels[y : y + h, x : x + w].copy()

    def write_rect(self, x: int, y: int, samples) -> None:
        """Overwrite the rectangle anchored at (x, y) with a 2-D sample array."""
        pixels = self._storage()
        arr = np.asarray(samples)
        if arr.ndim != 2:
            raise InvalidSample(
                f"Expected a 2D sample array, got {arr.ndim}D array with shape {arr.shape}"
            )
        h, w = arr.shape
        self._check_rect(x, y, w, h)
        if arr.size:
            if not np.issubdtype(arr.dtype, np.integer):
                raise InvalidSample(f"Samples must be integers, got dtype {arr.dtype}")
            low, high = int(arr.min()), int(arr.max())
            if low < 0 or high > PIX_MAX:
                raise InvalidSample(
                    f"Samples must lie in [0, {PIX_MAX}], got range [{low}, {high}]"
                )
            if self.strict and high > self._maxval:
                raise InvalidSample(f"Sample {high} exceeds maxval {self._maxval}")
        pixels[y : y + h, x : x + w] = arr
        self._count(w * h)

    def to_array(self) -> np.ndarray:
        """Return a (height, width) uint8 copy of the whole raster."""
        return self.read_rect(0, 0, self._width, self._height)

    def stats(self) -> tuple[int, int]:
        """Return (min, max) sample values; (0, 0) for an empty buffer."""
        pixels = self._storage()
        if pixels.size == 0:
            return 0, 0
        self._count(pixels.size)
        return int(pixels.min()), int(pixels.max())

    def copy(self) -> PixelBuffer:
        """Independent copy with the same maxval, strictness and instrumentation."""
        dup = self.blank_like()
        dup.write_rect(0, 0, self.to_array())
        return dup

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def release(self) -> None:
        """Drop the pixel storage. Releasing twice is a no-op."""
        if self._pixels is not None:
            logger.debug("Releasing %dx%d buffer", self._width, self._height)
        self._pixels = None

    def __enter__(self) -> PixelBuffer:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    def __eq__(self, other) -> bool:
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return (
            self._width == other._width
            and self._height == other._height
            and self._maxval == other._maxval
            and np.array_equal(self._storage(), other._storage())
        )

    __hash__ = None

    def __repr__(self) -> str:
        state = " released" if self.released else ""
        return f"PixelBuffer({self._width}x{self._height}, maxval={self._maxval}{state})"
