"""
8-bit grayscale image library.

This module provides a dense pixel buffer, a codec for raw PGM (P5) files and
a set of transformations on the buffer. All algorithms go through the
buffer's bounds-checked accessors; operations that produce a derived image
allocate a fresh buffer and never modify their source.

Key components:
- buffer: PixelBuffer with bounds-checked get/set, bulk rectangle access, stats
- codec: load()/save() and loads()/dumps() for raw PGM files
- pointwise: In-place negate, threshold and brighten
- geometry: rotate90, mirror, crop (new buffers), paste and blend (in place)
- matching: matches_at() and brute-force locate() for sub-images
- filters: Box blur with border clipping
- instrumentation: Optional pixel access counters and timing
- interop: numpy and Pillow conversions
- errors: Error taxonomy
"""

from .buffer import PixelBuffer
from .codec import load, loads, save, dumps
from .pointwise import negate, threshold, brighten
from .geometry import rotate90, mirror, crop, paste, blend
from .matching import matches_at, locate
from .filters import blur
from .instrumentation import Instrumentation, NULL_INSTRUMENTATION
from .errors import (
    GraymapError,
    InvalidDimension,
    InvalidMaxval,
    InvalidSample,
    InvalidRegion,
    OutOfBounds,
    BufferReleased,
    AllocationFailed,
    CodecError,
    MalformedHeader,
    TruncatedData,
    OpenFailed,
    WriteFailed,
)

__all__ = [
    # Buffer
    "PixelBuffer",
    # Codec
    "load",
    "loads",
    "save",
    "dumps",
    # Pointwise
    "negate",
    "threshold",
    "brighten",
    # Geometry
    "rotate90",
    "mirror",
    "crop",
    "paste",
    "blend",
    # Matching
    "matches_at",
    "locate",
    # Filters
    "blur",
    # Instrumentation
    "Instrumentation",
    "NULL_INSTRUMENTATION",
    # Errors
    "GraymapError",
    "InvalidDimension",
    "InvalidMaxval",
    "InvalidSample",
    "InvalidRegion",
    "OutOfBounds",
    "BufferReleased",
    "AllocationFailed",
    "CodecError",
    "MalformedHeader",
    "TruncatedData",
    "OpenFailed",
    "WriteFailed",
]
