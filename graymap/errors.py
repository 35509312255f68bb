"""
Error types raised by the graymap library.

Every failable operation raises one of these. Value-like errors also derive
from the matching builtin (ValueError, IndexError, OSError, MemoryError) so
callers can catch them either way.
"""

from __future__ import annotations


class GraymapError(Exception):
    """Base class for all library errors."""


class InvalidDimension(GraymapError, ValueError):
    """Width or height is negative or not an integer."""


class InvalidMaxval(GraymapError, ValueError):
    """maxval is outside (0, 255]."""


class InvalidSample(GraymapError, ValueError):
    """A sample value cannot be stored in the buffer."""


class InvalidRegion(GraymapError, ValueError):
    """A rectangle does not fit inside the target buffer."""


class OutOfBounds(GraymapError, IndexError):
    """A pixel position or rectangle lies outside the buffer.

    This is a contract violation on the caller's side, not a recoverable
    runtime condition.
    """


class BufferReleased(GraymapError, ValueError):
    """Operation on a buffer whose storage was already released."""


class AllocationFailed(GraymapError, MemoryError):
    """Pixel storage could not be allocated."""


class CodecError(GraymapError):
    """Base class for file format errors."""


class MalformedHeader(CodecError, ValueError):
    """The PGM header is missing, malformed or out of range."""


class TruncatedData(CodecError, ValueError):
    """The pixel payload is shorter than width * height bytes."""


class OpenFailed(GraymapError, OSError):
    """A file could not be opened. Carries the underlying errno."""


class WriteFailed(GraymapError, OSError):
    """Header or payload could not be fully written. Carries the underlying errno."""


__all__ = [
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
