"""
Reader and writer for raw 8-bit PGM ("P5") files.

Header layout accepted by the loader:

    P5 <ws> [#comment\\n ...] <width> <ws> [#comment\\n ...] <height> <ws>
    [#comment\\n ...] <maxval> <single ws byte> <width*height payload bytes>

The saver always writes "P5\\n<w> <h>\\n<maxval>\\n" followed by the payload,
without comments.

See also: http://netpbm.sourceforge.net/doc/pgm.html
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Union

import numpy as np

from .buffer import PixelBuffer
from .config import PGM_COMMENT, PGM_MAGIC, PGM_WHITESPACE, PIX_MAX
from .errors import MalformedHeader, OpenFailed, TruncatedData, WriteFailed
from .instrumentation import Instrumentation

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]


class _HeaderReader:
    """Cursor over the raw file bytes used while parsing the header."""

    def __init__(self, data: bytes) -> None:
        self.data = data
        self.pos = 0

    def _peek(self) -> int | None:
        if self.pos < len(self.data):
            return self.data[self.pos]
        return None

    def expect_magic(self) -> None:
        end = len(PGM_MAGIC)
        if self.data[:end] != PGM_MAGIC:
            raise MalformedHeader(
                f"Invalid file format: expected magic {PGM_MAGIC!r}, "
                f"got {self.data[:end]!r}"
            )
        self.pos = end

    def skip_separator(self, after: str) -> None:
        """Skip whitespace and comment lines; at least one byte is required."""
        start = self.pos
        while True:
            byte = self._peek()
            if byte is None:
                break
            if byte in PGM_WHITESPACE:
                self.pos += 1
            elif byte == PGM_COMMENT[0]:
                newline = self.data.find(b"\n", self.pos)
                if newline < 0:
                    raise MalformedHeader(f"Unterminated comment after {after}")
                self.pos = newline + 1
            else:
                break
        if self.pos == start:
            raise MalformedHeader(f"Whitespace expected after {after}")

    def read_int(self, name: str) -> int:
        start = self.pos
        if self._peek() in (ord("+"), ord("-")):
            self.pos += 1
        while (byte := self._peek()) is not None and 48 <= byte <= 57:
            self.pos += 1
        token = self.data[start : self.pos]
        try:
            return int(token)
        except ValueError:
            raise MalformedHeader(f"Invalid {name}: {token!r}") from None

    def expect_single_whitespace(self) -> None:
        byte = self._peek()
        if byte is None or byte not in PGM_WHITESPACE:
            raise MalformedHeader("Whitespace expected after maxval")
        self.pos += 1


def _parse_header(data: bytes) -> tuple[int, int, int, int]:
    """Parse a P5 header. Returns (width, height, maxval, payload_offset)."""
    reader = _HeaderReader(data)
    reader.expect_magic()
    reader.skip_separator("magic number")

    width = reader.read_int("width")
    if width < 0:
        raise MalformedHeader(f"Invalid width: {width}")
    reader.skip_separator("width")

    height = reader.read_int("height")
    if height < 0:
        raise MalformedHeader(f"Invalid height: {height}")
    reader.skip_separator("height")

    maxval = reader.read_int("maxval")
    if not 0 < maxval <= PIX_MAX:
        raise MalformedHeader(f"Invalid maxval: {maxval}")
    reader.expect_single_whitespace()

    return width, height, maxval, reader.pos


def loads(
    data: bytes,
    *,
    instrumentation: Instrumentation | None = None,
    strict: bool = False,
) -> PixelBuffer:
    """Decode a raw PGM image from bytes.

    Raises:
        MalformedHeader: If the header is invalid.
        TruncatedData: If fewer than width * height payload bytes follow it.
    """
    width, height, maxval, offset = _parse_header(data)
    expected = width * height
    available = len(data) - offset
    if available < expected:
        raise TruncatedData(
            f"Reading pixels: expected {expected} bytes, got {available}"
        )

    payload = np.frombuffer(data[offset : offset + expected], dtype=np.uint8)
    img = PixelBuffer(
        width, height, maxval, instrumentation=instrumentation, strict=strict
    )
    img.write_rect(0, 0, payload.reshape(height, width))
    return img


def load(
    path: PathLike,
    *,
    instrumentation: Instrumentation | None = None,
    strict: bool = False,
) -> PixelBuffer:
    """Load a raw PGM file.

    Raises:
        OpenFailed: If the file cannot be opened or read (errno preserved).
        MalformedHeader: If the header is invalid.
        TruncatedData: If the payload is short.
    """
    path = Path(path)
    try:
        with open(path, "rb") as f:
            data = f.read()
    except OSError as e:
        logger.warning("Open failed: %s (%s)", path, e.strerror)
        raise OpenFailed(e.errno, f"Open failed: {e.strerror}", str(path)) from e

    try:
        img = loads(data, instrumentation=instrumentation, strict=strict)
    except (MalformedHeader, TruncatedData) as e:
        logger.warning("Cannot load %s: %s", path, e)
        raise
    logger.debug("Loaded %s: %dx%d maxval=%d", path, img.width, img.height, img.maxval)
    return img


def encode_header(width: int, height: int, maxval: int) -> bytes:
    return b"%s\n%d %d\n%d\n" % (PGM_MAGIC, width, height, maxval)


def dumps(img: PixelBuffer) -> bytes:
    """Encode a buffer as raw PGM bytes."""
    header = encode_header(img.width, img.height, img.maxval)
    return header + img.to_array().tobytes()


def save(img: PixelBuffer, path: PathLike) -> None:
    """Write a buffer to a raw PGM file.

    The write is not atomic: on WriteFailed a partial file may remain at path
    and the caller is responsible for removing it.

    Raises:
        OpenFailed: If the file cannot be created.
        WriteFailed: If the header or payload cannot be fully written.
    """
    path = Path(path)
    header = encode_header(img.width, img.height, img.maxval)
    payload = img.to_array().tobytes()
    try:
        f = open(path, "wb")
    except OSError as e:
        logger.warning("Open failed: %s (%s)", path, e.strerror)
        raise OpenFailed(e.errno, f"Open failed: {e.strerror}", str(path)) from e

    with f:
        for what, chunk in (("header", header), ("pixels", payload)):
            try:
                written = f.write(chunk)
                f.flush()
            except OSError as e:
                logger.warning("Writing %s failed: %s (%s)", what, path, e.strerror)
                raise WriteFailed(
                    e.errno, f"Writing {what} failed: {e.strerror}", str(path)
                ) from e
            if written != len(chunk):
                logger.warning(
                    "Writing %s failed: %s (%d of %d bytes)", what, path, written, len(chunk)
                )
                raise WriteFailed(
                    0, f"Writing {what} failed: {written} of {len(chunk)} bytes", str(path)
                )
    logger.debug("Saved %s: %dx%d maxval=%d", path, img.width, img.height, img.maxval)
