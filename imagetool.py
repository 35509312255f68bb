#!/usr/bin/env python3
"""
Command line driver for the graymap library.

Commands are executed left to right on a list of images. Single-image
commands act on the most recent image; paste, blend and locate use the two
most recent (the older one is the destination / haystack).

Usage:
    imagetool load in.pgm neg save out.pgm
    imagetool load in.pgm rotate mirror save turned.pgm
    imagetool load big.pgm load small.pgm locate
    imagetool load in.pgm tic blur 3 3 toc save soft.pgm
    imagetool new 100 100 255 info
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Callable, TextIO

import graymap
from graymap import GraymapError, Instrumentation, PixelBuffer
from logging_utils import add_logging_args, configure_logging

logger = logging.getLogger(__name__)


COMMAND_HELP = """\
commands:
  load FILE            load a raw PGM file
  new W H MAXVAL       create a black image
  save FILE            save the current image
  info                 print size, maxval and sample range
  neg                  negate in place
  thr T                threshold in place
  bri F                brighten by factor F in place
  rotate               push a copy rotated 90 degrees counter-clockwise
  mirror               push a horizontally mirrored copy
  crop X Y W H         push the cropped region
  paste X Y            paste the current image into the previous one
  blend X Y ALPHA      blend the current image into the previous one
  locate               find the current image inside the previous one
  blur DX DY           push a box-blurred copy
  tic                  reset the access counters and timer
  toc                  report time and access counters
"""


class UsageError(Exception):
    """A command sequence that cannot be executed as written."""


class ImageTool:
    """Executes a sequence of image commands."""

    def __init__(self, out: TextIO | None = None) -> None:
        self.images: list[PixelBuffer] = []
        self.instrumentation = Instrumentation()
        self.out = out or sys.stdout
        self._commands: dict[str, tuple[int, Callable[..., None]]] = {
            "load": (1, self.cmd_load),
            "new": (3, self.cmd_new),
            "save": (1, self.cmd_save),
            "info": (0, self.cmd_info),
            "neg": (0, self.cmd_neg),
            "thr": (1, self.cmd_thr),
            "bri": (1, self.cmd_bri),
            "rotate": (0, self.cmd_rotate),
            "mirror": (0, self.cmd_mirror),
            "crop": (4, self.cmd_crop),
            "paste": (2, self.cmd_paste),
            "blend": (3, self.cmd_blend),
            "locate": (0, self.cmd_locate),
            "blur": (2, self.cmd_blur),
            "tic": (0, self.cmd_tic),
            "toc": (0, self.cmd_toc),
        }

    # ------------------------------------------------------------------
    # Sequencing
    # ------------------------------------------------------------------

    def run(self, tokens: list[str]) -> None:
        i = 0
        while i < len(tokens):
            name = tokens[i]
            if name not in self._commands:
                raise UsageError(f"Unknown command: {name}")
            arity, handler = self._commands[name]
            args = tokens[i + 1 : i + 1 + arity]
            if len(args) < arity:
                raise UsageError(f"{name} expects {arity} argument(s), got {len(args)}")
            logger.debug("Running %s %s", name, " ".join(args))
            handler(*args)
            i += 1 + arity

    def _current(self) -> PixelBuffer:
        if not self.images:
            raise UsageError("No image loaded")
        return self.images[-1]

    def _pair(self) -> tuple[PixelBuffer, PixelBuffer]:
        if len(self.images) < 2:
            raise UsageError("Command needs two images")
        return self.images[-2], self.images[-1]

    @staticmethod
    def _int(value: str) -> int:
        try:
            return int(value)
        except ValueError:
            raise UsageError(f"Expected an integer, got {value!r}") from None

    @staticmethod
    def _float(value: str) -> float:
        try:
            return float(value)
        except ValueError:
            raise UsageError(f"Expected a number, got {value!r}") from None

    def _print(self, text: str) -> None:
        print(text, file=self.out)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def cmd_load(self, path: str) -> None:
        img = graymap.load(path, instrumentation=self.instrumentation)
        logger.info("Loaded %s (%dx%d)", path, img.width, img.height)
        self.images.append(img)

    def cmd_new(self, width: str, height: str, maxval: str) -> None:
        self.images.append(
            PixelBuffer(
                self._int(width),
                self._int(height),
                self._int(maxval),
                instrumentation=self.instrumentation,
            )
        )

    def cmd_save(self, path: str) -> None:
        graymap.save(self._current(), path)
        logger.info("Saved %s", path)

    def cmd_info(self) -> None:
        img = self._current()
        low, high = img.stats()
        self._print(f"{img.width}x{img.height} maxval={img.maxval} min={low} max={high}")

    def cmd_neg(self) -> None:
        graymap.negate(self._current())

    def cmd_thr(self, level: str) -> None:
        graymap.threshold(self._current(), self._int(level))

    def cmd_bri(self, factor: str) -> None:
        graymap.brighten(self._current(), self._float(factor))

    def cmd_rotate(self) -> None:
        self.images.append(graymap.rotate90(self._current()))

    def cmd_mirror(self) -> None:
        self.images.append(graymap.mirror(self._current()))

    def cmd_crop(self, x: str, y: str, w: str, h: str) -> None:
        img = self._current()
        self.images.append(
            graymap.crop(img, self._int(x), self._int(y), self._int(w), self._int(h))
        )

    def cmd_paste(self, x: str, y: str) -> None:
        dst, src = self._pair()
        graymap.paste(dst, self._int(x), self._int(y), src)

    def cmd_blend(self, x: str, y: str, alpha: str) -> None:
        dst, src = self._pair()
        graymap.blend(dst, self._int(x), self._int(y), src, self._float(alpha))

    def cmd_locate(self) -> None:
        haystack, needle = self._pair()
        found = graymap.locate(haystack, needle)
        if found is None:
            self._print("not found")
        else:
            self._print(f"found at {found[0]},{found[1]}")

    def cmd_blur(self, dx: str, dy: str) -> None:
        self.images.append(graymap.blur(self._current(), self._int(dx), self._int(dy)))

    def cmd_tic(self) -> None:
        if self.instrumentation.time_unit == 0.0:
            self.instrumentation.calibrate()
        self.instrumentation.reset()

    def cmd_toc(self) -> None:
        values = self.instrumentation.report()
        self._print("  ".join(f"{name}={value:g}" for name, value in values.items()))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="imagetool",
        description="Apply a sequence of operations to raw PGM images",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=COMMAND_HELP,
    )
    add_logging_args(parser)
    parser.add_argument(
        "commands",
        nargs=argparse.REMAINDER,
        help="Command sequence, e.g. 'load in.pgm neg save out.pgm'",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level, args.verbose, args.quiet, log_file=args.log_file)

    if not args.commands:
        parser.print_help()
        return 2

    tool = ImageTool()
    try:
        tool.run(args.commands)
    except UsageError as e:
        parser.error(str(e))
    except (GraymapError, ValueError) as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
