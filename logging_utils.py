"""Logging setup shared by the command line tools."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_DATEFMT = "%H:%M:%S"


def add_logging_args(parser: argparse.ArgumentParser) -> None:
    """Add --log-level, --log-file, -v and -q to an argparse parser."""
    group = parser.add_argument_group("logging")
    group.add_argument(
        "--log-level",
        choices=list(LOG_LEVELS),
        help="Set log verbosity explicitly (overrides -v/-q)",
    )
    group.add_argument(
        "--log-file",
        type=Path,
        metavar="PATH",
        help="Append log records to PATH instead of stderr",
    )
    group.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="More log output (-v shows debug messages)",
    )
    group.add_argument(
        "-q", "--quiet",
        action="count",
        default=0,
        help="Less log output (-q warnings only, -qq errors only)",
    )


def resolve_log_level(log_level: str | None = None, verbose: int = 0, quiet: int = 0) -> int:
    """Map --log-level or the -v/-q balance to a logging level."""
    if log_level:
        return LOG_LEVELS[log_level.lower()]
    offset = verbose - quiet
    if offset > 0:
        return logging.DEBUG
    return {0: logging.INFO, -1: logging.WARNING}.get(offset, logging.ERROR)


def configure_logging(
    log_level: str | None = None,
    verbose: int = 0,
    quiet: int = 0,
    log_file: Path | None = None,
) -> int:
    """Configure the root logger and return the level in effect.

    Records go to stderr so stdout only carries command output. With
    log_file they are appended to that file instead, even when the root
    logger was already configured elsewhere.
    """
    level = resolve_log_level(log_level=log_level, verbose=verbose, quiet=quiet)
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    if log_file is not None:
        handler: logging.Handler = logging.FileHandler(log_file, encoding="utf-8")
    elif root_logger.handlers:
        for existing in root_logger.handlers:
            existing.setLevel(level)
        return level
    else:
        handler = logging.StreamHandler(sys.stderr)

    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT))
    root_logger.addHandler(handler)
    return level
