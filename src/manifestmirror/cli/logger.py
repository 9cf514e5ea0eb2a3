"""Logging helpers for the manifest-mirror CLI."""

from __future__ import annotations

import logging
import os
import sys

import colorlog

LOG_COLORS = {
    "DEBUG": "bold_cyan",
    "INFO": "bold_green",
    "WARNING": "bold_yellow",
    "ERROR": "bold_red",
    "CRITICAL": "bold_red,bg_white",
}

# Third-party loggers that flood the output in verbose mode.
NOISY_LOGGERS = ("boto3", "botocore", "s3transfer", "urllib3")

_DATEFMT = "%Y-%m-%d %H:%M:%S"


def _use_color() -> bool:
    if os.getenv("NO_COLOR") is not None:
        return False
    return sys.stderr.isatty()


def _handler() -> logging.Handler:
    handler = logging.StreamHandler()
    if _use_color():
        handler.setFormatter(
            colorlog.ColoredFormatter(
                fmt="%(log_color)s[%(asctime)s] <%(name)s> %(levelname)s:%(reset)s %(message)s",
                log_colors=LOG_COLORS,
                datefmt=_DATEFMT,
            )
        )
    else:
        handler.setFormatter(
            logging.Formatter("[%(asctime)s] <%(name)s> %(levelname)s: %(message)s", _DATEFMT)
        )
    return handler


def configure_logging(verbose: bool) -> None:
    """Log to stderr at INFO, or DEBUG when verbose, coloring on a TTY."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, handlers=[_handler()], force=True)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


log = logging.getLogger("cli")
"""Logger used by the CLI itself."""
