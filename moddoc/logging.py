"""Diagnostics for moddoc.

Documentation goes to stdout, so every log record is routed to stderr or to
an optional log file. Components obtain their logger through
:func:`get_logger` (``get_logger("graph")`` is ``moddoc.graph``).
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TextIO

ROOT_LOGGER = "moddoc"
CONSOLE_FORMAT = "[moddoc] %(levelname)s %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(component: str | None = None) -> logging.Logger:
    if not component:
        return logging.getLogger(ROOT_LOGGER)
    return logging.getLogger(f"{ROOT_LOGGER}.{component}")


def _console_handler(level: int, stream: TextIO | None) -> logging.Handler:
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    return handler


def _file_handler(log_file: Path) -> logging.Handler:
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(FILE_FORMAT))
    return handler


def configure_logging(
    *,
    verbose: bool = False,
    log_file: Path | None = None,
    stream: TextIO | None = None,
) -> logging.Logger:
    """Install moddoc's handlers, replacing any left by an earlier call.

    The console shows warnings and errors, or everything with ``verbose``.
    A log file always records debug output, whatever the console level.
    """
    console_level = logging.DEBUG if verbose else logging.WARNING
    logger = get_logger()
    logger.propagate = False
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.addHandler(_console_handler(console_level, stream))
    if log_file is not None:
        logger.addHandler(_file_handler(log_file))
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(console_level)
    return logger


__all__ = ["configure_logging", "get_logger"]
