"""Writing rendered documentation to standard output."""

from __future__ import annotations

import json
import os
import sys
from typing import Any, TextIO, Union

from .logging import get_logger

_LOGGER = get_logger("output")


def write_json_to_stdout(value: Any, stream: TextIO | None = None) -> None:
    """Serialize ``value`` as indented JSON followed by a newline."""
    write_to_stdout_ignore_sigpipe(json.dumps(value, indent=2) + "\n", stream)


def write_to_stdout_ignore_sigpipe(data: Union[str, bytes], stream: TextIO | None = None) -> None:
    """Write ``data``; a reader that closes the pipe early ends output quietly."""
    target = stream if stream is not None else sys.stdout
    try:
        if isinstance(data, bytes):
            buffer = getattr(target, "buffer", None)
            if buffer is not None:
                buffer.write(data)
            else:
                target.write(data.decode("utf-8"))
        else:
            target.write(data)
        target.flush()
    except BrokenPipeError:
        _LOGGER.debug("Output pipe closed by reader")
        # Point stdout at devnull so the interpreter's final flush does not raise again.
        if target is sys.stdout:
            devnull = os.open(os.devnull, os.O_WRONLY)
            os.dup2(devnull, sys.stdout.fileno())


__all__ = ["write_json_to_stdout", "write_to_stdout_ignore_sigpipe"]
