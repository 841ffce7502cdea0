"""Tests for moddoc.logging."""

from __future__ import annotations

import io
import logging

from moddoc.logging import configure_logging, get_logger


def test_component_loggers_live_under_moddoc() -> None:
    assert get_logger().name == "moddoc"
    assert get_logger("graph").name == "moddoc.graph"


def test_console_hides_debug_unless_verbose() -> None:
    stream = io.StringIO()
    configure_logging(stream=stream)

    get_logger("graph").debug("hidden detail")
    get_logger("graph").warning("load failed")

    assert stream.getvalue() == "[moddoc] WARNING load failed\n"

    stream = io.StringIO()
    configure_logging(verbose=True, stream=stream)
    get_logger("graph").debug("shown detail")

    assert "[moddoc] DEBUG shown detail" in stream.getvalue()


def test_log_file_records_debug_and_repeat_calls_do_not_stack(tmp_path) -> None:
    log_file = tmp_path / "logs" / "moddoc.log"
    stream = io.StringIO()

    configure_logging(log_file=log_file, stream=stream)
    logger = configure_logging(log_file=log_file, stream=stream)
    get_logger("doc").debug("extracted 3 nodes")
    for handler in logger.handlers:
        handler.flush()

    assert len(logger.handlers) == 2
    assert stream.getvalue() == ""
    contents = log_file.read_text(encoding="utf-8")
    assert contents.count("moddoc.doc: extracted 3 nodes") == 1

    configure_logging(stream=io.StringIO())
    assert all(not isinstance(handler, logging.FileHandler) for handler in logger.handlers)
