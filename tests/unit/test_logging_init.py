from __future__ import annotations

import logging
from datetime import datetime, timezone

from ledger_intake.logging.init import (
    LOGGER_NAME,
    SUMMARY_LEVEL,
    LabeledFormatter,
    get_logger,
    log_summary,
    reset_logging,
    set_debug,
    setup_logging,
)
from ledger_intake.models.processing_result import ProcessingResult


def _empty_result() -> ProcessingResult:
    now = datetime.now(timezone.utc)
    return ProcessingResult(0, 0, 0, 0, 0, 0, 0, now, now, 0.0)


def test_setup_logging_creates_logger_with_labeled_formatter():
    logger = setup_logging()
    assert logger.name == LOGGER_NAME
    assert logger.level == logging.INFO
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0].formatter, LabeledFormatter)
    assert logger.propagate is False


def test_setup_logging_is_idempotent():
    first = setup_logging()
    second = setup_logging()
    assert first is second
    assert len(second.handlers) == 1
    assert get_logger() is first


def test_labeled_prefixes(capsys):
    logger = setup_logging()
    logger.info("hello")
    logger.warning("careful")
    logger.error("broken")
    line = log_summary(0, _empty_result())
    out = capsys.readouterr().out.splitlines()
    assert out[:3] == ["INFO hello", "WARN careful", "ERROR broken"]
    assert out[3] == line
    assert line.startswith("SUMMARY files=0/0 success=0 failed=0 records=0")


def test_child_loggers_propagate_to_app_logger(capsys):
    setup_logging()
    logging.getLogger(f"{LOGGER_NAME}.parsing.pipeline").info("parsed x")
    assert "INFO parsed x" in capsys.readouterr().out


def test_debug_hidden_until_set_debug(capsys):
    logger = setup_logging()
    logger.debug("invisible")
    set_debug(logger)
    logger.debug("visible")
    out = capsys.readouterr().out
    assert "invisible" not in out
    assert "DEBUG visible" in out


def test_formatter_unknown_level_uses_level_name():
    record = logging.LogRecord("x", 15, __file__, 1, "msg", None, None)
    record.levelname = "VERBOSE"
    assert LabeledFormatter().format(record) == "VERBOSE msg"


def test_summary_level_value():
    assert SUMMARY_LEVEL == 25
    reset_logging()
    setup_logging()
    assert logging.getLevelName(SUMMARY_LEVEL) == "SUMMARY"


def test_exception_text_follows_label(capsys):
    logger = setup_logging()
    try:
        raise ValueError("bad cell")
    except ValueError:
        logger.exception("parse failed")
    out = capsys.readouterr().out
    assert out.startswith("ERROR parse failed\nTraceback")
    assert "ValueError: bad cell" in out
