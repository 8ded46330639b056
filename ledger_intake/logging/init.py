from __future__ import annotations

import logging
import sys

from ..models.processing_result import ProcessingResult
from ..services.report import render_summary_line

"""Application logging.

Every stdout line starts with a label: INFO, WARN, ERROR or SUMMARY (DEBUG
with --debug). Modules log through ``logging.getLogger(__name__)``; records
reach the single handler installed on the ``ledger_intake`` logger.
"""

__all__ = [
    "LOGGER_NAME",
    "SUMMARY_LEVEL",
    "LabeledFormatter",
    "setup_logging",
    "get_logger",
    "set_debug",
    "log_summary",
    "reset_logging",
]

LOGGER_NAME = "ledger_intake"
SUMMARY_LEVEL = 25  # between INFO and WARNING

_logger: logging.Logger | None = None


class LabeledFormatter(logging.Formatter):
    """``LABEL message``; tracebacks, when attached, follow on the next lines."""

    LEVEL_LABELS = {
        logging.DEBUG: "DEBUG",
        logging.INFO: "INFO",
        SUMMARY_LEVEL: "SUMMARY",
        logging.WARNING: "WARN",
        logging.ERROR: "ERROR",
        logging.CRITICAL: "CRITICAL",
    }

    def format(self, record: logging.LogRecord) -> str:
        label = self.LEVEL_LABELS.get(record.levelno, record.levelname)
        line = f"{label} {record.getMessage()}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Install the stdout handler once and return the application logger."""
    global _logger
    if _logger is not None:
        return _logger

    logging.addLevelName(SUMMARY_LEVEL, "SUMMARY")
    logger = logging.getLogger(LOGGER_NAME)
    for old in list(logger.handlers):
        logger.removeHandler(old)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(LabeledFormatter())
    handler.setLevel(level)
    logger.addHandler(handler)
    logger.setLevel(level)
    # our handler only; the root logger would print every line twice
    logger.propagate = False

    _logger = logger
    return logger


def get_logger() -> logging.Logger:
    return _logger if _logger is not None else setup_logging()


def set_debug(logger: logging.Logger) -> None:
    logger.setLevel(logging.DEBUG)
    for handler in logger.handlers:
        handler.setLevel(logging.DEBUG)


def log_summary(total_files: int, result: ProcessingResult) -> str:
    """Emit the SUMMARY line of a run and return it."""
    line = render_summary_line(total_files, result)
    get_logger().log(SUMMARY_LEVEL, line.removeprefix("SUMMARY "))
    return line


def reset_logging() -> None:
    """Forget the configured logger so the next setup binds a fresh stdout."""
    global _logger
    _logger = None
