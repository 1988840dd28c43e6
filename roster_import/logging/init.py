from __future__ import annotations

import logging
import sys
from typing import Any

"""Labeled stdout logging for roster runs.

Every line is ``LABEL message`` (INFO|WARN|ERROR|SUMMARY, DEBUG with --debug).
Lines about one roster carry ``roster_context`` extras and render as
``LABEL marathon.csv: message`` or ``LABEL marathon.csv row=4: message``,
so row diagnostics line up with the ``file``/``row`` keys of the error log.
Module loggers under ``roster_import.*`` propagate to the application logger.
"""

__all__ = [
    "APP_LOGGER_NAME",
    "SUMMARY_LEVEL",
    "get_logger",
    "log_summary",
    "reset_logging",
    "roster_context",
    "set_debug",
    "setup_logging",
]

APP_LOGGER_NAME = "roster_import"

# INFO(20) と WARNING(30) の間
SUMMARY_LEVEL = 25

_logger: logging.Logger | None = None


def roster_context(file_name: str, row_num: int | None = None) -> dict[str, Any]:
    """``extra=`` mapping that tags a record with its roster file (and data row)."""
    return {"roster_file": file_name, "roster_row": row_num}


class LabeledFormatter(logging.Formatter):
    LEVEL_LABELS = {
        logging.DEBUG: "DEBUG",
        logging.INFO: "INFO",
        logging.WARNING: "WARN",
        logging.ERROR: "ERROR",
        logging.CRITICAL: "CRITICAL",
        SUMMARY_LEVEL: "SUMMARY",
    }

    def format(self, record: logging.LogRecord) -> str:
        label = self.LEVEL_LABELS.get(record.levelno, record.levelname)
        message = record.getMessage()
        file_name = getattr(record, "roster_file", None)
        if file_name:
            row_num = getattr(record, "roster_row", None)
            where = file_name if row_num is None else f"{file_name} row={row_num}"
            return f"{label} {where}: {message}"
        return f"{label} {message}"


def setup_logging(debug: bool = False) -> logging.Logger:
    """Configure the ``roster_import`` logger once and return it.

    Output goes to stdout so that the SUMMARY line and row diagnostics share
    one stream with the ``--inspect-data`` prints. Later calls return the
    configured logger unchanged; use ``set_debug`` to raise verbosity.
    """
    global _logger

    if _logger is not None:
        return _logger

    logging.addLevelName(SUMMARY_LEVEL, "SUMMARY")

    logger = logging.getLogger(APP_LOGGER_NAME)
    # 既存ハンドラを除去 (テストで繰り返し初期化しても重複出力しない)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(LabeledFormatter())
    logger.addHandler(handler)
    logger.propagate = False

    _logger = logger
    _apply_level(logger, logging.DEBUG if debug else logging.INFO)
    return logger


def _apply_level(logger: logging.Logger, level: int) -> None:
    logger.setLevel(level)
    for h in logger.handlers:
        h.setLevel(level)


def get_logger() -> logging.Logger:
    if _logger is None:
        return setup_logging()
    return _logger


def set_debug() -> None:
    """Switch an already configured logger to DEBUG (``--debug``)."""
    _apply_level(get_logger(), logging.DEBUG)


def log_summary(message: str) -> None:
    get_logger().log(SUMMARY_LEVEL, message)


def reset_logging() -> None:
    """Forget the configured logger. Tests only."""
    global _logger
    _logger = None
