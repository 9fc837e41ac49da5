"""Logger setup for command line runs.

Lines are rendered as ``[LEVEL]  message`` on stderr and, optionally, appended
to a plain-text log file. Besides the standard levels the tool uses ``NOTICE``
(per-sample progress chatter, between INFO and DEBUG) and ``TRACE``.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

NOTICE = 15
TRACE = 5

LOGGER_NAME = "sample_shrinker"

# Thresholds selected by stacking ``-v``; the last entry is the clamp.
VERBOSITY_LEVELS: tuple[int, ...] = (logging.INFO, NOTICE, logging.DEBUG)

_LEVEL_TAGS = {
    logging.CRITICAL: "FATAL",
    logging.ERROR: "ERROR",
    logging.WARNING: "WARNING",
    logging.INFO: "INFO",
    NOTICE: "NOTICE",
    logging.DEBUG: "DEBUG",
    TRACE: "TRACE",
}

logging.addLevelName(NOTICE, "NOTICE")
logging.addLevelName(TRACE, "TRACE")


class BracketedLevelFormatter(logging.Formatter):
    """Format records as ``%-8s %s`` with a bracketed level tag."""

    def format(self, record: logging.LogRecord) -> str:
        tag = _LEVEL_TAGS.get(record.levelno, record.levelname)
        message = record.getMessage()
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return "%-8s %s" % (f"[{tag}]", message)


def level_for_verbosity(verbosity: int) -> int:
    index = max(0, min(verbosity, len(VERBOSITY_LEVELS) - 1))
    return VERBOSITY_LEVELS[index]


def configure_logging(
    verbosity: int = 0, log_file: Path | None = None
) -> logging.Logger:
    """Configure and return the package logger for one run.

    Existing handlers are replaced so repeated runs in one process do not
    duplicate output.
    """

    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    level = level_for_verbosity(verbosity)
    logger.setLevel(level)
    logger.propagate = False

    formatter = BracketedLevelFormatter()
    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
