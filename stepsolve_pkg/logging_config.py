"""Structured logging configuration for StepSolve.

Log lines carry the solver that handled a problem and the problem text when a
call site passes them through ``extra``::

    logger.debug("Dispatching", extra={"solver": "linear", "problem": "2x = 4"})
"""

import logging
import sys
from datetime import datetime
from typing import Optional

from .config import LOG_LEVEL

# Per-record fields appended as key=value pairs, in this order
CONTEXT_FIELDS = ("solver", "problem")


class StructuredFormatter(logging.Formatter):
    """Formats `timestamp [LEVEL] logger: message key=value ...`."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).isoformat()
        message = f"{timestamp} [{record.levelname}] {record.name}: {record.getMessage()}"
        context = [
            f"{name}={getattr(record, name)!r}"
            for name in CONTEXT_FIELDS
            if getattr(record, name, None) is not None
        ]
        if context:
            message = f"{message} {' '.join(context)}"
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return message


def setup_logging(
    level: Optional[str] = None, log_file: Optional[str] = None
) -> logging.Logger:
    """Attach structured handlers to the ``stepsolve`` logger.

    Args:
        level: Logging level name; defaults to STEPSOLVE_LOG_LEVEL (WARNING)
        log_file: Optional file to write logs to in addition to stderr

    Returns:
        The configured ``stepsolve`` logger
    """
    logger = logging.getLogger("stepsolve")
    level_name = (level or LOG_LEVEL).upper()
    logger.setLevel(getattr(logging, level_name, logging.WARNING))
    logger.handlers.clear()

    handlers: list = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    for handler in handlers:
        handler.setFormatter(StructuredFormatter())
        logger.addHandler(handler)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Child logger ``stepsolve.<name>`` for a package module."""
    return logging.getLogger(f"stepsolve.{name}")
