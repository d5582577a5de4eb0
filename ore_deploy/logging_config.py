"""Logging configuration for ore-deploy.

The package logs through a single ``ore_deploy`` logger with one stdout
handler. ``setup_logging`` may be called again (the CLI does so once the
``--log-level`` and ``--log-format`` options are known) and reconfigures
that handler in place.
"""

import json
import logging
import sys
from datetime import datetime
from typing import Any, Dict

LOGGER_NAME = "ore_deploy"

TEXT_FORMAT = "[%(asctime)s] %(levelname)s - %(name)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class StructuredFormatter(logging.Formatter):
    """Render each record as a single JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry)


def _build_formatter(structured: bool) -> logging.Formatter:
    if structured:
        return StructuredFormatter()
    return logging.Formatter(TEXT_FORMAT, datefmt=DATE_FORMAT)


def setup_logging(level: str = "INFO", structured: bool = False) -> logging.Logger:
    """
    Configure the package logger.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR)
        structured: Emit JSON lines instead of human-readable text

    Returns:
        The ``ore_deploy`` logger
    """
    numeric_level = getattr(logging, level.upper())
    package_logger = logging.getLogger(LOGGER_NAME)
    package_logger.setLevel(numeric_level)

    if not package_logger.handlers:
        package_logger.addHandler(logging.StreamHandler(sys.stdout))

    for handler in package_logger.handlers:
        handler.setLevel(numeric_level)
        handler.setFormatter(_build_formatter(structured))

    return package_logger


logger = setup_logging()
