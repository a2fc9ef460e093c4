"""
Structured logging for the PAN validation tool.

JSON lines on stdout via python-json-logger, or a plain text format for local
runs. Level and format come from ``LOG_LEVEL`` / ``LOG_FORMAT``.
"""
from __future__ import annotations
import logging
import sys

from pythonjsonlogger.json import JsonFormatter

import config

LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

DEFAULT_NAME = "pan-validation"


class PanJsonFormatter(JsonFormatter):
    """Adds timestamp, level, logger and call site to every record."""

    def add_fields(self, log_data: dict, record: logging.LogRecord, message_dict: dict) -> None:
        super().add_fields(log_data, record, message_dict)
        if not log_data.get("timestamp"):
            log_data["timestamp"] = self.formatTime(record, self.datefmt)
        log_data["level"] = record.levelname
        log_data["logger"] = record.name
        log_data["module"] = record.module
        log_data["function"] = record.funcName


def setup_logger(
    name: str = DEFAULT_NAME,
    level: str | None = None,
    format_type: str | None = None,
) -> logging.Logger:
    """
    Configure and return a logger.

    Args:
        name: Logger name
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL (defaults to LOG_LEVEL)
        format_type: "json" or "text" (defaults to LOG_FORMAT)
    """
    log_level = LOG_LEVELS.get((level or config.LOG_LEVEL).upper(), logging.INFO)
    fmt_type = (format_type or config.LOG_FORMAT).lower()

    logger = logging.getLogger(name)
    logger.setLevel(log_level)
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    if fmt_type == "json":
        formatter = PanJsonFormatter(
            fmt="%(timestamp)s %(level)s %(logger)s %(module)s %(function)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    else:
        formatter = logging.Formatter(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(funcName)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def get_logger(name: str = DEFAULT_NAME) -> logging.Logger:
    """Return the named logger, configuring it on first use."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        return setup_logger(name)
    return logger
