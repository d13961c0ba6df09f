"""Logging configuration."""

import datetime as dt
import json
import logging
import sys
from pathlib import Path
from typing import Optional

LOGGER_NAME = "problemrank"

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
TEXT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class JsonFormatter(logging.Formatter):
    """One JSON object per line, for shipping ranking logs to a collector."""

    def format(self, record: logging.LogRecord) -> str:
        log_obj = {
            "timestamp": dt.datetime.fromtimestamp(record.created, tz=dt.timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "module": record.module,
            "function": record.funcName,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_obj, ensure_ascii=False)


def setup_logging(
    log_file: Optional[Path] = None,
    log_level: str = "INFO",
    json_logs: bool = False,
) -> logging.Logger:
    """Set up logging for the ranking engine and CLI.

    Args:
        log_file: Path to log file (optional)
        log_level: Logging level name, case-insensitive
        json_logs: Write the log file as JSON lines

    Returns:
        Configured logger instance
    """
    level = log_level.upper()
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()

    text_formatter = logging.Formatter(TEXT_FORMAT, datefmt=TEXT_DATE_FORMAT)

    # stderr, so --json output on stdout stays parseable
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(text_formatter)
    logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(JsonFormatter() if json_logs else text_formatter)
        logger.addHandler(file_handler)

    logger.propagate = False

    return logger


def configure_logging(config) -> logging.Logger:
    """Set up logging from a ``Config`` (log file, level and JSON switch)."""
    return setup_logging(config.log_file, config.log_level, config.log_json)


def get_logger() -> logging.Logger:
    """Get the problemrank logger instance."""
    return logging.getLogger(LOGGER_NAME)
