"""Logging configuration for the podcast feed service.

Console output goes to stdout in plain text. When ``LOG_PATH`` is set, records
are also written as JSON lines to a rotating file.
"""

import json
import logging
import os
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler

from podcast_feed.config import FeedConfig

LOGGER_NAME = "podcast_feed"
LOG_FILE_NAME = "podcast_feed.log"
CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_RESERVED_ATTRS = frozenset(
    [
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "message",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "thread",
        "threadName",
        "taskName",
        "exc_info",
        "exc_text",
        "stack_info",
    ]
)


def configure_logging(config: FeedConfig) -> logging.Logger:
    """Set up the package logger.

    Safe to call more than once; existing handlers are replaced rather than
    duplicated.

    Args:
        config: Service configuration with log level and optional log path

    Returns:
        The configured package logger
    """
    level = getattr(logging, config.log_level)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    # Console handler (stdout)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console_handler)

    # Rotating file handler (JSON format)
    if config.log_path:
        try:
            os.makedirs(config.log_path, exist_ok=True)
            file_handler = RotatingFileHandler(
                os.path.join(config.log_path, LOG_FILE_NAME),
                maxBytes=config.log_file_max_bytes,
                backupCount=config.log_file_backup_count,
            )
            file_handler.setLevel(level)
            file_handler.setFormatter(JsonFormatter())
            logger.addHandler(file_handler)
        except OSError as e:
            logger.warning(f"Could not create log file: {e}. Logging to console only.")

    return logger


class JsonFormatter(logging.Formatter):
    """JSON log formatter for structured logging.

    Formats log records as JSON with timestamp, level, message, and extra fields.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_data[key] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)
