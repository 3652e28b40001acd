"""
Logging Configuration

Provides:
- CustomJsonFormatter: one JSON object per record, extra fields included
- setup_logging: YAML dictConfig loader with environment substitution
"""

import json
import logging
import logging.config
import os
import string
from datetime import datetime, timezone
from typing import Optional

import yaml

_STANDARD_ATTRS = {
    "args",
    "asctime",
    "created",
    "exc_info",
    "exc_text",
    "filename",
    "funcName",
    "levelname",
    "levelno",
    "lineno",
    "module",
    "msecs",
    "message",
    "msg",
    "name",
    "pathname",
    "process",
    "processName",
    "relativeCreated",
    "stack_info",
    "taskName",
    "thread",
    "threadName",
}


class CustomJsonFormatter(logging.Formatter):
    """
    JSON Formatter.

    Fields:
      - _time: ISO8601 timestamp (millisecond precision)
      - level: Log level
      - logger: Logger name (e.g. kubefn.waiter)
      - message: Log message
      - any `extra` passed to the logging call
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "_time": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(
                timespec="milliseconds"
            ),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key not in _STANDARD_ATTRS and not key.startswith("_"):
                log_data[key] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False, default=str)


def load_logging_config(config_path: str) -> Optional[dict]:
    """
    Read the YAML config and substitute environment variables.

    Supports ${LOG_LEVEL} format. Returns None when the file does not exist.
    """
    if not os.path.exists(config_path):
        return None

    with open(config_path, "r", encoding="utf-8") as f:
        template = string.Template(f.read())

    # Default values.
    mapping = os.environ.copy()
    if "LOG_LEVEL" not in mapping:
        mapping["LOG_LEVEL"] = "INFO"

    content = template.safe_substitute(mapping)
    return yaml.safe_load(content)


def setup_logging(config_path: str = "logging.yml", level: Optional[str] = None):
    """
    Load the YAML config, substitute environment variables, and initialize logging.
    """
    config = load_logging_config(config_path)
    if config is None:
        logging.basicConfig(level=(level or os.getenv("LOG_LEVEL", "INFO")).upper())
        return

    logging.config.dictConfig(config)
    if level:
        logging.getLogger("kubefn").setLevel(level.upper())
