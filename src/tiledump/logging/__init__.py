"""Logging setup shared by the tiledump CLI and library modules.

Modules log through ``get_logger(__name__)`` and attach context with
``extra={...}``. Both formatters below render that context: the text
formatter as trailing ``key=value`` pairs, the JSON formatter as fields.
"""

from __future__ import annotations

import json
import logging
import time
from logging import Logger
from logging.config import dictConfig
from typing import Any, Dict, Optional

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"
TEXT_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"

_RESERVED = frozenset(vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))) | {
    "message",
    "asctime",
}


def _context(record: logging.LogRecord) -> Dict[str, Any]:
    return {key: value for key, value in vars(record).items() if key not in _RESERVED and not key.startswith("_")}


class ContextFormatter(logging.Formatter):
    """Pipe-separated text lines followed by the record's ``extra`` fields."""

    converter = time.gmtime

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = _context(record)
        if not context:
            return line
        pairs = " ".join(f"{key}={value}" for key, value in context.items())
        head, newline, trace = line.partition("\n")
        return f"{head} | {pairs}{newline}{trace}"


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    converter = time.gmtime

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(_context(record))
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True, default=str)


def configure_logging(
    *,
    level: str = "INFO",
    json_logs: bool = False,
    log_file: Optional[str] = None,
) -> None:
    """Install console (and optionally file) handlers on the root logger."""

    formatter = "json" if json_logs else "text"
    handlers: Dict[str, Dict[str, Any]] = {
        "console": {"class": "logging.StreamHandler", "formatter": formatter},
    }
    if log_file:
        handlers["file"] = {
            "class": "logging.FileHandler",
            "filename": log_file,
            "encoding": "utf-8",
            "formatter": formatter,
        }

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "text": {"()": ContextFormatter, "fmt": TEXT_FORMAT, "datefmt": TIMESTAMP_FORMAT},
                "json": {"()": JSONFormatter, "datefmt": TIMESTAMP_FORMAT},
            },
            "handlers": handlers,
            "root": {"handlers": list(handlers), "level": level.upper()},
        }
    )


def get_logger(name: str) -> Logger:
    return logging.getLogger(name)
