# backend/portfolio_tracker/utils/logging.py
"""
Logging setup.

setup_logging() installs one stdout handler on the root logger. Every
record passes through CorrelationIdFilter, so both formats can show
which request (or which scheduled snapshot run) produced it.

    LOG_FORMAT=text  2024-03-15 17:00:01 | INFO     | snapshot-job-9f2c... | portfolio_tracker... | Snapshot taken ...
    LOG_FORMAT=json  {"timestamp": ..., "level": "INFO", "correlation_id": ..., "message": ...}

What is logged where:
    DEBUG   - individual quote results, skipped CSV rows
    INFO    - uploads, snapshots, quote batch summaries
    WARNING - unavailable quotes, rejected uploads, rate limits
    ERROR   - store failures
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from portfolio_tracker.config import settings
from portfolio_tracker.utils.context import get_correlation_id

TEXT_FORMAT = "%(asctime)s | %(levelname)-8s | %(correlation_id)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

NO_CORRELATION_ID = "no-correlation-id"

LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

# Chatty at INFO; only their warnings are interesting here
QUIET_LOGGERS = (
    "urllib3",
    "requests",
    "yfinance",
    "peewee",
    "apscheduler",
    "httpx",
    "httpcore",
)

# Attributes every LogRecord has; anything else came in through `extra=`
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {
    "message",
    "asctime",
    "correlation_id",
}


class CorrelationIdFilter(logging.Filter):
    """Sets record.correlation_id from the current context."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id() or NO_CORRELATION_ID
        return True


class JsonFormatter(logging.Formatter):
    """Renders each record as a single-line JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "correlation_id": getattr(record, "correlation_id", NO_CORRELATION_ID),
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        extra = {
            key: _jsonable(value)
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS
        }
        if extra:
            entry["extra"] = extra

        return json.dumps(entry)


def _jsonable(value: Any) -> Any:
    try:
        json.dumps(value)
    except (TypeError, ValueError):
        return str(value)
    return value


def _get_log_level(name: str) -> int:
    """Map a level name (any case, surrounding spaces allowed) to its number."""
    key = name.strip().upper()
    if key not in LOG_LEVELS:
        raise ValueError(f"Invalid log level {name!r}; expected one of {', '.join(LOG_LEVELS)}")
    return LOG_LEVELS[key]


def setup_logging(level: str | None = None, log_format: str | None = None) -> None:
    """
    Configure the root logger. Safe to call more than once.

    Args:
        level: Overrides LOG_LEVEL
        log_format: Overrides LOG_FORMAT ("text" or "json")
    """
    level = level or settings.log_level
    log_format = (log_format or settings.log_format).lower()

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(CorrelationIdFilter())
    if log_format == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(fmt=TEXT_FORMAT, datefmt=DATE_FORMAT))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(_get_log_level(level))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).info(f"Logging configured: level={level}, format={log_format}")
