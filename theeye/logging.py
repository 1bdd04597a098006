"""
Structured Logging

Emits one JSON object per line in production, a plain text line in
development. Report context travels through `extra=`; only the
whitelisted keys below reach the output, so a stray extra never leaks
document text into the logs.

Usage:
    from theeye.logging import get_logger
    logger = get_logger("processor")
    logger.info("Document analyzed", extra={"risk_score": 55, "priority": "HIGH"})
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone


LOG_LEVEL = os.getenv("THEEYE_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = os.getenv("THEEYE_LOG_FORMAT", "json")  # "json" or "text"

EXTRA_FIELDS = (
    "report_id", "risk_score", "priority", "claims_count", "source",
    "audit_hash", "items_count", "error", "error_type", "duration_ms",
    "status_code", "method", "path",
)

# Access lines duplicate the request-logging middleware
QUIET_LOGGERS = ("uvicorn.access", "httpcore", "httpx")


def _extras(record: logging.LogRecord) -> dict:
    return {
        key: getattr(record, key)
        for key in EXTRA_FIELDS
        if getattr(record, key, None) is not None
    }


class JSONFormatter(logging.Formatter):
    """One JSON object per record: timestamp, level, logger, message, extras."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **_extras(record),
        }
        if record.exc_info and record.exc_info[0]:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class TextFormatter(logging.Formatter):
    """Readable single line, extras appended as key=value."""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s %(levelname)-7s %(name)s | %(message)s",
            datefmt="%H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extras = _extras(record)
        if extras:
            line += " | " + " ".join(f"{k}={v}" for k, v in extras.items())
        return line


def setup_logging(level: str = LOG_LEVEL, fmt: str = LOG_FORMAT) -> logging.Logger:
    """Configure the theeye logger tree. Safe to call more than once."""
    root = logging.getLogger("theeye")
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter() if fmt == "json" else TextFormatter())
    root.handlers[:] = [handler]

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return root


def get_logger(name: str) -> logging.Logger:
    """Logger under the theeye namespace, e.g. get_logger("api") -> theeye.api."""
    return logging.getLogger(f"theeye.{name}")
