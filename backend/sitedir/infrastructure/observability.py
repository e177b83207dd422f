"""Structured Logging — JSON formatter and one-shot setup for the directory service.

Invariants:
    - Every record carries timestamp, level, logger name, and message
    - Directory extras (entry_id, actor, error_code, backend, feed counters) surfaced when set
    - httpx request logs are held at WARNING: identity lookup URLs carry the API key
    - setup_logging replaces its own handler on repeat calls (no duplicated lines)

Design Decisions:
    - stdlib logging + JSONFormatter, no logging dependency
    - Called once from the lifespan; LOG_FORMAT=text for local development
"""

import json
import logging
from datetime import datetime, timezone

DIRECTORY_EXTRAS = (
    "entry_id", "actor", "error_code", "path", "backend",
    "status", "total_clients", "skipped_invalid_url",
)

# Loggers that echo full request URLs (query string included)
_URL_LOGGERS = ("httpx", "httpcore")

_HANDLER_NAME = "sitedir"


class JSONFormatter(logging.Formatter):
    """One JSON object per log line."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc,
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update({
            key: record.__dict__[key]
            for key in DIRECTORY_EXTRAS
            if record.__dict__.get(key) is not None
        })
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def _build_handler(fmt: str) -> logging.Handler:
    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
        ))
    return handler


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    """Install the service handler on the root logger."""
    root = logging.getLogger()
    for existing in [h for h in root.handlers if h.get_name() == _HANDLER_NAME]:
        root.removeHandler(existing)
    root.addHandler(_build_handler(fmt))
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    for name in _URL_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
