"""
JSON logging for the ShutterConnect API.

Every record carries the correlation id of the request it was logged
under. The id lives in a context variable so service code never has to
pass it around.
"""
import json
import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Optional

from shutterconnect.lib.settings import settings


correlation_id_var: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)

# Attributes present on every LogRecord; anything else came in through `extra=`
_RESERVED_ATTRS = set(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__
) | {"message", "asctime"}

_QUIET_LOGGERS = {
    "passlib": logging.ERROR,
    "apscheduler": logging.WARNING,
    "httpx": logging.WARNING,
    "uvicorn.access": logging.WARNING,
}


class JSONFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        correlation_id = correlation_id_var.get()
        if correlation_id:
            entry["correlation_id"] = correlation_id

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        entry.update(
            (key, value)
            for key, value in record.__dict__.items()
            if key not in _RESERVED_ATTRS and not key.startswith("_")
        )
        return json.dumps(entry, default=str)


def setup_logging(level: str = "INFO", json_format: bool = True) -> None:
    """Install a single stdout handler on the root logger."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(
        JSONFormatter()
        if json_format
        else logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    for name, quiet_level in _QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def set_correlation_id(correlation_id: Optional[str]) -> None:
    correlation_id_var.set(correlation_id)


def get_correlation_id() -> Optional[str]:
    return correlation_id_var.get()


def clear_request_context() -> None:
    correlation_id_var.set(None)


setup_logging(
    level="DEBUG" if settings.debug else settings.log_level,
    json_format=settings.log_json,
)
