"""Logging configuration for the Authress SSO login backend."""

from __future__ import annotations
import json
import logging
import os
from typing import Any


_LOGGER_NAMES = (
    "uvicorn",
    "uvicorn.access",
    "uvicorn.error",
    "fastapi",
    "authress_sso_login",
    "authress_sso_login_backend",
)

_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__
) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """Render records as one JSON object per line, including extra fields."""

    def format(self, record: logging.LogRecord) -> str:
        """Serialize ``record`` and any ``extra`` attributes."""
        payload: dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                payload[key] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def configure_logging(level: str | None = None, fmt: str | None = None) -> None:
    """Apply the log level and format to the root and known loggers."""
    resolved_level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    resolved_format = (fmt or os.getenv("LOG_FORMAT", "text")).lower()

    handler = logging.StreamHandler()
    if resolved_format == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(resolved_level)
    for name in _LOGGER_NAMES:
        logging.getLogger(name).setLevel(resolved_level)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return ``name`` or the backend application logger."""
    return logging.getLogger(name or "authress_sso_login_backend.app")


configure_logging()


__all__ = ["JsonFormatter", "configure_logging", "get_logger"]
