"""Bounded error log persisted alongside the plugin options."""

from __future__ import annotations
import json
import logging
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any
from pydantic import BaseModel, Field, ValidationError
from authress_sso_login.errors import ErrorResult
from authress_sso_login.sanitization import sanitize_text
from authress_sso_login.storage import BaseOptionStorage


logger = logging.getLogger(__name__)

OPTION_NAME = "authress_error_log"
"""Name of the stored record holding the error log."""

ERROR_LOG_ENTRY_LIMIT = 30
"""Maximum number of entries kept in the log."""

UNKNOWN_CODE = "unknown_code"
UNKNOWN_MESSAGE = "Unknown error message"

_MERGE_IGNORED_FIELDS = ("date", "count")


class ErrorLogEntry(BaseModel):
    """Single row of the error log."""

    section: str
    code: str
    message: str
    date: int
    count: int = Field(default=1, ge=1)


@dataclass(slots=True, frozen=True)
class StructuredError:
    """Error object exposing a code and a message."""

    code: str
    message: str


@dataclass(slots=True, frozen=True)
class HttpResponseError:
    """HTTP response payload describing a failed remote call."""

    code: str | None
    message: str | None


@dataclass(slots=True, frozen=True)
class PlainMessage:
    """Bare error message."""

    text: str


@dataclass(slots=True, frozen=True)
class Unknown:
    """Anything else, logged as its JSON representation."""

    raw: Any


ErrorSource = StructuredError | HttpResponseError | PlainMessage | Unknown


def classify_error(error: Any) -> ErrorSource:
    """Return the variant describing ``error``."""
    if isinstance(error, ErrorResult):
        return StructuredError(code=str(error.code), message=str(error.message))
    if isinstance(error, BaseException):
        code = getattr(error, "code", None)
        if code is None or code == "":
            code = type(error).__name__
        return StructuredError(code=str(code), message=str(error))
    if isinstance(error, Mapping):
        response = error.get("response")
        if response and isinstance(response, Mapping):
            code = response.get("code")
            message = response.get("message")
            return HttpResponseError(
                code=sanitize_text(code) if code else None,
                message=sanitize_text(message) if message else None,
            )
        return Unknown(raw=error)
    if isinstance(error, str | int | float):
        return PlainMessage(text=str(error))
    return Unknown(raw=error)


def _encode_unknown(raw: Any) -> str:
    try:
        return json.dumps(raw, default=str)
    except (TypeError, ValueError):
        return repr(raw)


def normalize_error(section: str, error: Any) -> dict[str, str]:
    """Build the canonical log entry fields for ``error``."""
    entry = {
        "section": str(section),
        "code": UNKNOWN_CODE,
        "message": UNKNOWN_MESSAGE,
    }
    match classify_error(error):
        case StructuredError(code=code, message=message):
            entry["code"] = code
            entry["message"] = message
        case HttpResponseError(code=code, message=message):
            if code:
                entry["code"] = code
            if message:
                entry["message"] = message
        case PlainMessage(text=text):
            entry["message"] = text
        case Unknown(raw=raw):
            entry["message"] = _encode_unknown(raw)
    return entry


def _canonical(entry: Mapping[str, Any] | None) -> str:
    return json.dumps(entry, sort_keys=True, default=str)


class ErrorLog:
    """Most-recent-first log of distinct errors capped at 30 entries.

    Consecutive identical errors collapse into the head entry, whose count is
    incremented and date refreshed.
    """

    def __init__(
        self,
        storage: BaseOptionStorage,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Bind the log to its storage."""
        self._storage = storage
        self._clock = clock

    def get(self) -> list[dict[str, Any]]:
        """Return the stored log, or an empty list."""
        log = self._storage.get_option(OPTION_NAME)
        if not log or not isinstance(log, list):
            return []
        return log

    def entries(self) -> list[ErrorLogEntry]:
        """Return the log as validated entries, skipping malformed rows."""
        entries: list[ErrorLogEntry] = []
        for row in self.get():
            try:
                entries.append(ErrorLogEntry.model_validate(row))
            except ValidationError:
                logger.warning("Skipping malformed error log row: %r", row)
        return entries

    def add(self, new_entry: Mapping[str, Any]) -> bool:
        """Add ``new_entry``, merging it into the head entry when identical."""
        log = self.get()
        now = int(self._clock())

        last_entry = None
        if log and isinstance(log[0], Mapping):
            last_entry = {
                key: value
                for key, value in log[0].items()
                if key not in _MERGE_IGNORED_FIELDS
            }

        if last_entry is not None and _canonical(last_entry) == _canonical(new_entry):
            head = dict(log[0])
            head["date"] = now
            head["count"] = int(head.get("count") or 1) + 1
            log[0] = head
        else:
            entry = dict(new_entry)
            entry["date"] = now
            entry["count"] = 1
            log.insert(0, entry)

        return self._update(log)

    def clear(self) -> bool:
        """Empty the log."""
        return self._storage.update_option(OPTION_NAME, [])

    def delete(self) -> bool:
        """Delete the stored log record."""
        return self._storage.delete_option(OPTION_NAME)

    def _update(self, log: list[dict[str, Any]]) -> bool:
        if len(log) > ERROR_LOG_ENTRY_LIMIT:
            log.pop()
        return self._storage.update_option(OPTION_NAME, log)

    @classmethod
    def insert_error(
        cls, storage: BaseOptionStorage, section: str, error: Any
    ) -> bool:
        """Normalize ``error`` and record it under ``section``.

        Never raises; failures to record the error are logged and reported
        as ``False``.
        """
        try:
            entry = normalize_error(section, error)
            logger.warning(
                "Recording error in %s: [%s] %s",
                entry["section"],
                entry["code"],
                entry["message"],
                extra={"error_section": entry["section"], "error_code": entry["code"]},
            )
            return cls(storage).add(entry)
        except Exception:
            logger.exception("Failed to record error for section %s", section)
            return False


__all__ = [
    "ERROR_LOG_ENTRY_LIMIT",
    "OPTION_NAME",
    "ErrorLog",
    "ErrorLogEntry",
    "ErrorSource",
    "HttpResponseError",
    "PlainMessage",
    "StructuredError",
    "Unknown",
    "classify_error",
    "normalize_error",
]
