"""Named option storage used to persist settings and the error log."""

from __future__ import annotations
import copy
import json
import logging
import sqlite3
import threading
from pathlib import Path
from typing import Any
from dynaconf import Dynaconf
from authress_sso_login.errors import StorageConfigurationError


logger = logging.getLogger(__name__)

_MISSING = object()


class BaseOptionStorage:
    """Key/value store holding one JSON-compatible value per option name."""

    def get_option(self, name: str, default: Any = None) -> Any:
        """Return the stored value for ``name`` or ``default`` when absent."""
        value = self._load(name)
        return default if value is _MISSING else value

    def update_option(self, name: str, value: Any) -> bool:
        """Persist ``value`` under ``name`` and report whether it was written."""
        return self._persist(name, value)

    def delete_option(self, name: str) -> bool:
        """Delete ``name`` and report whether anything was removed."""
        return self._remove(name)

    def _load(self, name: str) -> Any:  # pragma: no cover
        raise NotImplementedError

    def _persist(self, name: str, value: Any) -> bool:  # pragma: no cover
        raise NotImplementedError

    def _remove(self, name: str) -> bool:  # pragma: no cover
        raise NotImplementedError


class InMemoryOptionStorage(BaseOptionStorage):
    """In-memory option storage used for tests and local runs."""

    def __init__(self) -> None:
        """Create an empty ephemeral store."""
        self._store: dict[str, Any] = {}

    def _load(self, name: str) -> Any:
        if name not in self._store:
            return _MISSING
        return copy.deepcopy(self._store[name])

    def _persist(self, name: str, value: Any) -> bool:
        self._store[name] = copy.deepcopy(value)
        return True

    def _remove(self, name: str) -> bool:
        return self._store.pop(name, _MISSING) is not _MISSING


class SqliteOptionStorage(BaseOptionStorage):
    """File-backed option storage stored in a SQLite database."""

    def __init__(self, path: str | Path) -> None:
        """Create a SQLite-backed option store, creating the table if needed."""
        self._path = Path(path).expanduser()
        self._lock = threading.Lock()
        self._initialize()

    def _initialize(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with sqlite3.connect(self._path) as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS options (
                    option_name TEXT PRIMARY KEY,
                    option_value TEXT NOT NULL
                )
                """
            )
            conn.commit()

    def _load(self, name: str) -> Any:
        with self._lock, sqlite3.connect(self._path) as conn:
            cursor = conn.execute(
                "SELECT option_value FROM options WHERE option_name = ?",
                (name,),
            )
            row = cursor.fetchone()
        if row is None:
            return _MISSING
        try:
            return json.loads(row[0])
        except json.JSONDecodeError:
            logger.error("Stored option %s is not valid JSON; ignoring it", name)
            return _MISSING

    def _persist(self, name: str, value: Any) -> bool:
        try:
            payload = json.dumps(value)
        except (TypeError, ValueError):
            logger.exception("Option %s is not JSON serializable", name)
            return False
        try:
            with self._lock, sqlite3.connect(self._path) as conn:
                conn.execute(
                    """
                    INSERT OR REPLACE INTO options (option_name, option_value)
                    VALUES (?, ?)
                    """,
                    (name, payload),
                )
                conn.commit()
        except sqlite3.Error:
            logger.exception("Failed to write option %s", name)
            return False
        return True

    def _remove(self, name: str) -> bool:
        try:
            with self._lock, sqlite3.connect(self._path) as conn:
                cursor = conn.execute(
                    "DELETE FROM options WHERE option_name = ?", (name,)
                )
                conn.commit()
        except sqlite3.Error:
            logger.exception("Failed to delete option %s", name)
            return False
        return cursor.rowcount > 0


def create_storage(settings: Dynaconf) -> BaseOptionStorage:
    """Create the option storage selected by the service settings."""
    backend = settings.get("STORAGE_BACKEND")
    if backend == "inmemory":
        return InMemoryOptionStorage()
    if backend == "sqlite":
        path = settings.get("SQLITE_PATH")
        if not path:  # pragma: no cover - validated by the settings loader
            msg = "The sqlite storage backend requires AUTHRESS_SQLITE_PATH."
            raise StorageConfigurationError(msg)
        return SqliteOptionStorage(path)
    msg = f"Unsupported option storage backend: {backend!r}."
    raise StorageConfigurationError(msg)


__all__ = [
    "BaseOptionStorage",
    "InMemoryOptionStorage",
    "SqliteOptionStorage",
    "create_storage",
]
