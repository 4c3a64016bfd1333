"""Tests covering the option storage implementations."""

from __future__ import annotations
import sqlite3
from pathlib import Path
import pytest
from authress_sso_login import config
from authress_sso_login.errors import StorageConfigurationError
from authress_sso_login.storage import (
    InMemoryOptionStorage,
    SqliteOptionStorage,
    create_storage,
)


def test_inmemory_storage_round_trip() -> None:
    storage = InMemoryOptionStorage()

    assert storage.get_option("missing") is None
    assert storage.get_option("missing", {}) == {}
    assert storage.update_option("settings", {"applicationId": "app_1"})
    assert storage.get_option("settings") == {"applicationId": "app_1"}
    assert storage.delete_option("settings")
    assert not storage.delete_option("settings")
    assert storage.get_option("settings") is None


def test_inmemory_storage_returns_copies() -> None:
    """Mutating a read value must not change the stored record."""

    storage = InMemoryOptionStorage()
    record = {"lock_connections": "github"}
    storage.update_option("settings", record)
    record["lock_connections"] = "google"

    loaded = storage.get_option("settings")
    loaded["lock_connections"] = "okta"

    assert storage.get_option("settings") == {"lock_connections": "github"}


def test_sqlite_storage_persists_between_instances(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "options.sqlite"
    storage = SqliteOptionStorage(path)

    assert storage.update_option("log", [{"code": "500", "count": 2}])
    assert storage.update_option("log", [{"code": "401", "count": 1}])

    reopened = SqliteOptionStorage(path)
    assert reopened.get_option("log") == [{"code": "401", "count": 1}]
    assert reopened.delete_option("log")
    assert reopened.get_option("log", []) == []
    assert not reopened.delete_option("log")


def test_sqlite_storage_ignores_malformed_rows(tmp_path: Path) -> None:
    path = tmp_path / "options.sqlite"
    storage = SqliteOptionStorage(path)
    with sqlite3.connect(path) as conn:
        conn.execute(
            "INSERT INTO options (option_name, option_value) VALUES (?, ?)",
            ("settings", "{not json"),
        )
        conn.commit()

    assert storage.get_option("settings", "fallback") == "fallback"


def test_sqlite_storage_rejects_unserializable_values(tmp_path: Path) -> None:
    storage = SqliteOptionStorage(tmp_path / "options.sqlite")

    assert not storage.update_option("settings", {"callback": object()})
    assert storage.get_option("settings") is None


def test_create_storage_selects_backend(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    assert isinstance(
        create_storage(config.get_settings(refresh=True)), InMemoryOptionStorage
    )

    monkeypatch.setenv("AUTHRESS_STORAGE_BACKEND", "sqlite")
    monkeypatch.setenv("AUTHRESS_SQLITE_PATH", str(tmp_path / "options.sqlite"))
    storage = create_storage(config.get_settings(refresh=True))

    assert isinstance(storage, SqliteOptionStorage)
    assert (tmp_path / "options.sqlite").exists()


def test_create_storage_rejects_unknown_backend() -> None:
    settings = config.get_settings(refresh=True)
    settings.set("STORAGE_BACKEND", "redis")

    with pytest.raises(StorageConfigurationError):
        create_storage(settings)
