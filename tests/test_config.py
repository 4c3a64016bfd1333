"""Tests for configuration helpers."""

import pytest
from dynaconf import Dynaconf
from authress_sso_login import config


def test_settings_defaults() -> None:
    """Default settings use in-memory storage and a localhost site."""

    settings = config.get_settings(refresh=True)

    assert settings.storage_backend == "inmemory"
    assert settings.sqlite_path is None
    assert settings.home_url == "http://localhost:8000"
    assert settings.site_url == "http://localhost:8000"
    assert settings.plugin_js_url == "/static/js/"
    assert settings.log_level == "INFO"


def test_settings_invalid_backend(monkeypatch: pytest.MonkeyPatch) -> None:
    """Invalid storage backend values raise a helpful error."""

    monkeypatch.setenv("AUTHRESS_STORAGE_BACKEND", "redis")

    with pytest.raises(ValueError):
        config.get_settings(refresh=True)


def test_settings_sqlite_backend_uses_default_path(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """The sqlite backend falls back to the default database path."""

    monkeypatch.setenv("AUTHRESS_STORAGE_BACKEND", "SQLite")

    settings = config.get_settings(refresh=True)

    assert settings.storage_backend == "sqlite"
    assert settings.sqlite_path == ".authress/options.sqlite"


def test_settings_normalize_urls(monkeypatch: pytest.MonkeyPatch) -> None:
    """Trailing slashes are dropped and the script URL ends with one."""

    monkeypatch.setenv("AUTHRESS_HOME_URL", "https://example.com/blog/")
    monkeypatch.setenv("AUTHRESS_SITE_URL", "https://admin.example.com/")
    monkeypatch.setenv("AUTHRESS_PLUGIN_JS_URL", "https://cdn.example.com/js")

    settings = config.get_settings(refresh=True)

    assert settings.home_url == "https://example.com/blog"
    assert settings.site_url == "https://admin.example.com"
    assert settings.plugin_js_url == "https://cdn.example.com/js/"


def test_settings_reject_relative_home_url(monkeypatch: pytest.MonkeyPatch) -> None:
    """The home URL must be absolute."""

    monkeypatch.setenv("AUTHRESS_HOME_URL", "example.com")

    with pytest.raises(ValueError):
        config.get_settings(refresh=True)


def test_normalize_backend_none() -> None:
    """Explicit `None` backend values should fall back to defaults."""

    source = Dynaconf(settings_files=[], load_dotenv=False, environments=False)
    source.set("STORAGE_BACKEND", None)

    normalized = config._normalize_settings(source)

    assert normalized.storage_backend == "inmemory"


def test_get_settings_refresh(monkeypatch: pytest.MonkeyPatch) -> None:
    """get_settings refresh flag should reload cached values."""

    monkeypatch.setenv("AUTHRESS_HOME_URL", "https://initial.example.com")
    settings = config.get_settings(refresh=True)
    assert settings.home_url == "https://initial.example.com"

    monkeypatch.setenv("AUTHRESS_HOME_URL", "https://updated.example.com")
    assert config.get_settings().home_url == "https://initial.example.com"
    refreshed = config.get_settings(refresh=True)
    assert refreshed.home_url == "https://updated.example.com"


def test_admin_token(monkeypatch: pytest.MonkeyPatch) -> None:
    """The admin token is optional and blank values count as unset."""

    assert config.get_settings(refresh=True).admin_token is None

    monkeypatch.setenv("AUTHRESS_ADMIN_TOKEN", "  ")
    assert config.get_settings(refresh=True).admin_token is None

    monkeypatch.setenv("AUTHRESS_ADMIN_TOKEN", "s3cret")
    assert config.get_settings(refresh=True).admin_token == "s3cret"
