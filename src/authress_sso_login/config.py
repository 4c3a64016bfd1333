"""Runtime configuration helpers for the Authress SSO login service."""

from __future__ import annotations
from functools import lru_cache
from typing import Literal, cast
from dynaconf import Dynaconf


StorageBackend = Literal["inmemory", "sqlite"]
"""Supported option storage backend types."""

_DEFAULTS: dict[str, object] = {
    "STORAGE_BACKEND": "inmemory",
    "SQLITE_PATH": ".authress/options.sqlite",
    "HOME_URL": "http://localhost:8000",
    "SITE_URL": None,
    "PLUGIN_JS_URL": "/static/js/",
    "VERSION": "0.1.0",
    "LOG_LEVEL": "INFO",
    "ADMIN_TOKEN": None,
}


def _build_loader() -> Dynaconf:
    """Create a Dynaconf loader wired to environment variables only."""
    return Dynaconf(
        envvar_prefix="AUTHRESS",
        settings_files=[],  # No config files, env vars only
        load_dotenv=True,
        environments=False,
    )


def _normalize_url(value: object) -> str:
    return str(value).rstrip("/")


def _normalize_settings(source: Dynaconf) -> Dynaconf:
    """Validate and fill defaults on the raw Dynaconf settings."""
    backend_raw = source.get("STORAGE_BACKEND", _DEFAULTS["STORAGE_BACKEND"])
    if backend_raw is None:
        backend = str(_DEFAULTS["STORAGE_BACKEND"]).lower()
    else:
        backend = str(backend_raw).lower()
    if backend not in {"inmemory", "sqlite"}:
        msg = "AUTHRESS_STORAGE_BACKEND must be either 'inmemory' or 'sqlite'."
        raise ValueError(msg)

    normalized = Dynaconf(
        envvar_prefix="AUTHRESS",
        settings_files=[],
        load_dotenv=False,
        environments=False,
    )
    normalized.set("STORAGE_BACKEND", cast(StorageBackend, backend))

    if backend == "sqlite":
        sqlite_path = source.get("SQLITE_PATH") or _DEFAULTS["SQLITE_PATH"]
        normalized.set("SQLITE_PATH", str(sqlite_path))
    else:
        normalized.set("SQLITE_PATH", None)

    home_url = source.get("HOME_URL") or _DEFAULTS["HOME_URL"]
    if not str(home_url).startswith(("http://", "https://")):
        msg = "AUTHRESS_HOME_URL must be an absolute http(s) URL."
        raise ValueError(msg)
    normalized.set("HOME_URL", _normalize_url(home_url))

    site_url = source.get("SITE_URL") or home_url
    if not str(site_url).startswith(("http://", "https://")):
        msg = "AUTHRESS_SITE_URL must be an absolute http(s) URL."
        raise ValueError(msg)
    normalized.set("SITE_URL", _normalize_url(site_url))

    js_url = str(source.get("PLUGIN_JS_URL") or _DEFAULTS["PLUGIN_JS_URL"])
    normalized.set("PLUGIN_JS_URL", js_url if js_url.endswith("/") else js_url + "/")

    normalized.set("VERSION", str(source.get("VERSION") or _DEFAULTS["VERSION"]))
    normalized.set(
        "LOG_LEVEL", str(source.get("LOG_LEVEL") or _DEFAULTS["LOG_LEVEL"]).upper()
    )

    admin_token = source.get("ADMIN_TOKEN")
    admin_token = str(admin_token).strip() if admin_token is not None else ""
    normalized.set("ADMIN_TOKEN", admin_token or None)

    return normalized


@lru_cache(maxsize=1)
def _load_settings() -> Dynaconf:
    """Load settings once and cache the normalized Dynaconf instance."""
    return _normalize_settings(_build_loader())


def get_settings(*, refresh: bool = False) -> Dynaconf:
    """Return the cached Dynaconf settings, reloading them if requested."""
    if refresh:
        _load_settings.cache_clear()
    return _load_settings()


__all__ = ["StorageBackend", "get_settings"]
