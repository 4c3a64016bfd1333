"""Plugin options resolved from defaults, stored values and overrides."""

from __future__ import annotations
import logging
from collections.abc import Mapping
from typing import Any, Literal, overload
from urllib.parse import urlencode, urlsplit, urlunsplit
from dynaconf import Dynaconf
from authress_sso_login.overrides import ConstantOverrides, get_constant_name
from authress_sso_login.storage import BaseOptionStorage


logger = logging.getLogger(__name__)

CONFIGURATION_DATABASE_NAME = "authress_settings"
"""Name of the stored record holding every plugin option."""


def _origin(url: str) -> str:
    parts = urlsplit(url)
    if not parts.path:
        return url
    return urlunsplit((parts.scheme, parts.netloc, "", "", ""))


def _split_list(value: Any) -> list[str]:
    if not value:
        return []
    return [item.strip() for item in str(value).split(",")]


class Options:
    """Configuration accessor with environment override semantics.

    Overridden keys always report the environment value, are never written
    back to storage and cannot be changed through :meth:`set`.
    """

    def __init__(
        self,
        storage: BaseOptionStorage,
        settings: Dynaconf,
        *,
        overrides: ConstantOverrides | None = None,
    ) -> None:
        """Bind the store to its storage and resolve environment overrides."""
        self._storage = storage
        self._settings = settings
        self._cached_options: dict[str, Any] | None = None
        self._constant_options = (
            overrides
            if overrides is not None
            else ConstantOverrides.from_environment(self.get_defaults(keys_only=True))
        )

    @property
    def configuration_database_name(self) -> str:
        """Return the name of the stored settings record."""
        return CONFIGURATION_DATABASE_NAME

    @property
    def overrides(self) -> ConstantOverrides:
        """Return the environment overrides in effect."""
        return self._constant_options

    @property
    def home_url(self) -> str:
        """Return the public home URL of the site."""
        return str(self._settings.get("HOME_URL"))

    @property
    def site_url(self) -> str:
        """Return the base URL the application itself is served from."""
        return str(self._settings.get("SITE_URL") or self.home_url)

    def get_constant_name(self, key: str) -> str:
        """Return the environment variable consulted for ``key``."""
        return get_constant_name(key)

    def has_constant_val(self, key: str) -> bool:
        """Return ``True`` when ``key`` is pinned by the environment."""
        return key in self._constant_options

    def get_constant_val(self, key: str) -> Any:
        """Return the environment value for ``key`` or ``None``."""
        return self._constant_options.get(key)

    def get_all_constant_keys(self) -> set[str]:
        """Return every key pinned by the environment."""
        return set(self._constant_options)

    def get_options(self) -> dict[str, Any]:
        """Return the merged options, loading them on first use."""
        if self._cached_options is None:
            options = self._storage.get_option(self.configuration_database_name, {})
            # Fresh install: nothing stored yet.
            if not options or not isinstance(options, Mapping):
                options = self.defaults()
            merged = dict(options)
            merged.update(self._constant_options)
            self._cached_options = merged
        return dict(self._cached_options)

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value for ``key`` falling back to ``default``.

        When neither a value nor ``default`` is available, the built-in
        default for the key is returned (``None`` for unknown keys).
        """
        value = self.get_options().get(key)
        if value is not None:
            return value
        if default is not None:
            return default
        return self.defaults().get(key)

    def set(self, key: str, value: Any, persist: bool = True) -> bool:
        """Update ``key`` in memory and optionally persist every option.

        Returns ``False`` without changing anything when the key is pinned by
        the environment.
        """
        if self.has_constant_val(key):
            return False

        options = self.get_options()
        options[key] = value
        self._cached_options = options

        if not persist:
            return True
        return self.update_all()

    def remove(self, key: str) -> None:
        """Drop ``key`` from the in-memory options."""
        if self.has_constant_val(key):
            return

        options = self.get_options()
        options.pop(key, None)
        self._cached_options = options

    def update_all(self) -> bool:
        """Persist the in-memory options without the overridden keys."""
        options = self.get_options()
        for key in self.get_all_constant_keys():
            options.pop(key, None)
        saved = self._storage.update_option(self.configuration_database_name, options)
        logger.debug("Persisted %d options (saved=%s)", len(options), saved)
        return saved

    def save(self) -> bool:
        """Persist the options for the first time."""
        self.get_options()
        return self.update_all()

    def delete(self) -> bool:
        """Delete the stored options record."""
        return self._storage.delete_option(self.configuration_database_name)

    def reset(self) -> bool:
        """Replace the stored options with the defaults."""
        self._cached_options = None
        self.delete()
        return self.save()

    @overload
    def get_defaults(self, keys_only: Literal[True]) -> list[str]: ...

    @overload
    def get_defaults(self, keys_only: Literal[False] = ...) -> dict[str, Any]: ...

    def get_defaults(self, keys_only: bool = False) -> dict[str, Any] | list[str]:
        """Return the default options, or only their keys."""
        defaults = self.defaults()
        return list(defaults) if keys_only else defaults

    def get_default(self, key: str) -> Any:
        """Return the built-in default for ``key``."""
        return self.defaults()[key]

    def get_web_origins(self) -> list[str]:
        """Return the allowed web origins derived from the home and site URLs."""
        home_origin = _origin(self.home_url)
        site_origin = _origin(self.site_url)
        if home_origin == site_origin:
            return [home_origin]
        return [home_origin, site_origin]

    def get_login_url(self, protocol: str | None = None) -> str:
        """Return the URL the hosted login flow should call back to."""
        if protocol is None and self.get("force_https_callback"):
            protocol = "https"
        parts = urlsplit(self.site_url)
        path = parts.path.rstrip("/") + "/index.php"
        return urlunsplit(
            (
                protocol or parts.scheme,
                parts.netloc,
                path,
                urlencode({"authress": 1}),
                "",
            )
        )

    def get_auth_organization(self) -> str:
        """Return the configured organization, or an empty string."""
        return str(self.get("organization", ""))

    def get_lock_connections(self) -> list[str]:
        """Return the configured login connections."""
        return _split_list(self.get("lock_connections"))

    def add_lock_connection(self, connection: str) -> bool:
        """Add ``connection`` to the login connections when missing."""
        connections = self.get_lock_connections()
        if connection in connections:
            return True
        connections.append(connection)
        return self.set("lock_connections", ",".join(connections))

    def strategy_skips_verified_email(self, strategy: str) -> bool:
        """Return ``True`` when ``strategy`` may skip email verification."""
        skip_strategies = str(self.get("skip_strategies") or "").strip()
        if not skip_strategies:
            return False
        return strategy in _split_list(skip_strategies)

    def defaults(self) -> dict[str, Any]:
        """Return the options used on a fresh install or after a reset."""
        return {
            # System
            "version": 1,
            "applicationId": "",
            "customDomain": "",
            "accessKey": "",
            "default_login_redirection": self.home_url,
            "authress_server_domain": "authress.io",
            "last_step": 1,
            "db_connection_name": "",
            # Basic
            "domain": "",
            "client_secret": "",
            "organization": "",
            "cache_expiration": 1440,
            "wordpress_login_enabled": "link",
            "wle_code": "",
            # Features
            "auto_login": True,
            "auto_login_method": "",
            "singlelogout": True,
            "override_wp_avatars": True,
            # Embedded
            "passwordless_enabled": False,
            "icon_url": "",
            "form_title": "SSO Login",
            "gravatar": True,
            "username_style": "",
            "primary_color": "",
            "extra_conf": "",
            "custom_cdn_url": False,
            "lock_connections": "",
            # Advanced
            "requires_verified_email": True,
            "skip_strategies": "",
            "remember_users_session": True,
            "auto_provisioning": True,
            "valid_proxy_ip": "",
        }


__all__ = ["CONFIGURATION_DATABASE_NAME", "Options"]
