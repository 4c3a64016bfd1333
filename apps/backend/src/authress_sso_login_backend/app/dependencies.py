"""FastAPI dependency providers for the backend routers."""

from __future__ import annotations
from typing import Annotated
from dynaconf import Dynaconf
from fastapi import Depends, Request
from authress_sso_login.admin import AuthressSettingsPage
from authress_sso_login.error_log import ErrorLog
from authress_sso_login.hooks import FilterRegistry
from authress_sso_login.login import LoginWidget, SessionState
from authress_sso_login.nonces import NonceManager
from authress_sso_login.options import Options
from authress_sso_login.overrides import ConstantOverrides
from authress_sso_login.storage import BaseOptionStorage
from authress_sso_login_backend.app.session import CookieSession


def get_settings(request: Request) -> Dynaconf:
    """Return the service settings held by the application."""
    return request.app.state.settings


def get_storage(request: Request) -> BaseOptionStorage:
    """Return the option storage held by the application."""
    return request.app.state.storage


def get_overrides(request: Request) -> ConstantOverrides:
    """Return the overrides resolved when the application started."""
    return request.app.state.overrides


def get_filters(request: Request) -> FilterRegistry:
    """Return the extension point registry held by the application."""
    return request.app.state.filters


def get_options(
    storage: Annotated[BaseOptionStorage, Depends(get_storage)],
    settings: Annotated[Dynaconf, Depends(get_settings)],
    overrides: Annotated[ConstantOverrides, Depends(get_overrides)],
) -> Options:
    """Return a request-scoped options store."""
    return Options(storage, settings, overrides=overrides)


def get_error_log(
    storage: Annotated[BaseOptionStorage, Depends(get_storage)],
) -> ErrorLog:
    """Return the error log bound to the option storage."""
    return ErrorLog(storage)


def get_settings_page(
    options: Annotated[Options, Depends(get_options)],
) -> AuthressSettingsPage:
    """Return the settings page for the current request."""
    return AuthressSettingsPage(options)


def get_login_widget(
    options: Annotated[Options, Depends(get_options)],
    filters: Annotated[FilterRegistry, Depends(get_filters)],
    settings: Annotated[Dynaconf, Depends(get_settings)],
) -> LoginWidget:
    """Return the login widget renderer."""
    return LoginWidget(options, filters, settings)


def get_session(request: Request) -> SessionState:
    """Return the session state of the current visitor."""
    return CookieSession(request)


def get_nonces(
    settings: Annotated[Dynaconf, Depends(get_settings)],
) -> NonceManager:
    """Return the form token manager keyed by the admin token."""
    return NonceManager(str(settings.get("ADMIN_TOKEN") or ""))


__all__ = [
    "get_error_log",
    "get_filters",
    "get_login_widget",
    "get_nonces",
    "get_options",
    "get_overrides",
    "get_session",
    "get_settings",
    "get_settings_page",
    "get_storage",
]
