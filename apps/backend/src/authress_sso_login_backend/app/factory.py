"""Application factory for the Authress SSO login backend."""

from __future__ import annotations
from dynaconf import Dynaconf
from fastapi import FastAPI
from authress_sso_login.config import get_settings
from authress_sso_login.hooks import FilterRegistry
from authress_sso_login.options import Options
from authress_sso_login.overrides import ConstantOverrides
from authress_sso_login.storage import BaseOptionStorage, create_storage
from authress_sso_login_backend.app.logging_config import configure_logging, get_logger
from authress_sso_login_backend.app.routers import admin, login, system


def create_app(
    settings: Dynaconf | None = None,
    *,
    storage: BaseOptionStorage | None = None,
    filters: FilterRegistry | None = None,
    overrides: ConstantOverrides | None = None,
) -> FastAPI:
    """Create the FastAPI application with its shared collaborators."""
    settings = settings if settings is not None else get_settings()
    configure_logging(level=settings.get("LOG_LEVEL"))
    storage = storage if storage is not None else create_storage(settings)

    if overrides is None:
        overrides = Options(storage, settings).overrides

    app = FastAPI(title="Authress SSO Login", version=str(settings.get("VERSION")))
    app.state.settings = settings
    app.state.storage = storage
    app.state.filters = filters if filters is not None else FilterRegistry()
    app.state.overrides = overrides

    app.include_router(system.router)
    app.include_router(login.router)
    app.include_router(admin.router)

    get_logger().info(
        "Authress SSO login backend ready",
        extra={
            "storage_backend": settings.get("STORAGE_BACKEND"),
            "overridden_keys": sorted(overrides),
        },
    )
    return app


__all__ = ["create_app"]
