"""System metadata routes."""

from __future__ import annotations
from typing import Annotated
from dynaconf import Dynaconf
from fastapi import APIRouter, Depends
from authress_sso_login_backend.app.dependencies import get_settings


router = APIRouter()


@router.get("/system/health")
def get_system_health() -> dict[str, str]:
    """Return a lightweight unauthenticated health status."""
    return {"status": "ok"}


@router.get("/system/info")
def get_system_info(
    settings: Annotated[Dynaconf, Depends(get_settings)],
) -> dict[str, str]:
    """Return the running version and storage backend."""
    return {
        "version": str(settings.get("VERSION")),
        "storage_backend": str(settings.get("STORAGE_BACKEND")),
    }


__all__ = ["router"]
