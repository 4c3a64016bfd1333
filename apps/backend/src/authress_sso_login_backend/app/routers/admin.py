"""Admin dashboard routes for the settings form and the error log."""

from __future__ import annotations
import asyncio
import logging
import re
from typing import Annotated, Any
from fastapi import APIRouter, Depends, Form, HTTPException, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from authress_sso_login.admin import AuthressSettingsPage, render_error_log_page
from authress_sso_login.error_log import ErrorLog
from authress_sso_login.errors import ErrorResult
from authress_sso_login.nonces import CLEAR_ERROR_LOG_ACTION, NonceManager
from authress_sso_login.options import CONFIGURATION_DATABASE_NAME
from authress_sso_login.storage import BaseOptionStorage
from authress_sso_login_backend.app.authentication import authenticate_admin
from authress_sso_login_backend.app.dependencies import (
    get_error_log,
    get_nonces,
    get_settings_page,
    get_storage,
)
from authress_sso_login_backend.app.session import CookieSession


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", dependencies=[Depends(authenticate_admin)])

_FIELD_PATTERN = re.compile(
    rf"^{re.escape(CONFIGURATION_DATABASE_NAME)}\[(?P<key>[^\]]+)\]$"
)


def _page(title: str, body: str) -> HTMLResponse:
    return HTMLResponse(
        f"<!DOCTYPE html><html><head><title>{title}</title></head>"
        f'<body><div class="wrap"><h1>{title}</h1>{body}</div></body></html>'
    )


def parse_settings_form(form: Any) -> dict[str, Any]:
    """Extract ``authress_settings[<key>]`` fields from a submitted form."""
    values: dict[str, Any] = {}
    for name, value in form.multi_items():
        match = _FIELD_PATTERN.match(name)
        if match:
            values[match.group("key")] = value
    return values


def _save_settings(
    page: AuthressSettingsPage, storage: BaseOptionStorage, values: dict[str, Any]
) -> None:
    if not page.save(values):
        ErrorLog.insert_error(
            storage,
            "admin_settings",
            ErrorResult(code="settings_not_saved", message="Settings were not saved."),
        )


@router.get("/settings", response_class=HTMLResponse)
def settings_form(
    page: Annotated[AuthressSettingsPage, Depends(get_settings_page)],
) -> HTMLResponse:
    """Render the settings form."""
    return _page("Authress SSO Login Settings", page.render_page("/admin/settings"))


@router.post("/settings", response_class=HTMLResponse)
async def submit_settings(
    request: Request,
    page: Annotated[AuthressSettingsPage, Depends(get_settings_page)],
    storage: Annotated[BaseOptionStorage, Depends(get_storage)],
) -> HTMLResponse:
    """Validate and store a settings form submission."""
    form = await request.form()
    values = parse_settings_form(form)
    # Storage backends are blocking.
    await asyncio.to_thread(_save_settings, page, storage, values)
    logger.info("Settings form submitted", extra={"fields": sorted(values)})
    return _page("Authress SSO Login Settings", page.render_page("/admin/settings"))


@router.get("/error-log", response_class=HTMLResponse)
def error_log_page(
    request: Request,
    error_log: Annotated[ErrorLog, Depends(get_error_log)],
    nonces: Annotated[NonceManager, Depends(get_nonces)],
) -> HTMLResponse:
    """Render the error log table."""
    nonce = nonces.create(CLEAR_ERROR_LOG_ACTION, CookieSession(request).session_id)
    body = render_error_log_page(error_log.entries(), "/admin/error-log/clear", nonce)
    return _page("Error Log", body)


@router.post("/error-log/clear")
def clear_error_log(
    request: Request,
    error_log: Annotated[ErrorLog, Depends(get_error_log)],
    nonces: Annotated[NonceManager, Depends(get_nonces)],
    nonce: Annotated[str, Form()] = "",
) -> RedirectResponse:
    """Empty the error log and return to it."""
    subject = CookieSession(request).session_id
    if not nonces.verify(nonce, CLEAR_ERROR_LOG_ACTION, subject):
        logger.warning("Rejected error log clear with an invalid nonce")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="Invalid or expired nonce"
        )
    if not error_log.clear():
        logger.error("Failed to clear the error log")
    return RedirectResponse("/admin/error-log", status_code=303)


__all__ = ["parse_settings_form", "router"]
