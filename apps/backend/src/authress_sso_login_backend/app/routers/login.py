"""Login page rendering the hosted Authress widget."""

from __future__ import annotations
from typing import Annotated
from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from authress_sso_login.login import LoginWidget, SessionState
from authress_sso_login.options import Options
from authress_sso_login.sanitization import esc_html
from authress_sso_login_backend.app.dependencies import (
    get_login_widget,
    get_options,
    get_session,
)


router = APIRouter()


@router.get("/login", response_class=HTMLResponse)
def login_page(
    widget: Annotated[LoginWidget, Depends(get_login_widget)],
    options: Annotated[Options, Depends(get_options)],
    session: Annotated[SessionState, Depends(get_session)],
    force: str | None = None,
) -> Response:
    """Render the login widget, or redirect visitors that are signed in.

    Any ``force`` parameter, even an empty one, redisplays the form.
    """
    markup = widget.render(session, force=force is not None)
    if markup is None:
        return RedirectResponse(
            str(options.get("default_login_redirection")), status_code=303
        )
    title = esc_html(options.get("form_title"))
    return HTMLResponse(
        f"<!DOCTYPE html><html><head><title>{title}</title></head>"
        f"<body>{markup}</body></html>"
    )


__all__ = ["router"]
