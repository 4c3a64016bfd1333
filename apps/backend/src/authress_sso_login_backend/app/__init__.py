"""FastAPI application entrypoint for the Authress SSO login backend."""

from __future__ import annotations
from authress_sso_login_backend.app.factory import create_app


app = create_app()


__all__ = ["app", "create_app"]
