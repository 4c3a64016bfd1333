"""Backend entrypoint package for the Authress SSO login FastAPI service."""

from authress_sso_login_backend.app import app, create_app


__all__ = ["app", "create_app"]
