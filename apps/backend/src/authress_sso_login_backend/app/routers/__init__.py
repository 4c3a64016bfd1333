"""Routers exposed by the Authress SSO login backend."""

from authress_sso_login_backend.app.routers import admin, login, system


__all__ = ["admin", "login", "system"]
