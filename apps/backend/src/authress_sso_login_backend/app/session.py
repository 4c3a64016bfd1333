"""Session state derived from the incoming request."""

from __future__ import annotations
from dataclasses import dataclass
from fastapi import Request


SESSION_COOKIE_NAME = "authress_session"


@dataclass(slots=True, frozen=True)
class CookieSession:
    """Treat a request carrying the session cookie as signed in."""

    request: Request

    @property
    def session_id(self) -> str:
        """Return the session cookie value, or an empty string."""
        return self.request.cookies.get(SESSION_COOKIE_NAME) or ""

    @property
    def is_logged_in(self) -> bool:
        """Return ``True`` when the session cookie is present and non-empty."""
        return bool(self.session_id)


__all__ = ["CookieSession", "SESSION_COOKIE_NAME"]
