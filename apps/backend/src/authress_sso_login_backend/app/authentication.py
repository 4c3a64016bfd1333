"""Admin authentication for the settings and error log routes."""

from __future__ import annotations
import base64
import binascii
import hmac
import logging
from typing import Annotated
from dynaconf import Dynaconf
from fastapi import Depends, HTTPException, Request, status
from authress_sso_login.errors import AuthressSsoLoginError
from authress_sso_login_backend.app.dependencies import get_settings


logger = logging.getLogger(__name__)

ADMIN_REALM = "Authress SSO Login admin"


class AdminAuthenticationError(AuthressSsoLoginError):
    """Raised when an admin request does not carry the configured token."""

    def __init__(self, message: str, *, code: str) -> None:
        """Store the message and machine readable code."""
        super().__init__(message)
        self.message = message
        self.code = code

    def as_http_exception(self) -> HTTPException:
        """Return the 401 response asking the client to authenticate."""
        return HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"message": self.message, "code": self.code},
            headers={"WWW-Authenticate": f'Basic realm="{ADMIN_REALM}"'},
        )


def _extract_credential(header_value: str | None) -> str:
    """Return the bearer token or the basic auth password from the header."""
    if not header_value:
        raise AdminAuthenticationError(
            "Missing admin credentials", code="auth.missing_token"
        )
    scheme, _, value = header_value.partition(" ")
    value = value.strip()
    if scheme.lower() == "bearer" and value:
        return value
    if scheme.lower() == "basic" and value:
        try:
            decoded = base64.b64decode(value, validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as exc:
            raise AdminAuthenticationError(
                "Malformed basic credentials", code="auth.invalid_scheme"
            ) from exc
        _, _, password = decoded.partition(":")
        return password
    raise AdminAuthenticationError(
        "Authorization header must use the Bearer or Basic scheme",
        code="auth.invalid_scheme",
    )


def authenticate_admin(
    request: Request,
    settings: Annotated[Dynaconf, Depends(get_settings)],
) -> None:
    """FastAPI dependency that admits only holders of the admin token.

    Admin routes stay closed when no ``AUTHRESS_ADMIN_TOKEN`` is configured.
    """
    expected = settings.get("ADMIN_TOKEN")
    try:
        if not expected:
            raise AdminAuthenticationError(
                "Admin access is not configured", code="auth.not_configured"
            )
        credential = _extract_credential(request.headers.get("Authorization"))
        if not hmac.compare_digest(
            credential.encode("utf-8"), str(expected).encode("utf-8")
        ):
            raise AdminAuthenticationError(
                "Invalid admin token", code="auth.invalid_token"
            )
    except AdminAuthenticationError as exc:
        logger.warning(
            "Rejected admin request to %s",
            request.url.path,
            extra={"auth_code": exc.code},
        )
        raise exc.as_http_exception() from exc


__all__ = ["ADMIN_REALM", "AdminAuthenticationError", "authenticate_admin"]
