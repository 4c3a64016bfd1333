"""Signed, expiring form tokens for state-changing admin actions."""

from __future__ import annotations
import hashlib
import hmac
import logging
import time
from collections.abc import Callable


logger = logging.getLogger(__name__)

NONCE_LIFETIME_SECONDS = 12 * 60 * 60
CLEAR_ERROR_LOG_ACTION = "authress_sso_login_clear_error_log"


class NonceManager:
    """Issue and verify HMAC-signed tokens bound to an action and a session.

    A token is ``<issued at>.<signature>``; it verifies only for the same
    action and session subject, and only until it is older than the lifetime.
    """

    def __init__(
        self,
        secret: str,
        *,
        lifetime: int = NONCE_LIFETIME_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Sign tokens with ``secret``."""
        self._secret = secret.encode("utf-8")
        self._lifetime = lifetime
        self._clock = clock

    def _sign(self, action: str, subject: str, issued: int) -> str:
        message = f"{action}|{subject}|{issued}".encode()
        return hmac.new(self._secret, message, hashlib.sha256).hexdigest()

    def create(self, action: str, subject: str = "") -> str:
        """Return a token for ``action`` bound to ``subject``."""
        issued = int(self._clock())
        return f"{issued}.{self._sign(action, subject, issued)}"

    def verify(self, token: str | None, action: str, subject: str = "") -> bool:
        """Return ``True`` when ``token`` was issued for ``action`` and ``subject``."""
        if not token:
            return False
        issued_raw, _, signature = token.partition(".")
        if not issued_raw.isdigit() or not signature:
            return False
        issued = int(issued_raw)
        age = self._clock() - issued
        if age < 0 or age > self._lifetime:
            logger.debug("Expired nonce for %s", action)
            return False
        return hmac.compare_digest(signature, self._sign(action, subject, issued))


__all__ = ["CLEAR_ERROR_LOG_ACTION", "NONCE_LIFETIME_SECONDS", "NonceManager"]
