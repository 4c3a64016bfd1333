"""Error types shared across the Authress SSO login package."""

from __future__ import annotations
from dataclasses import dataclass


class AuthressSsoLoginError(RuntimeError):
    """Base error type for Authress SSO login operations."""


class StorageConfigurationError(AuthressSsoLoginError):
    """Raised when the configured option storage cannot be created."""


@dataclass(slots=True, frozen=True)
class ErrorResult:
    """Error value carrying a machine readable code and a message.

    Returned instead of raised by collaborators such as the hosted identity
    API client, and accepted as-is by the error log.
    """

    code: str
    message: str


__all__ = ["AuthressSsoLoginError", "ErrorResult", "StorageConfigurationError"]
