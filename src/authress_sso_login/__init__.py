"""Authress single sign-on login integration."""

from authress_sso_login.error_log import ErrorLog, ErrorLogEntry
from authress_sso_login.errors import ErrorResult
from authress_sso_login.hooks import FilterRegistry
from authress_sso_login.login import LoginWidget
from authress_sso_login.options import Options
from authress_sso_login.overrides import ConstantOverrides
from authress_sso_login.storage import (
    InMemoryOptionStorage,
    SqliteOptionStorage,
    create_storage,
)


__all__ = [
    "ConstantOverrides",
    "ErrorLog",
    "ErrorLogEntry",
    "ErrorResult",
    "FilterRegistry",
    "InMemoryOptionStorage",
    "LoginWidget",
    "Options",
    "SqliteOptionStorage",
    "create_storage",
]
