"""Admin dashboard rendering for the Authress SSO login options."""

from authress_sso_login.admin.error_log import render_error_log_page
from authress_sso_login.admin.fields import AdminFields
from authress_sso_login.admin.settings import (
    AuthressSettingsPage,
    FieldKind,
    SettingsField,
    SettingsNotice,
    SettingsPage,
    SettingsSection,
)


__all__ = [
    "AdminFields",
    "AuthressSettingsPage",
    "FieldKind",
    "SettingsField",
    "SettingsNotice",
    "SettingsPage",
    "SettingsSection",
    "render_error_log_page",
]
