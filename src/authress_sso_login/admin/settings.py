"""Settings page registry, rendering and submitted form validation."""

from __future__ import annotations
import logging
import re
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Literal
from pydantic import BaseModel
from authress_sso_login.admin.fields import (
    ERROR_FIELD_STYLE,
    REDACTED_VALUE,
    AdminFields,
    RadioButton,
)
from authress_sso_login.options import Options
from authress_sso_login.sanitization import esc_attr, esc_html


logger = logging.getLogger(__name__)

_LABEL = r"[a-z0-9]([a-z0-9-]*[a-z0-9])?"
_HOST_PATTERN = re.compile(rf"^{_LABEL}(\.{_LABEL})*(:\d+)?$")


class FieldKind(StrEnum):
    """How a submitted field value is sanitized."""

    SWITCH = "switch"
    TEXT = "text"
    PASSWORD = "password"
    TEXTAREA = "textarea"
    RADIO = "radio"


FieldRenderer = Callable[["SettingsField"], str]
FieldValidator = Callable[[Any, Any], Any]


@dataclass(slots=True)
class SettingsField:
    """Single form field bound to an option key."""

    id: str
    name: str
    render: FieldRenderer
    opt: str | None = None
    kind: FieldKind = FieldKind.TEXT
    choices: tuple[Any, ...] = ()
    validate: FieldValidator | None = None


@dataclass(slots=True)
class SettingsSection:
    """Group of fields rendered under one heading."""

    id: str
    title: str
    options_name: str
    fields: list[SettingsField] = field(default_factory=list)


class SettingsNotice(BaseModel):
    """Message shown above the settings form after a submission."""

    setting: str
    code: str
    message: str
    type: Literal["error", "updated"] = "error"


class SettingsPage:
    """Registry of settings sections and the validator for their fields."""

    def __init__(self, options: Options) -> None:
        """Create an empty page bound to ``options``."""
        self.options = options
        self.fields = AdminFields(options)
        self.configuration_database_name = options.configuration_database_name
        self.sections: dict[str, SettingsSection] = {}
        self._notices: list[SettingsNotice] = []
        self._invalid_keys: set[str] = set()

    def init_option_section(
        self, section_name: str, section_key: str, fields: Sequence[SettingsField]
    ) -> SettingsSection:
        """Register a section and its fields under the page."""
        options_name = f"{self.configuration_database_name}_{section_key.lower()}"
        section_id = f"authress_sso_login_{section_key}_settings_section"
        section = SettingsSection(
            id=section_id,
            title=section_name,
            options_name=options_name,
            fields=list(fields),
        )
        self.sections[section_id] = section
        return section

    def iter_fields(self) -> list[SettingsField]:
        """Return every registered field in page order."""
        return [item for section in self.sections.values() for item in section.fields]

    def get_field(self, field_id: str) -> SettingsField | None:
        """Return the field registered as ``field_id``."""
        for item in self.iter_fields():
            if item.id == field_id:
                return item
        return None

    def add_validation_error(
        self,
        error: str,
        notice_type: Literal["error", "updated"] = "error",
        *,
        key: str | None = None,
    ) -> None:
        """Record a notice for the settings record.

        ``key`` marks the option whose field is highlighted on the next render.
        """
        if key is not None:
            self._invalid_keys.add(key)
        self._notices.append(
            SettingsNotice(
                setting=self.configuration_database_name,
                code=self.configuration_database_name,
                message=error,
                type=notice_type,
            )
        )

    def get_notices(self) -> list[SettingsNotice]:
        """Return the notices recorded so far."""
        return list(self._notices)

    def field_style(self, key: str | None) -> str:
        """Return the inline style for the field bound to ``key``."""
        return ERROR_FIELD_STYLE if key in self._invalid_keys else ""

    def input_validator(self, form: Mapping[str, Any]) -> dict[str, Any]:
        """Return the options record to store for a submitted form."""
        return self.basic_validation(form)

    def basic_validation(self, form: Mapping[str, Any]) -> dict[str, Any]:
        """Sanitize every registered field of a submitted form.

        Environment-pinned keys are dropped. Invalid values keep the stored
        value and add a notice.
        """
        stored = self.options.get_options()
        validated = dict(stored)
        for item in self.iter_fields():
            key = item.opt
            if not key or self.options.has_constant_val(key):
                continue
            previous = stored.get(key)
            value = self._sanitize(item, form.get(key), previous)
            if item.validate is not None:
                value = item.validate(value, previous)
            validated[key] = value
        for key in self.options.get_all_constant_keys():
            validated.pop(key, None)
        return validated

    def _sanitize(self, item: SettingsField, submitted: Any, previous: Any) -> Any:
        if item.kind is FieldKind.SWITCH:
            return self.fields.sanitize_switch_val(submitted)
        if item.kind is FieldKind.PASSWORD:
            # Redacted placeholder or blank input keeps the stored secret.
            if submitted is None or submitted in ("", REDACTED_VALUE):
                return previous
            return self.fields.sanitize_text_val(submitted)
        if item.kind is FieldKind.TEXTAREA:
            return previous if submitted is None else str(submitted).strip()
        if item.kind is FieldKind.RADIO:
            if submitted is None:
                return previous
            if submitted not in item.choices:
                self.add_validation_error(
                    f"Invalid value submitted for {item.name}.", key=item.opt
                )
                return previous
            return submitted
        if submitted is None:
            return previous
        return self.fields.sanitize_text_val(submitted)

    def save(self, form: Mapping[str, Any]) -> bool:
        """Validate a submitted form and persist the result."""
        validated = self.input_validator(form)
        for key, value in validated.items():
            self.options.set(key, value, persist=False)
        saved = self.options.update_all()
        if saved:
            self.add_validation_error("Settings saved.", notice_type="updated")
        else:
            logger.error("Failed to persist %s", self.configuration_database_name)
            self.add_validation_error("Settings could not be saved.")
        return saved

    def render_notices(self) -> str:
        """Return the recorded notices as markup."""
        return "".join(
            f'<div class="notice notice-{esc_attr(notice.type)}">'
            f"<p>{esc_html(notice.message)}</p></div>"
            for notice in self._notices
        )

    def render_page(self, action: str = "") -> str:
        """Return the complete settings form."""
        parts = [
            self.render_notices(),
            f'<form method="post" action="{esc_attr(action)}">',
        ]
        for section in self.sections.values():
            parts.append(
                f'<h2 id="{esc_attr(section.id)}">{esc_html(section.title)}</h2>'
            )
            parts.append('<table class="form-table" role="presentation">')
            for item in section.fields:
                parts.append(
                    '<tr><th scope="row">'
                    f'<label for="{esc_attr(item.id)}">{esc_html(item.name)}</label>'
                    f"</th><td>{item.render(item)}</td></tr>"
                )
            parts.append("</table>")
        parts.append(
            '<p class="submit"><input type="submit" name="submit" '
            'class="button button-primary" value="Save Changes"></p></form>'
        )
        return "".join(parts)


LOGIN_MODE_BUTTONS: tuple[RadioButton, ...] = (
    {
        "label": "Never show the site login form",
        "value": "no",
    },
    {
        "label": "Show a link to the site login form",
        "value": "link",
        "desc": "Visitors can switch to username and password login.",
    },
    {
        "label": "Require a URL parameter",
        "value": "code",
        "desc": "The site login form shows only with the <code>wle</code> code.",
    },
)


class AuthressSettingsPage(SettingsPage):
    """Stock settings page for the Authress SSO login options."""

    def __init__(self, options: Options) -> None:
        """Register the basic and features sections."""
        super().__init__(options)
        self.init_option_section(
            "Basic",
            "basic",
            [
                SettingsField(
                    id="authress_application_id",
                    name="Application ID",
                    render=self.render_application_id,
                    opt="applicationId",
                ),
                SettingsField(
                    id="authress_custom_domain",
                    name="Custom Domain",
                    render=self.render_custom_domain,
                    opt="customDomain",
                    validate=self.validate_custom_domain,
                ),
                SettingsField(
                    id="authress_access_key",
                    name="Service Client Access Key",
                    render=self.render_access_key,
                    opt="accessKey",
                    kind=FieldKind.PASSWORD,
                ),
                SettingsField(
                    id="authress_default_login_redirection",
                    name="Login Redirection URL",
                    render=self.render_default_login_redirection,
                    opt="default_login_redirection",
                    validate=self.validate_login_redirection,
                ),
            ],
        )
        self.init_option_section(
            "Features",
            "features",
            [
                SettingsField(
                    id="authress_auto_login",
                    name="Auto Login",
                    render=self.render_switch_field,
                    opt="auto_login",
                    kind=FieldKind.SWITCH,
                ),
                SettingsField(
                    id="authress_singlelogout",
                    name="Single Logout",
                    render=self.render_switch_field,
                    opt="singlelogout",
                    kind=FieldKind.SWITCH,
                ),
                SettingsField(
                    id="authress_passwordless_enabled",
                    name="Passwordless Login",
                    render=self.render_switch_field,
                    opt="passwordless_enabled",
                    kind=FieldKind.SWITCH,
                ),
                SettingsField(
                    id="authress_form_title",
                    name="Form Title",
                    render=self.render_text,
                    opt="form_title",
                ),
                SettingsField(
                    id="authress_extra_conf",
                    name="Extra Settings",
                    render=self.render_extra_conf,
                    opt="extra_conf",
                    kind=FieldKind.TEXTAREA,
                ),
                SettingsField(
                    id="authress_wordpress_login_enabled",
                    name="Original Login Form",
                    render=self.render_login_mode,
                    opt="wordpress_login_enabled",
                    kind=FieldKind.RADIO,
                    choices=tuple(
                        button["value"]
                        for button in LOGIN_MODE_BUTTONS
                        if isinstance(button, Mapping)
                    ),
                ),
            ],
        )

    def render_application_id(self, item: SettingsField) -> str:
        """Render the application id field."""
        return self.fields.render_text_field(
            item.id, "applicationId", style=self.field_style(item.opt)
        ) + self.fields.render_field_description(
            "Application ID from the "
            + self.fields.get_dashboard_link("applications", "application list")
        )

    def render_custom_domain(self, item: SettingsField) -> str:
        """Render the custom domain field."""
        return self.fields.render_text_field(
            item.id,
            "customDomain",
            placeholder="login.example.com",
            style=self.field_style(item.opt),
        ) + self.fields.render_field_description(
            "Domain configured for your account, without the protocol"
        )

    def render_access_key(self, item: SettingsField) -> str:
        """Render the masked service client access key field."""
        return self.fields.render_text_field(
            item.id, "accessKey", input_type="password"
        ) + self.fields.render_field_description(
            "Leave unchanged to keep the stored key. Read more "
            + self.fields.get_docs_link("/service-clients")
        )

    def render_default_login_redirection(self, item: SettingsField) -> str:
        """Render the redirect URL field."""
        return self.fields.render_text_field(
            item.id, "default_login_redirection", style=self.field_style(item.opt)
        ) + self.fields.render_field_description(
            "Where visitors land after logging in"
        )

    def render_switch_field(self, item: SettingsField) -> str:
        """Render a switch for ``item``."""
        return self.fields.render_switch(item.id, str(item.opt))

    def render_text(self, item: SettingsField) -> str:
        """Render a plain text field for ``item``."""
        return self.fields.render_text_field(
            item.id, str(item.opt), style=self.field_style(item.opt)
        )

    def render_extra_conf(self, item: SettingsField) -> str:
        """Render the extra widget configuration textarea."""
        return self.fields.render_textarea_field(
            item.id, "extra_conf"
        ) + self.fields.render_field_description(
            "Valid JSON passed to the login widget:"
        )

    def render_login_mode(self, item: SettingsField) -> str:
        """Render the original login form mode radio group."""
        return self.fields.render_radio_buttons(
            LOGIN_MODE_BUTTONS,
            item.id,
            "wordpress_login_enabled",
            self.options.get("wordpress_login_enabled"),
            vert=True,
        )

    def validate_custom_domain(self, value: Any, previous: Any) -> Any:
        """Accept a bare host name, stripping any protocol and slashes."""
        domain = str(value or "").strip().lower()
        domain = re.sub(r"^https?://", "", domain).rstrip("/")
        if not domain:
            return ""
        if not _HOST_PATTERN.match(domain):
            self.add_validation_error(
                "The custom domain must be a host name such as login.example.com.",
                key="customDomain",
            )
            return previous
        return domain

    def validate_login_redirection(self, value: Any, previous: Any) -> Any:
        """Accept only absolute http(s) URLs, defaulting to the home URL."""
        url = str(value or "").strip()
        if not url:
            return self.options.home_url
        if not url.startswith(("http://", "https://")):
            self.add_validation_error(
                "The login redirection URL must start with http:// or https://.",
                key="default_login_redirection",
            )
            return previous
        return url


__all__ = [
    "AuthressSettingsPage",
    "FieldKind",
    "LOGIN_MODE_BUTTONS",
    "SettingsField",
    "SettingsNotice",
    "SettingsPage",
    "SettingsSection",
]
