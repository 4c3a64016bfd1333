"""Login widget dispatcher for visitors without an active session."""

from __future__ import annotations
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from string import Template
from typing import Any, Protocol
from dynaconf import Dynaconf
from authress_sso_login.hooks import LOGIN_TEMPLATE_FILTER, FilterRegistry
from authress_sso_login.options import Options
from authress_sso_login.sanitization import esc_attr


logger = logging.getLogger(__name__)

LOCK_GLOBAL_JS_VAR_NAME = "wpAuthressLockGlobal"
LOGIN_SDK_SCRIPT = "authress-login-sdk.min.js"
DEFAULT_LOGIN_TEMPLATE = Path(__file__).parent / "templates" / "login_form.html"


class SessionState(Protocol):
    """Answers whether the current visitor is already authenticated."""

    @property
    def is_logged_in(self) -> bool:
        """Return ``True`` when the visitor has an active session."""
        ...  # pragma: no cover


@dataclass(slots=True, frozen=True)
class StaticSession:
    """Session state with a fixed answer."""

    is_logged_in: bool = False


def _js_literal(value: Any) -> str:
    return json.dumps("" if value is None else str(value)).replace("<", "\\u003c")


class LoginWidget:
    """Render the hosted login widget bootstrap markup."""

    def __init__(
        self,
        options: Options,
        filters: FilterRegistry,
        settings: Dynaconf,
    ) -> None:
        """Store the collaborators used to parametrize the widget."""
        self._options = options
        self._filters = filters
        self._settings = settings

    @property
    def script_url(self) -> str:
        """Return the versioned URL of the login SDK script."""
        base = str(self._settings.get("PLUGIN_JS_URL"))
        version = self._settings.get("VERSION")
        return f"{base}{LOGIN_SDK_SCRIPT}?ver={version}"

    def widget_options(self) -> dict[str, Any]:
        """Return the parameters passed to the login widget."""
        return {
            "custom_domain": self._options.get("customDomain"),
            "application_id": self._options.get("applicationId"),
        }

    def render(
        self,
        session: SessionState,
        can_show_legacy_login: bool = True,
        special_settings: dict[str, Any] | None = None,
        *,
        force: bool = False,
    ) -> str | None:
        """Return the login form markup, or ``None`` for signed-in visitors.

        ``force`` redisplays the form even when a session exists.
        ``can_show_legacy_login`` and ``special_settings`` are accepted for
        widget and shortcode callers and do not change the output.
        """
        if session.is_logged_in and not force:
            return None

        options = self.widget_options()
        template_path = self._filters.apply_filters(
            LOGIN_TEMPLATE_FILTER, DEFAULT_LOGIN_TEMPLATE, options
        )
        logger.debug("Rendering login widget from %s", template_path)
        template = Template(Path(template_path).read_text(encoding="utf-8"))
        return template.safe_substitute(
            custom_domain=esc_attr(options["custom_domain"]),
            application_id=esc_attr(options["application_id"]),
            custom_domain_js=_js_literal(options["custom_domain"]),
            application_id_js=_js_literal(options["application_id"]),
            script_url=esc_attr(self.script_url),
            lock_global=LOCK_GLOBAL_JS_VAR_NAME,
        )


__all__ = [
    "DEFAULT_LOGIN_TEMPLATE",
    "LOCK_GLOBAL_JS_VAR_NAME",
    "LoginWidget",
    "SessionState",
    "StaticSession",
]
