"""HTML form controls bound to plugin options."""

from __future__ import annotations
from collections.abc import Mapping, Sequence
from typing import Any
from authress_sso_login.options import Options
from authress_sso_login.sanitization import esc_attr, esc_html, sanitize_text


ERROR_FIELD_STYLE = "border: 1px solid red;"
REDACTED_VALUE = "[REDACTED]"
DASHBOARD_URL = "https://authress.io/app/#/setup"
DOCS_URL = "https://authress.io/knowledge-base"

RadioButton = str | Mapping[str, Any]


def _disabled(field_is_const: bool) -> str:
    return "disabled" if field_is_const else ""


class AdminFields:
    """Render settings form controls for the options record.

    Every control is named ``<record>[<option key>]`` and rendered disabled,
    with a notice, when its option is pinned by the environment.
    """

    def __init__(self, options: Options) -> None:
        """Bind the renderer to ``options``."""
        self.options = options
        self.configuration_database_name = options.configuration_database_name

    def _field_name(self, input_name: str) -> str:
        return f"{esc_attr(self.configuration_database_name)}[{esc_attr(input_name)}]"

    def render_switch(
        self, field_id: str, input_name: str, expand_id: str = ""
    ) -> str:
        """Return a stylized checkbox switch.

        ``expand_id`` names a field that stays hidden until the switch is on.
        """
        value = self.options.get(input_name)
        field_is_const = self.options.has_constant_val(input_name)
        notice = self.render_const_notice(input_name) if field_is_const else ""
        checked = "checked" if value else ""
        return (
            f'{notice}<div class="a0-switch"><input type="checkbox" '
            f'name="{self._field_name(input_name)}" id="{esc_attr(field_id)}" '
            f'data-expand="{esc_attr(expand_id)}" value="1" {checked} '
            f"{_disabled(field_is_const)}>"
            f'<label for="{esc_attr(field_id)}"></label></div>'
        )

    def render_text_field(
        self,
        field_id: str,
        input_name: str,
        input_type: str = "text",
        placeholder: str = "",
        style: str = "",
    ) -> str:
        """Return a text input.

        Password fields never echo their value; a non-empty value is shown
        as ``[REDACTED]`` and validation keeps the stored value when that
        placeholder is submitted back.
        """
        value = self.options.get(input_name)
        if input_type == "password":
            value = REDACTED_VALUE if value else ""
            input_type = "text"
        field_is_const = self.options.has_constant_val(input_name)
        notice = self.render_const_notice(input_name) if field_is_const else ""
        return (
            f'{notice}<input type="{esc_attr(input_type)}" '
            f'name="{self._field_name(input_name)}" id="{esc_attr(field_id)}" '
            f'value="{esc_attr(value)}" placeholder="{esc_attr(placeholder)}" '
            f'style="{esc_attr(style)}" {_disabled(field_is_const)}>'
        )

    def render_textarea_field(self, field_id: str, input_name: str) -> str:
        """Return a four row code textarea."""
        value = self.options.get(input_name)
        field_is_const = self.options.has_constant_val(input_name)
        notice = self.render_const_notice(input_name) if field_is_const else ""
        return (
            f'{notice}<textarea name="{self._field_name(input_name)}" '
            f'id="{esc_attr(field_id)}" rows="4" class="code" '
            f"{_disabled(field_is_const)}>{esc_html(value)}</textarea>"
        )

    def render_radio_buttons(
        self,
        buttons: Sequence[RadioButton],
        field_id: str,
        input_name: str,
        curr_value: Any,
        vert: bool = False,
    ) -> str:
        """Return radio buttons sharing one option key.

        Buttons are plain values or mappings with ``label``, ``value`` and an
        optional ``desc``; descriptions are only shown in vertical layout.
        """
        field_is_const = self.options.has_constant_val(input_name)
        parts = [self.render_const_notice(input_name)] if field_is_const else []
        for index, button in enumerate(buttons):
            id_attr = f"{field_id}_{index}"
            if isinstance(button, Mapping):
                label = button["label"]
                value = button["value"]
                desc = button.get("desc")
            else:
                label = str(button).capitalize()
                value = button
                desc = None
            checked = "checked" if value == curr_value else ""
            control = (
                f'<label for="{esc_attr(id_attr)}"><input type="radio" '
                f'name="{self._field_name(input_name)}" id="{esc_attr(id_attr)}" '
                f'value="{esc_attr(value)}" {checked} {_disabled(field_is_const)}>'
                f"{esc_html(label)}</label>"
            )
            if vert:
                # Descriptions are trusted markup, like field descriptions.
                description = f'<p class="description">{desc}</p>' if desc else ""
                control = f'<div class="a0-vert-radio">{control} {description}</div>'
            parts.append(control)
        return " ".join(parts)

    def render_field_description(self, text: str) -> str:
        """Return a field description.

        ``text`` is emitted unescaped; callers must pass sanitized markup.
        """
        period = "" if text and text[-1] in (".", ":") else "."
        return (
            '<div class="subelement"><span class="description">'
            f"{text}{period}</span></div>"
        )

    def render_const_notice(self, input_name: str) -> str:
        """Return the notice shown above environment-pinned fields."""
        constant_name = self.options.get_constant_name(input_name)
        return (
            '<p class="const-setting-notice"><span class="description">'
            f"Value is set in the constant <code>{esc_html(constant_name)}</code>"
            "</span></p>"
        )

    def get_dashboard_link(
        self, path: str = "", name: str = "management portal"
    ) -> str:
        """Return a link into the Authress management portal."""
        return (
            f'<a href="{esc_attr(DASHBOARD_URL)}?focus={esc_attr(path)}" '
            f'target="_blank">Authress {esc_html(name)}</a>'
        )

    def get_docs_link(self, path: str, text: str = "") -> str:
        """Return a link to the Authress knowledge base."""
        path = path[1:] if path.startswith("/") else path
        href = f"{DOCS_URL}/{path}" if path else DOCS_URL
        text = sanitize_text(text) if text else "here"
        return f'<a href="{esc_attr(href)}" target="_blank">{esc_html(text)}</a>'

    @staticmethod
    def sanitize_switch_val(val: Any) -> bool:
        """Return ``True`` only for the values a checked switch submits."""
        if isinstance(val, bool):
            return val
        return isinstance(val, int | str) and val in (1, "1")

    @staticmethod
    def sanitize_text_val(val: Any) -> str:
        """Return ``val`` reduced to a trimmed line of plain text."""
        return sanitize_text(str(val).strip())


__all__ = ["AdminFields", "ERROR_FIELD_STYLE", "REDACTED_VALUE", "RadioButton"]
