"""Text sanitization and escaping helpers for HTML output and form input."""

from __future__ import annotations
import html
import re
from typing import Any
import bleach


# bleach keeps the text of stripped elements; script and style bodies go first.
_SCRIPT_PATTERN = re.compile(
    r"<(script|style)[^>]*>.*?</\1>", flags=re.IGNORECASE | re.DOTALL
)
_OCTET_PATTERN = re.compile(r"%[a-fA-F0-9]{2}")
_WHITESPACE_PATTERN = re.compile(r"\s+")


def esc_attr(value: Any) -> str:
    """Escape ``value`` for use inside a double-quoted HTML attribute."""
    if value is None:
        return ""
    return html.escape(str(value), quote=True)


def esc_html(value: Any) -> str:
    """Escape ``value`` for use as HTML text content."""
    if value is None:
        return ""
    return html.escape(str(value), quote=False)


def strip_tags(value: str) -> str:
    """Return ``value`` without markup, keeping stray ``<`` characters as text."""
    cleaned = bleach.clean(value, tags=[], strip=True, strip_comments=True)
    # bleach escapes the surviving text; callers escape again on output.
    return html.unescape(cleaned)


def sanitize_text(value: Any) -> str:
    """Reduce ``value`` to a single line of plain text.

    Removes script and style blocks, strips remaining tags and
    percent-encoded octets, and collapses whitespace.
    """
    if value is None:
        return ""
    text = str(value).replace("\x00", "")
    text = strip_tags(_SCRIPT_PATTERN.sub("", text))
    text = _OCTET_PATTERN.sub("", text)
    text = _WHITESPACE_PATTERN.sub(" ", text)
    return text.strip()


__all__ = ["esc_attr", "esc_html", "sanitize_text", "strip_tags"]
