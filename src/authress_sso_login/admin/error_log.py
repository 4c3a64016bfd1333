"""Error log page shown in the admin dashboard."""

from __future__ import annotations
from collections.abc import Sequence
from datetime import UTC, datetime
from authress_sso_login.error_log import ErrorLogEntry
from authress_sso_login.sanitization import esc_attr, esc_html


def _format_date(timestamp: int) -> str:
    return datetime.fromtimestamp(timestamp, tz=UTC).strftime("%Y-%m-%d %H:%M:%S UTC")


def render_error_log_page(
    entries: Sequence[ErrorLogEntry], clear_action: str = "", nonce: str = ""
) -> str:
    """Return the error log table with a button clearing the log.

    ``nonce`` is submitted back with the clear request and must verify there.
    """
    if not entries:
        rows = '<tr><td colspan="5">No errors</td></tr>'
    else:
        rows = "".join(
            "<tr>"
            f"<td>{esc_html(_format_date(entry.date))}</td>"
            f"<td>{esc_html(entry.section)}</td>"
            f"<td>{esc_html(entry.code)}</td>"
            f"<td>{esc_html(entry.message)}</td>"
            f"<td>{entry.count}</td>"
            "</tr>"
            for entry in entries
        )
    clear_form = ""
    if entries:
        clear_form = (
            f'<form method="post" action="{esc_attr(clear_action)}">'
            f'<input type="hidden" name="nonce" value="{esc_attr(nonce)}">'
            '<input type="submit" name="submit" class="button" value="Clear Log">'
            "</form>"
        )
    return (
        '<table class="widefat striped authress-error-log"><thead><tr>'
        "<th>Date</th><th>Section</th><th>Error code</th><th>Message</th>"
        "<th>Count</th></tr></thead>"
        f"<tbody>{rows}</tbody></table>{clear_form}"
    )


__all__ = ["render_error_log_page"]
