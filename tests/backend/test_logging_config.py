"""Tests for the backend logging setup and the records the app emits."""

from __future__ import annotations
import json
import logging
import pytest
from authress_sso_login import config
from authress_sso_login.error_log import ErrorLog
from authress_sso_login.errors import ErrorResult
from authress_sso_login.overrides import ConstantOverrides
from authress_sso_login.storage import InMemoryOptionStorage
from authress_sso_login_backend.app.factory import create_app
from authress_sso_login_backend.app.logging_config import configure_logging, get_logger


def _json_records(captured: str) -> list[dict]:
    return [json.loads(line) for line in captured.strip().splitlines()]


def test_settings_log_level_applies_to_package_loggers(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("AUTHRESS_LOG_LEVEL", "debug")
    settings = config.get_settings(refresh=True)

    create_app(settings, storage=InMemoryOptionStorage(), overrides=ConstantOverrides())

    assert logging.getLogger("authress_sso_login").level == logging.DEBUG
    assert logging.getLogger("authress_sso_login_backend").level == logging.DEBUG
    assert get_logger().name == "authress_sso_login_backend.app"


def test_startup_record_lists_backend_and_pinned_keys(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setenv("LOG_FORMAT", "json")
    settings = config.get_settings(refresh=True)

    create_app(
        settings,
        storage=InMemoryOptionStorage(),
        overrides=ConstantOverrides({"customDomain": "x", "applicationId": "y"}),
    )

    ready = [
        record
        for record in _json_records(capsys.readouterr().err)
        if record["message"] == "Authress SSO login backend ready"
    ]
    assert len(ready) == 1
    assert ready[0]["storage_backend"] == "inmemory"
    assert ready[0]["overridden_keys"] == ["applicationId", "customDomain"]


def test_recorded_errors_are_logged_as_warnings(
    capsys: pytest.CaptureFixture[str],
) -> None:
    configure_logging(level="info", fmt="json")

    ErrorLog.insert_error(
        InMemoryOptionStorage(),
        "login",
        ErrorResult(code="bad_state", message="State mismatch"),
    )

    record = _json_records(capsys.readouterr().err)[-1]
    assert record["level"] == "WARNING"
    assert record["logger"] == "authress_sso_login.error_log"
    assert record["message"] == "Recording error in login: [bad_state] State mismatch"
    assert record["error_section"] == "login"
    assert record["error_code"] == "bad_state"


def test_rejected_admin_requests_are_logged(
    anonymous_client, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.WARNING, logger="authress_sso_login_backend"):
        anonymous_client.get("/admin/settings")

    records = [
        record
        for record in caplog.records
        if record.name == "authress_sso_login_backend.app.authentication"
    ]
    assert records[-1].getMessage() == "Rejected admin request to /admin/settings"
    assert records[-1].auth_code == "auth.missing_token"


def test_text_format_is_the_default(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.delenv("LOG_FORMAT", raising=False)
    configure_logging(level="info")

    logging.getLogger("authress_sso_login.options").info("Persisted options")

    line = capsys.readouterr().err.strip().splitlines()[-1]
    assert line.endswith("INFO authress_sso_login.options: Persisted options")
