"""Shared pytest fixtures for backend tests."""

from __future__ import annotations
import pytest
from fastapi.testclient import TestClient
from authress_sso_login.overrides import ConstantOverrides
from authress_sso_login.storage import InMemoryOptionStorage
from authress_sso_login_backend.app.factory import create_app
from tests.backend.admin_test_utils import ADMIN_HEADERS, ADMIN_TOKEN


@pytest.fixture
def settings(monkeypatch: pytest.MonkeyPatch):
    """Service settings for https://example.com with admin access enabled."""
    from authress_sso_login import config

    monkeypatch.setenv("AUTHRESS_HOME_URL", "https://example.com")
    monkeypatch.setenv("AUTHRESS_ADMIN_TOKEN", ADMIN_TOKEN)
    return config.get_settings(refresh=True)


@pytest.fixture
def app_storage() -> InMemoryOptionStorage:
    """Option storage shared between the app and the test."""
    return InMemoryOptionStorage()


@pytest.fixture
def anonymous_client(settings, app_storage: InMemoryOptionStorage) -> TestClient:
    """Test client sending no credentials."""
    app = create_app(settings, storage=app_storage, overrides=ConstantOverrides())
    return TestClient(app)


@pytest.fixture
def client(settings, app_storage: InMemoryOptionStorage) -> TestClient:
    """Test client authenticated with the admin token."""
    app = create_app(settings, storage=app_storage, overrides=ConstantOverrides())
    return TestClient(app, headers=ADMIN_HEADERS)
