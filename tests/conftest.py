"""Configure test environment for the Authress SSO login service."""

import os
import sys
from collections.abc import Iterator
from pathlib import Path
import pytest


ROOT = Path(__file__).resolve().parents[1]
for source in (ROOT / "src", ROOT / "apps" / "backend" / "src"):
    if str(source) not in sys.path:
        sys.path.insert(0, str(source))


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Drop AUTHRESS_* variables and reset the cached settings around a test."""
    from authress_sso_login import config

    for name in list(os.environ):
        if name.startswith("AUTHRESS_"):
            monkeypatch.delenv(name)
    config.get_settings(refresh=True)
    yield
    config._load_settings.cache_clear()


@pytest.fixture
def settings(monkeypatch: pytest.MonkeyPatch):
    """Service settings for a site served from https://example.com."""
    from authress_sso_login import config

    monkeypatch.setenv("AUTHRESS_HOME_URL", "https://example.com")
    return config.get_settings(refresh=True)


@pytest.fixture
def storage():
    """Empty in-memory option storage."""
    from authress_sso_login.storage import InMemoryOptionStorage

    return InMemoryOptionStorage()


@pytest.fixture
def options(storage, settings):
    """Options store without environment overrides."""
    from authress_sso_login.options import Options
    from authress_sso_login.overrides import ConstantOverrides

    return Options(storage, settings, overrides=ConstantOverrides())
