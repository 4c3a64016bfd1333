"""Credentials shared by the backend admin tests."""

from __future__ import annotations


ADMIN_TOKEN = "admin-secret"
ADMIN_HEADERS = {"Authorization": f"Bearer {ADMIN_TOKEN}"}
