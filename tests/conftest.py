# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
import pytest
from fastapi.testclient import TestClient

from src.config import Settings
from src.main import create_app
from src.services.permission_preset_service import PermissionPresetManager


def employee_headers(role: str, user_id: str = "emp-1", preset: str | None = None) -> dict:
    """Identity headers as set by the upstream auth gateway."""
    headers = {"X-Employee-Id": user_id, "X-Employee-Role": role}
    if preset:
        headers["X-Employee-Preset"] = preset
    return headers


@pytest.fixture(scope="function")
def manager() -> PermissionPresetManager:
    """Create a fresh preset manager for each test."""
    return PermissionPresetManager()


@pytest.fixture(scope="function")
def client(manager):
    """Create a test client bound to the test's preset manager."""
    app = create_app(Settings(database_url=None), preset_manager=manager)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def headers_for():
    """Build identity headers for a role."""
    return employee_headers


@pytest.fixture
def manager_headers() -> dict:
    return employee_headers("manager", user_id="mgr-1")


@pytest.fixture
def waiter_headers() -> dict:
    return employee_headers("waiter", user_id="waiter-1")
