"""Shared fixtures: an isolated app on a throwaway SQLite database.

Each test gets its own ``create_app(Settings(...))`` instance, so no
Postgres and no .env file are involved.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from doctracker.config import Settings
from doctracker.main import create_app

# Test secret, used by every authenticated request.
TEST_TOKEN = "test_app_token_1234567890abcdef"


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    """Settings pointing at a per-test SQLite file."""
    return Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'tracker.db'}",
        database_ssl=False,
        app_token=TEST_TOKEN,
    )


@pytest.fixture()
def client(settings: Settings) -> Iterator[TestClient]:
    """TestClient with the lifespan running (tables created)."""
    app = create_app(settings)
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture()
def auth_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {TEST_TOKEN}"}


@pytest.fixture()
def token(settings: Settings) -> str:
    return settings.app_token
