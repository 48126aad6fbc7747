"""Fixtures for tests running against a real SQLite database."""

import pytest

from src.core import db_client
from src.core.config import settings


@pytest.fixture
async def sqlite_db(tmp_path, monkeypatch):
    """Point the document client at a fresh database file with the schema applied."""
    db_path = str(tmp_path / "questflow_test.db")
    monkeypatch.setattr(settings, "sqlite_db_path", db_path)

    await db_client.init_db()
    yield db_path
    await db_client.close_connection()
