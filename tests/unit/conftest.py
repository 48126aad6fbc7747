"""Pytest configuration and fixtures for unit tests."""

import datetime as dt

import pytest

from src.domain.create_models import TaskCreate
from src.domain.task import TaskCategory
from tests.unit.mocks import FakeScheduler, InMemoryDBClient


@pytest.fixture
def in_memory_db():
    """Provides a fresh InMemoryDBClient for each test."""
    return InMemoryDBClient()


@pytest.fixture
def patched_db(monkeypatch, in_memory_db):
    """Patches src.core.db_client functions to use InMemoryDBClient."""
    monkeypatch.setattr("src.core.db_client.create_record", in_memory_db.create_record)
    monkeypatch.setattr("src.core.db_client.get_record", in_memory_db.get_record)
    monkeypatch.setattr("src.core.db_client.update_record", in_memory_db.update_record)
    monkeypatch.setattr("src.core.db_client.delete_record", in_memory_db.delete_record)
    monkeypatch.setattr("src.core.db_client.list_records", in_memory_db.list_records)
    monkeypatch.setattr("src.core.db_client.get_first_record", in_memory_db.get_first_record)
    return in_memory_db


@pytest.fixture
def fake_scheduler():
    return FakeScheduler()


@pytest.fixture
def sample_task_data():
    """Returns a creation payload for a one-minute quest."""
    return TaskCreate(
        title="Read a chapter",
        description="Chapter 3",
        date=dt.date(2024, 5, 1),
        category=TaskCategory.LEARNING,
        estimated_time=1,
    )
