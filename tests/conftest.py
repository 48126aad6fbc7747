"""Pytest configuration and shared fixtures."""

import os


# Settings are read at import time; pin them before any src module loads
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("SECRET_KEY", "questflow-test-secret")

import logfire  # noqa: E402
import pytest  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def configure_test_logfire():
    """Keep Logfire local during tests."""
    logfire.configure(send_to_logfire=False, console=False)


@pytest.fixture(autouse=True)
def fresh_task_locks():
    """Locks bind to an event loop; every test gets new ones."""
    from src.services import task_service  # noqa: PLC0415

    task_service._task_locks.clear()
    task_service._ledger_locks.clear()
    yield
    task_service._task_locks.clear()
    task_service._ledger_locks.clear()
