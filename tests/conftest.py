"""Pytest configuration and shared fixtures."""

import pytest

from src.core.config import settings


@pytest.fixture(autouse=True)
def disable_scheduler(monkeypatch):
    """Never start the APScheduler loop from tests."""
    monkeypatch.setattr(settings, "enable_scheduler", False)


@pytest.fixture
def sqlite_db_path(tmp_path, monkeypatch):
    """Point the SQLite client at a throwaway database file."""
    db_path = tmp_path / "flowpilot-test.db"
    monkeypatch.setattr(settings, "sqlite_db_path", str(db_path))
    return str(db_path)
