"""Pytest configuration and shared fixtures."""

from pathlib import Path

import pytest

from worklog.logs import Log, LogRepository


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    """Temporary SQLite path for one test."""
    return tmp_path / ".worklog" / "worklog.sqlite"


@pytest.fixture
def repository(db_path: Path) -> LogRepository:
    """Empty log repository backed by a temporary SQLite file."""
    return LogRepository(db_path)


@pytest.fixture
def make_log():
    """Factory for fully-populated logs with overridable fields."""
    counter = iter(range(1, 10_000))

    def _make(**overrides: object) -> Log:
        index = next(counter)
        payload: dict[str, object] = {
            "logId": f"log-{index}",
            "taskName": f"Task {index}",
            "taskType": "task",
            "taskStatus": "backlog",
            "priority": 1,
            "createdAt": "2025-03-03T09:00:00Z",
            "updatedAt": "2025-03-03T09:00:00Z",
        }
        payload.update(overrides)
        return Log.model_validate(payload)

    return _make
