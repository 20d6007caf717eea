"""Unit tests for log archive export/import."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path

import pytest

from worklog.logs import (
    ArchiveDecodeError,
    ArchiveError,
    ArchiveSchemaVersionError,
    Log,
    export_logs,
    load_archive,
)
from worklog.logs.archive import ARCHIVE_SCHEMA_VERSION

MakeLog = Callable[..., Log]


@pytest.mark.unit
def test_export_and_load_roundtrip(tmp_path: Path, make_log: MakeLog) -> None:
    """Archive should roundtrip logs, keeping optional-field absence."""
    # Arrange - one sparse and one fully-populated log
    path = tmp_path / "exports" / "logs.json"
    logs = [
        make_log(),
        make_log(
            notes="blocked on review",
            startedAt="2025-03-03T10:00:00Z",
            completedAt="2025-03-04T10:00:00Z",
        ),
    ]

    # Act - export then load
    count = export_logs(logs, path)
    loaded = load_archive(path)

    # Assert - identical logs and versioned camelCase file
    assert count == 2
    assert loaded == tuple(logs)
    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload["schema_version"] == ARCHIVE_SCHEMA_VERSION
    assert "notes" not in payload["logs"][0]
    assert payload["logs"][1]["completedAt"] == "2025-03-04T10:00:00Z"
    assert not path.with_name("logs.json.tmp").exists()


@pytest.mark.unit
def test_load_unsupported_schema_version_raises(tmp_path: Path) -> None:
    """Unsupported schema should raise explicit version error."""
    path = tmp_path / "logs.json"
    path.write_text(json.dumps({"schema_version": 999, "logs": []}), encoding="utf-8")

    with pytest.raises(ArchiveSchemaVersionError) as exc_info:
        load_archive(path)

    assert "Unsupported archive schema version" in str(exc_info.value)


@pytest.mark.unit
def test_load_invalid_json_raises_decode_error(tmp_path: Path) -> None:
    """Corrupt files raise a decode error."""
    path = tmp_path / "logs.json"
    path.write_text("{bad json", encoding="utf-8")

    with pytest.raises(ArchiveDecodeError):
        load_archive(path)


@pytest.mark.unit
def test_load_rejects_rows_outside_enumerations(tmp_path: Path) -> None:
    """Archived rows are validated like any other log."""
    path = tmp_path / "logs.json"
    path.write_text(
        json.dumps(
            {
                "schema_version": ARCHIVE_SCHEMA_VERSION,
                "logs": [
                    {
                        "logId": "x",
                        "taskName": "Bad",
                        "taskType": "task",
                        "taskStatus": "backlog",
                        "priority": 3,
                        "createdAt": "2025-01-01T00:00:00Z",
                        "updatedAt": "2025-01-01T00:00:00Z",
                    }
                ],
            }
        ),
        encoding="utf-8",
    )

    with pytest.raises(ArchiveDecodeError):
        load_archive(path)


@pytest.mark.unit
def test_export_failure_removes_temp_file(tmp_path: Path, make_log: MakeLog) -> None:
    """A failed export raises ArchiveError and leaves no temp file behind."""
    # Arrange - target path occupied by a directory
    path = tmp_path / "logs.json"
    path.mkdir()

    # Act - export onto the directory
    with pytest.raises(ArchiveError):
        export_logs([make_log()], path)

    # Assert - only the blocking directory remains
    assert sorted(item.name for item in tmp_path.iterdir()) == ["logs.json"]
    assert path.is_dir()
