"""Unit tests for worklog data models."""

from __future__ import annotations

import json
from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from worklog.logs import (
    Log,
    LogQuery,
    LogUpdate,
    Priority,
    TaskStatus,
    TaskStatusSummary,
    TaskType,
    TaskTypeSummary,
)

_MINIMAL = {
    "logId": "a1",
    "taskName": "Write release notes",
    "taskType": "story",
    "taskStatus": "pending",
    "priority": 5,
    "createdAt": "2025-01-02T03:04:05Z",
    "updatedAt": "2025-01-02T03:04:05Z",
}


@pytest.mark.unit
def test_enumerations_are_closed_sets() -> None:
    """Enumerations should expose exactly the documented values."""
    assert [item.value for item in TaskType] == ["task", "bug", "story"]
    assert [item.value for item in TaskStatus] == [
        "backlog",
        "pending",
        "progress",
        "pr",
        "staging",
    ]
    assert [int(item) for item in Priority] == [1, 5, 7, 10]


@pytest.mark.unit
def test_log_without_optional_fields_is_valid() -> None:
    """Notes, startedAt and completedAt may all be absent."""
    log = Log.model_validate(_MINIMAL)

    assert log.notes is None
    assert log.started_at is None
    assert log.completed_at is None
    assert log.task_type == TaskType.STORY
    assert log.priority == Priority.MEDIUM


@pytest.mark.unit
def test_log_accepts_priority_seven() -> None:
    """Priority 7 is a member of the scale."""
    log = Log.model_validate({**_MINIMAL, "priority": 7})

    assert log.priority == Priority.HIGH


@pytest.mark.unit
@pytest.mark.parametrize("priority", [0, 2, 3, 4, 6, 8, 11], ids=str)
def test_log_rejects_priority_outside_scale(priority: int) -> None:
    """Values in the gaps of the priority scale must be rejected."""
    with pytest.raises(ValidationError):
        Log.model_validate({**_MINIMAL, "priority": priority})


@pytest.mark.unit
@pytest.mark.parametrize(
    ("field", "value"),
    [("taskType", "epic"), ("taskStatus", "done"), ("taskStatus", "PR")],
    ids=["unknown_type", "unknown_status", "wrong_case_status"],
)
def test_log_rejects_values_outside_enumerations(field: str, value: str) -> None:
    """Type and status must be members of their enumerations."""
    with pytest.raises(ValidationError):
        Log.model_validate({**_MINIMAL, field: value})


@pytest.mark.unit
def test_log_rejects_missing_required_timestamps() -> None:
    """createdAt and updatedAt are mandatory."""
    payload = {key: value for key, value in _MINIMAL.items() if key != "updatedAt"}

    with pytest.raises(ValidationError):
        Log.model_validate(payload)


@pytest.mark.unit
def test_log_rejects_unknown_fields() -> None:
    """Unknown wire fields should not be silently accepted."""
    with pytest.raises(ValidationError):
        Log.model_validate({**_MINIMAL, "assignee": "sam"})


@pytest.mark.unit
def test_log_normalizes_timestamps_to_utc() -> None:
    """Offsets and fractional seconds normalize to a UTC `Z` timestamp."""
    log = Log.model_validate(
        {
            **_MINIMAL,
            "startedAt": "2025-01-02T05:04:05.123+02:00",
            "completedAt": datetime(2025, 1, 3, 8, 0, tzinfo=UTC),
        }
    )

    assert log.started_at == "2025-01-02T03:04:05Z"
    assert log.completed_at == "2025-01-03T08:00:00Z"


@pytest.mark.unit
def test_log_rejects_unparseable_timestamp() -> None:
    """Timestamps must be ISO-8601."""
    with pytest.raises(ValidationError):
        Log.model_validate({**_MINIMAL, "startedAt": "yesterday"})


@pytest.mark.unit
def test_log_payload_uses_wire_names_and_omits_absent_optionals() -> None:
    """Serialized payload uses camelCase names and skips unset optionals."""
    payload = Log.model_validate(_MINIMAL).to_payload()

    assert payload == {
        "logId": "a1",
        "taskName": "Write release notes",
        "taskType": "story",
        "taskStatus": "pending",
        "priority": 5,
        "createdAt": "2025-01-02T03:04:05Z",
        "updatedAt": "2025-01-02T03:04:05Z",
    }


@pytest.mark.unit
def test_log_roundtrip_preserves_every_field() -> None:
    """Serializing then deserializing yields an identical log."""
    source = Log.model_validate(
        {
            **_MINIMAL,
            "notes": "needs review",
            "startedAt": "2025-01-02T04:00:00Z",
        }
    )

    restored = Log.model_validate(json.loads(json.dumps(source.to_payload())))

    assert restored == source
    assert restored.completed_at is None
    assert "completedAt" not in restored.to_payload()


@pytest.mark.unit
def test_log_is_immutable() -> None:
    """Logs are value objects."""
    log = Log.model_validate(_MINIMAL)

    with pytest.raises(ValidationError):
        log.task_name = "renamed"  # type: ignore[misc]


@pytest.mark.unit
def test_summary_rows_validate_bounds() -> None:
    """Counts must be non-negative and percentages within 0-100."""
    row = TaskStatusSummary.model_validate(
        {"taskStatus": "backlog", "statusCount": 4, "percentage": 40}
    )

    assert row.to_payload() == {
        "taskStatus": "backlog",
        "statusCount": 4,
        "percentage": 40.0,
    }
    with pytest.raises(ValidationError):
        TaskStatusSummary.model_validate(
            {"taskStatus": "backlog", "statusCount": -1, "percentage": 0}
        )
    with pytest.raises(ValidationError):
        TaskTypeSummary.model_validate(
            {"taskType": "bug", "statusCount": 1, "percentage": 100.5}
        )


@pytest.mark.unit
def test_log_update_treats_blank_values_as_unset() -> None:
    """Blank strings in an update carry no change."""
    update = LogUpdate.model_validate(
        {
            "logId": " a1 ",
            "taskName": "  ",
            "taskType": "",
            "notes": "",
            "priority": 10,
        }
    )

    assert update.log_id == "a1"
    assert update.changes() == {"priority": 10}


@pytest.mark.unit
def test_log_query_defaults_and_terms() -> None:
    """Query defaults to first page by updatedAt desc and splits terms."""
    query = LogQuery(search="  Login  BUG ")

    assert query.sort_by.value == "updatedAt"
    assert query.sort_order.value == "desc"
    assert query.limit == 10
    assert query.page == 0
    assert query.terms() == ("login", "bug")


@pytest.mark.unit
def test_log_query_rejects_unknown_sort_field() -> None:
    """Sort keys are limited to log fields."""
    with pytest.raises(ValidationError):
        LogQuery.model_validate({"sortBy": "task_name; drop table"})
