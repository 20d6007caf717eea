"""Unit tests for worklog aggregations."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import pytest

from worklog.logs import CompletedView, Log, TaskStatus, TaskType
from worklog.logs.summary import (
    completed_task_counts,
    daily_task_counts,
    percentage_of,
    summarize_by_status,
    summarize_by_type,
    task_overview,
    truncate_period,
)

MakeLog = Callable[..., Log]


@pytest.mark.unit
def test_status_summary_matches_documented_example(make_log: MakeLog) -> None:
    """4 backlog + 6 progress logs yield 40% / 60% rows."""
    # Arrange - population of ten logs
    logs = [make_log(taskStatus="backlog") for _ in range(4)]
    logs += [make_log(taskStatus="progress") for _ in range(6)]

    # Act - summarize by status
    rows = summarize_by_status(logs)

    # Assert - two rows in workflow order
    assert [row.to_payload() for row in rows] == [
        {"taskStatus": "backlog", "statusCount": 4, "percentage": 40.0},
        {"taskStatus": "progress", "statusCount": 6, "percentage": 60.0},
    ]


@pytest.mark.unit
def test_status_summary_counts_and_percentages_sum(make_log: MakeLog) -> None:
    """Counts sum to N and percentages sum to 100 within rounding."""
    # Arrange - uneven split across every status
    statuses = ["backlog", "pending", "progress", "pr", "staging", "pending", "pr"]
    logs = [make_log(taskStatus=status) for status in statuses]

    # Act - summarize by status
    rows = summarize_by_status(logs)

    # Assert - totals hold
    assert sum(row.status_count for row in rows) == len(logs)
    assert sum(row.percentage for row in rows) == pytest.approx(100, abs=1)
    assert [row.task_status for row in rows] == list(TaskStatus)


@pytest.mark.unit
def test_type_summary_groups_by_task_type(make_log: MakeLog) -> None:
    """Type summary mirrors status summary over task type."""
    logs = [
        make_log(taskType="bug"),
        make_log(taskType="bug"),
        make_log(taskType="story"),
    ]

    rows = summarize_by_type(logs)

    assert [(row.task_type, row.status_count) for row in rows] == [
        (TaskType.BUG, 2),
        (TaskType.STORY, 1),
    ]
    assert rows[0].percentage == pytest.approx(66.67)
    assert rows[1].percentage == pytest.approx(33.33)


@pytest.mark.unit
def test_summaries_of_empty_population_are_empty() -> None:
    """No logs means no rows rather than division by zero."""
    assert summarize_by_status([]) == ()
    assert summarize_by_type([]) == ()
    assert percentage_of(0, 0) == 0.0


@pytest.mark.unit
def test_daily_task_counts_group_by_utc_day(make_log: MakeLog) -> None:
    """Logs are counted per UTC creation date, oldest first."""
    logs = [
        make_log(createdAt="2025-01-05T23:30:00-02:00"),
        make_log(createdAt="2025-01-06T08:00:00Z"),
        make_log(createdAt="2025-01-04T12:00:00Z"),
    ]

    rows = daily_task_counts(logs)

    assert [row.to_payload() for row in rows] == [
        {"createdDate": "2025-01-04", "formattedDate": "04 JAN 2025", "taskCount": 1},
        {"createdDate": "2025-01-06", "formattedDate": "06 JAN 2025", "taskCount": 2},
    ]


@pytest.mark.unit
def test_truncate_period_week_starts_monday_and_month_starts_first() -> None:
    """Week buckets start Monday 00:00 UTC; month buckets on day one."""
    value = datetime(2025, 3, 6, 15, 45, tzinfo=UTC)  # Thursday

    assert truncate_period(value, CompletedView.WEEK) == datetime(
        2025, 3, 3, tzinfo=UTC
    )
    assert truncate_period(value, CompletedView.MONTH) == datetime(
        2025, 3, 1, tzinfo=UTC
    )


@pytest.mark.unit
def test_completed_counts_fill_gaps_per_week(make_log: MakeLog) -> None:
    """Every week in the window appears, with zero when nothing completed."""
    # Arrange - completions in two of five weeks plus one outside the window
    now = datetime(2025, 3, 6, 12, 0, tzinfo=UTC)
    logs = [
        make_log(completedAt="2025-02-04T10:00:00Z"),
        make_log(completedAt="2025-02-05T10:00:00Z"),
        make_log(completedAt="2025-03-04T10:00:00Z"),
        make_log(completedAt="2024-12-01T10:00:00Z"),
        make_log(),
    ]

    # Act - weekly buckets over 30 days
    rows = completed_task_counts(
        logs, view=CompletedView.WEEK, now=now, duration=timedelta(days=30)
    )

    # Assert - Mondays from 2025-02-03 to 2025-03-03
    assert [(row.period_start, row.task_count) for row in rows] == [
        ("2025-02-03T00:00:00Z", 2),
        ("2025-02-10T00:00:00Z", 0),
        ("2025-02-17T00:00:00Z", 0),
        ("2025-02-24T00:00:00Z", 0),
        ("2025-03-03T00:00:00Z", 1),
    ]


@pytest.mark.unit
def test_completed_counts_per_month_cross_year(make_log: MakeLog) -> None:
    """Month buckets roll over December into January."""
    now = datetime(2025, 1, 15, tzinfo=UTC)
    logs = [
        make_log(completedAt="2024-12-20T10:00:00Z"),
        make_log(completedAt="2025-01-02T10:00:00Z"),
        make_log(completedAt="2025-01-10T10:00:00Z"),
    ]

    rows = completed_task_counts(
        logs, view=CompletedView.MONTH, now=now, duration=timedelta(days=60)
    )

    assert [(row.period_start, row.task_count) for row in rows] == [
        ("2024-11-01T00:00:00Z", 0),
        ("2024-12-01T00:00:00Z", 1),
        ("2025-01-01T00:00:00Z", 2),
    ]


@pytest.mark.unit
def test_task_overview_counts_headlines(make_log: MakeLog) -> None:
    """Overview counts all logs, bugs, in-progress and priority-10 logs."""
    logs = [
        make_log(taskType="bug", taskStatus="progress", priority=10),
        make_log(taskType="bug"),
        make_log(taskStatus="progress", priority=7),
        make_log(priority=10),
    ]

    overview = task_overview(logs)

    assert overview.to_payload() == {
        "totalTasks": 4,
        "totalBugs": 2,
        "totalProgressTasks": 2,
        "highestPriorityTasks": 2,
    }
