"""Aggregations over a population of worklog entries."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Sequence
from datetime import UTC, datetime, timedelta

from worklog.logs.models import (
    CompletedTaskCount,
    CompletedView,
    DailyTaskCount,
    Log,
    Priority,
    TaskOverview,
    TaskStatus,
    TaskStatusSummary,
    TaskType,
    TaskTypeSummary,
    format_timestamp,
    parse_timestamp,
)

_MONTH_ABBREVIATIONS = (
    "JAN",
    "FEB",
    "MAR",
    "APR",
    "MAY",
    "JUN",
    "JUL",
    "AUG",
    "SEP",
    "OCT",
    "NOV",
    "DEC",
)
DEFAULT_COMPLETED_DURATION = timedelta(days=30)
MAX_COMPLETED_DURATION = timedelta(days=3660)


def percentage_of(count: int, total: int) -> float:
    """Return ``count`` as a percentage of ``total`` rounded to 2 places.

    Args:
        count: Group size.
        total: Population size.

    Returns:
        Percentage in ``[0, 100]``; ``0.0`` for an empty population.
    """
    if total <= 0:
        return 0.0
    return round(count * 100 / total, 2)


def summarize_by_status(logs: Sequence[Log]) -> tuple[TaskStatusSummary, ...]:
    """Group logs by status, one row per status present.

    Args:
        logs: Log population.

    Returns:
        Summary rows in workflow order.
    """
    counts = Counter(log.task_status for log in logs)
    total = len(logs)
    return tuple(
        TaskStatusSummary(
            task_status=status,
            status_count=counts[status],
            percentage=percentage_of(counts[status], total),
        )
        for status in TaskStatus
        if counts[status]
    )


def summarize_by_type(logs: Sequence[Log]) -> tuple[TaskTypeSummary, ...]:
    """Group logs by task type, one row per type present.

    Args:
        logs: Log population.

    Returns:
        Summary rows in declaration order.
    """
    counts = Counter(log.task_type for log in logs)
    total = len(logs)
    return tuple(
        TaskTypeSummary(
            task_type=task_type,
            status_count=counts[task_type],
            percentage=percentage_of(counts[task_type], total),
        )
        for task_type in TaskType
        if counts[task_type]
    )


def daily_task_counts(logs: Iterable[Log]) -> tuple[DailyTaskCount, ...]:
    """Count logs per UTC creation day.

    Args:
        logs: Log population.

    Returns:
        One row per day with at least one log, oldest first.
    """
    counts = Counter(parse_timestamp(log.created_at).date() for log in logs)
    return tuple(
        DailyTaskCount(
            created_date=day.isoformat(),
            formatted_date=(
                f"{day.day:02d} {_MONTH_ABBREVIATIONS[day.month - 1]} {day.year}"
            ),
            task_count=counts[day],
        )
        for day in sorted(counts)
    )


def truncate_period(value: datetime, view: CompletedView) -> datetime:
    """Truncate a datetime to the start of its week (Monday) or month.

    Args:
        value: Aware datetime.
        view: Bucket width.

    Returns:
        Bucket start at midnight UTC.
    """
    day = value.astimezone(UTC).replace(hour=0, minute=0, second=0, microsecond=0)
    if view == CompletedView.MONTH:
        return day.replace(day=1)
    return day - timedelta(days=day.weekday())


def _next_period(start: datetime, view: CompletedView) -> datetime:
    if view == CompletedView.WEEK:
        return start + timedelta(weeks=1)
    if start.month == 12:
        return start.replace(year=start.year + 1, month=1)
    return start.replace(month=start.month + 1)


def completed_task_counts(
    logs: Iterable[Log],
    *,
    view: CompletedView = CompletedView.WEEK,
    now: datetime | None = None,
    duration: timedelta = DEFAULT_COMPLETED_DURATION,
) -> tuple[CompletedTaskCount, ...]:
    """Count completed logs per bucket over a gap-filled window.

    The window runs from the bucket containing ``now - duration`` to the
    bucket containing ``now``. Buckets with no completions count zero and
    completions outside the window are ignored.

    Args:
        logs: Log population.
        view: Bucket width.
        now: Window end; defaults to the current time.
        duration: Window length.

    Returns:
        One row per bucket, oldest first.
    """
    end = now or datetime.now(tz=UTC)
    if end.tzinfo is None:
        end = end.replace(tzinfo=UTC)
    last = truncate_period(end, view)
    periods: list[datetime] = []
    current = truncate_period(end - duration, view)
    while current <= last:
        periods.append(current)
        current = _next_period(current, view)
    counts = Counter(
        truncate_period(parse_timestamp(log.completed_at), view)
        for log in logs
        if log.completed_at is not None
    )
    return tuple(
        CompletedTaskCount(
            period_start=format_timestamp(period),
            task_count=counts.get(period, 0),
        )
        for period in periods
    )


def task_overview(logs: Sequence[Log]) -> TaskOverview:
    """Compute headline counters.

    Args:
        logs: Log population.

    Returns:
        Totals for all logs, bugs, in-progress logs, and top-priority logs.
    """
    return TaskOverview(
        total_tasks=len(logs),
        total_bugs=sum(1 for log in logs if log.task_type == TaskType.BUG),
        total_progress_tasks=sum(
            1 for log in logs if log.task_status == TaskStatus.PROGRESS
        ),
        highest_priority_tasks=sum(
            1 for log in logs if log.priority == Priority.HIGHEST
        ),
    )
