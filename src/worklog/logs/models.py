"""Worklog entry, summary, and query models."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import IntEnum, StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TaskType(StrEnum):
    """Classification of one work item."""

    TASK = "task"
    BUG = "bug"
    STORY = "story"


class TaskStatus(StrEnum):
    """Workflow stage of one work item, declared in workflow order."""

    BACKLOG = "backlog"
    PENDING = "pending"
    PROGRESS = "progress"
    PR = "pr"
    STAGING = "staging"


class Priority(IntEnum):
    """Discrete urgency scale. Only these four values are valid."""

    LOW = 1
    MEDIUM = 5
    HIGH = 7
    HIGHEST = 10


class SortOrder(StrEnum):
    """Listing sort direction."""

    ASC = "asc"
    DESC = "desc"


class LogSortField(StrEnum):
    """Log fields accepted as listing sort keys."""

    TASK_NAME = "taskName"
    TASK_TYPE = "taskType"
    TASK_STATUS = "taskStatus"
    PRIORITY = "priority"
    STARTED_AT = "startedAt"
    COMPLETED_AT = "completedAt"
    CREATED_AT = "createdAt"
    UPDATED_AT = "updatedAt"


class CompletedView(StrEnum):
    """Bucket width for completed-task reports."""

    WEEK = "week"
    MONTH = "month"


def utc_now() -> str:
    """Return the current UTC time as a normalized timestamp string.

    Returns:
        UTC timestamp string.
    """
    return format_timestamp(datetime.now(tz=UTC))


def format_timestamp(value: datetime) -> str:
    """Render a datetime as ``YYYY-MM-DDTHH:MM:SSZ`` in UTC.

    Naive datetimes are taken to be UTC already.

    Args:
        value: Datetime to render.

    Returns:
        Normalized timestamp string.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return (
        value.astimezone(UTC)
        .replace(microsecond=0)
        .isoformat()
        .replace("+00:00", "Z")
    )


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp string into an aware UTC datetime.

    Args:
        value: Timestamp text.

    Returns:
        Aware UTC datetime.

    Raises:
        ValueError: If the text is not ISO-8601.
    """
    parsed = datetime.fromisoformat(value.strip())
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def _normalize_timestamp(value: object) -> object:
    if value is None:
        return None
    if isinstance(value, datetime):
        return format_timestamp(value)
    if isinstance(value, str):
        if not value.strip():
            return None
        try:
            return format_timestamp(parse_timestamp(value))
        except ValueError as exc:
            raise ValueError(f"invalid ISO-8601 timestamp: {value!r}") from exc
    return value


def _blank_to_none(value: object) -> object:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class WorklogModel(BaseModel):
    """Base for immutable camelCase wire models."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    def to_payload(self) -> dict[str, Any]:
        """Serialize with wire field names, omitting absent optionals.

        Returns:
            JSON-compatible mapping.
        """
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Log(WorklogModel):
    """A single worklog entry."""

    log_id: str = Field(alias="logId", min_length=1)
    task_name: str = Field(alias="taskName", min_length=1)
    task_type: TaskType = Field(alias="taskType")
    task_status: TaskStatus = Field(alias="taskStatus")
    priority: Priority
    notes: str | None = None
    started_at: str | None = Field(default=None, alias="startedAt")
    completed_at: str | None = Field(default=None, alias="completedAt")
    created_at: str = Field(alias="createdAt")
    updated_at: str = Field(alias="updatedAt")

    @field_validator(
        "started_at", "completed_at", "created_at", "updated_at", mode="before"
    )
    @classmethod
    def _normalize_timestamps(cls, value: object) -> object:
        return _normalize_timestamp(value)


class TaskStatusSummary(WorklogModel):
    """Count and share of logs in one status."""

    task_status: TaskStatus = Field(alias="taskStatus")
    status_count: int = Field(alias="statusCount", ge=0)
    percentage: float = Field(ge=0, le=100)


class TaskTypeSummary(WorklogModel):
    """Count and share of logs of one task type."""

    task_type: TaskType = Field(alias="taskType")
    status_count: int = Field(alias="statusCount", ge=0)
    percentage: float = Field(ge=0, le=100)


class DailyTaskCount(WorklogModel):
    """Number of logs created on one UTC calendar day."""

    created_date: str = Field(alias="createdDate")
    formatted_date: str = Field(alias="formattedDate")
    task_count: int = Field(alias="taskCount", ge=0)


class CompletedTaskCount(WorklogModel):
    """Number of logs completed within one week or month bucket."""

    period_start: str = Field(alias="periodStart")
    task_count: int = Field(alias="taskCount", ge=0)


class TaskOverview(WorklogModel):
    """Headline counters across the whole log population."""

    total_tasks: int = Field(alias="totalTasks", ge=0)
    total_bugs: int = Field(alias="totalBugs", ge=0)
    total_progress_tasks: int = Field(alias="totalProgressTasks", ge=0)
    highest_priority_tasks: int = Field(alias="highestPriorityTasks", ge=0)


class LogCreate(WorklogModel):
    """Input contract for creating one log."""

    task_name: str = Field(alias="taskName", min_length=1)
    task_type: TaskType = Field(alias="taskType")
    task_status: TaskStatus = Field(alias="taskStatus")
    priority: Priority = Priority.LOW
    notes: str | None = None
    started_at: str | None = Field(default=None, alias="startedAt")
    completed_at: str | None = Field(default=None, alias="completedAt")

    @field_validator("task_name", mode="before")
    @classmethod
    def _strip_task_name(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value

    @field_validator("notes", mode="before")
    @classmethod
    def _drop_blank_notes(cls, value: object) -> object:
        return _blank_to_none(value)

    @field_validator("started_at", "completed_at", mode="before")
    @classmethod
    def _normalize_timestamps(cls, value: object) -> object:
        return _normalize_timestamp(value)


class LogUpdate(WorklogModel):
    """Partial update for one log. Blank values mean "leave unchanged"."""

    log_id: str = Field(alias="logId")
    task_name: str | None = Field(default=None, alias="taskName")
    task_type: TaskType | None = Field(default=None, alias="taskType")
    task_status: TaskStatus | None = Field(default=None, alias="taskStatus")
    priority: Priority | None = None
    notes: str | None = None
    started_at: str | None = Field(default=None, alias="startedAt")
    completed_at: str | None = Field(default=None, alias="completedAt")

    @field_validator("log_id", "task_name", mode="before")
    @classmethod
    def _strip_text(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value

    @field_validator("task_name", "task_type", "task_status", "notes", mode="before")
    @classmethod
    def _drop_blank(cls, value: object) -> object:
        return _blank_to_none(value)

    @field_validator("started_at", "completed_at", mode="before")
    @classmethod
    def _normalize_timestamps(cls, value: object) -> object:
        return _normalize_timestamp(value)

    def changes(self) -> dict[str, Any]:
        """Return provided fields keyed by python field name.

        Returns:
            Mapping of fields to update.
        """
        return self.model_dump(mode="json", exclude={"log_id"}, exclude_none=True)


class LogQuery(WorklogModel):
    """Listing query: free-text search, sort, and page window."""

    search: str = ""
    sort_by: LogSortField = Field(default=LogSortField.UPDATED_AT, alias="sortBy")
    sort_order: SortOrder = Field(default=SortOrder.DESC, alias="sortOrder")
    limit: int = Field(default=10, ge=1, le=100)
    page: int = Field(default=0, ge=0)

    def terms(self) -> tuple[str, ...]:
        """Split the search text into lowercase terms.

        Returns:
            Search terms; empty when no search was requested.
        """
        return tuple(term.lower() for term in self.search.split())


class LogPage(WorklogModel):
    """One page of listed logs."""

    logs: tuple[Log, ...] = ()
    page: int = Field(ge=0)
    limit: int = Field(ge=1)
    total: int = Field(ge=0)
    total_pages: int = Field(alias="totalPages", ge=0)
