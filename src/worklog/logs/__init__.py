"""Worklog models, aggregations, and storage public surface."""

from worklog.logs.archive import (
    ArchiveDecodeError,
    ArchiveError,
    ArchiveSchemaVersionError,
    export_logs,
    load_archive,
)
from worklog.logs.errors import WorklogError, WorklogErrorCode
from worklog.logs.models import (
    CompletedTaskCount,
    CompletedView,
    DailyTaskCount,
    Log,
    LogCreate,
    LogPage,
    LogQuery,
    LogSortField,
    LogUpdate,
    Priority,
    SortOrder,
    TaskOverview,
    TaskStatus,
    TaskStatusSummary,
    TaskType,
    TaskTypeSummary,
)
from worklog.logs.repository import LogRepository

__all__ = [
    "ArchiveDecodeError",
    "ArchiveError",
    "ArchiveSchemaVersionError",
    "CompletedTaskCount",
    "CompletedView",
    "DailyTaskCount",
    "Log",
    "LogCreate",
    "LogPage",
    "LogQuery",
    "LogRepository",
    "LogSortField",
    "LogUpdate",
    "Priority",
    "SortOrder",
    "TaskOverview",
    "TaskStatus",
    "TaskStatusSummary",
    "TaskType",
    "TaskTypeSummary",
    "WorklogError",
    "WorklogErrorCode",
    "export_logs",
    "load_archive",
]
