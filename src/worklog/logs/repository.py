"""SQLite-backed worklog repository."""

from __future__ import annotations

import logging
import math
import sqlite3
from collections.abc import Iterable, Iterator, Mapping, Sequence
from contextlib import closing, contextmanager
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, TypeVar
from uuid import uuid4

from pydantic import ValidationError

from worklog.logs import summary
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
    TaskOverview,
    TaskStatusSummary,
    TaskTypeSummary,
    parse_timestamp,
    utc_now,
)

_LOGGER = logging.getLogger(__name__)

_COLUMNS = (
    "log_id",
    "task_name",
    "task_type",
    "task_status",
    "priority",
    "notes",
    "started_at",
    "completed_at",
    "created_at",
    "updated_at",
)
_SELECT = f"SELECT {', '.join(_COLUMNS)} FROM worklog_logs"
_SORT_COLUMNS = {
    LogSortField.TASK_NAME: "task_name",
    LogSortField.TASK_TYPE: "task_type",
    LogSortField.TASK_STATUS: "task_status",
    LogSortField.PRIORITY: "priority",
    LogSortField.STARTED_AT: "started_at",
    LogSortField.COMPLETED_AT: "completed_at",
    LogSortField.CREATED_AT: "created_at",
    LogSortField.UPDATED_AT: "updated_at",
}


class LogRepository:
    """Persist and query worklog entries in one SQLite file."""

    def __init__(self, sqlite_path: Path) -> None:
        """Create repository and ensure required schema exists.

        Args:
            sqlite_path: SQLite file path for log storage.
        """
        self._sqlite_path = sqlite_path
        try:
            self._sqlite_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise _store_unavailable(sqlite_path, exc) from exc
        self._initialize()

    @property
    def sqlite_path(self) -> Path:
        """Return the backing SQLite file path."""
        return self._sqlite_path

    def create(self, request: LogCreate | Mapping[str, Any]) -> Log:
        """Validate and store one new log.

        Args:
            request: Create payload, as a model or a wire/field-name mapping.

        Returns:
            Stored log with assigned id and timestamps.

        Raises:
            WorklogError: If input is invalid or the task name already exists.
        """
        payload = _coerce(LogCreate, request)
        _check_timestamp_order(payload.started_at, payload.completed_at)
        now = utc_now()
        log = Log(
            log_id=uuid4().hex,
            task_name=payload.task_name,
            task_type=payload.task_type,
            task_status=payload.task_status,
            priority=payload.priority,
            notes=payload.notes,
            started_at=payload.started_at,
            completed_at=payload.completed_at,
            created_at=now,
            updated_at=now,
        )
        with self._connection() as conn:
            self._ensure_unique_name(conn, log.task_name)
            conn.execute(
                (
                    "INSERT INTO worklog_logs "
                    f"({', '.join(_COLUMNS)}) "
                    "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)"
                ),
                _row_values(log),
            )
            conn.commit()
        _LOGGER.info("Created log %s (%s)", log.log_id, log.task_name)
        return log

    def get(self, log_id: str) -> Log:
        """Load one log by id.

        Args:
            log_id: Requested log id.

        Returns:
            Stored log.

        Raises:
            WorklogError: If no log has this id.
        """
        normalized = log_id.strip()
        with self._connection() as conn:
            row = conn.execute(f"{_SELECT} WHERE log_id = ?", (normalized,)).fetchone()
        if row is None:
            raise _not_found(normalized)
        return _row_to_log(row)

    def update(self, request: LogUpdate | Mapping[str, Any]) -> Log:
        """Apply a partial update to one log and bump ``updatedAt``.

        Args:
            request: Update payload with ``logId`` and changed fields.

        Returns:
            Log as stored after the update.

        Raises:
            WorklogError: If the id is missing/unknown, nothing changes, or
                the update is invalid.
        """
        payload = _coerce(LogUpdate, request)
        if not payload.log_id:
            raise WorklogError(
                WorklogErrorCode.INVALID_INPUT,
                "Error: log id is required.",
            )
        current = self.get(payload.log_id)
        changes = payload.changes()
        if not changes:
            raise WorklogError(
                WorklogErrorCode.NO_CHANGES,
                "Error: no valid fields to update.",
                data={"log_id": payload.log_id},
            )
        _check_timestamp_order(
            changes.get("started_at", current.started_at),
            changes.get("completed_at", current.completed_at),
        )
        changes["updated_at"] = utc_now()
        assignments = ", ".join(f"{column} = ?" for column in changes)
        with self._connection() as conn:
            if "task_name" in changes:
                self._ensure_unique_name(
                    conn, changes["task_name"], exclude_log_id=current.log_id
                )
            conn.execute(
                f"UPDATE worklog_logs SET {assignments} WHERE log_id = ?",
                (*changes.values(), current.log_id),
            )
            conn.commit()
        _LOGGER.info(
            "Updated log %s fields=%s",
            current.log_id,
            sorted(key for key in changes if key != "updated_at"),
        )
        return self.get(current.log_id)

    def delete(self, log_id: str) -> None:
        """Delete one log by id.

        Args:
            log_id: Target log id.

        Raises:
            WorklogError: If no log has this id.
        """
        normalized = log_id.strip()
        with self._connection() as conn:
            cursor = conn.execute(
                "DELETE FROM worklog_logs WHERE log_id = ?", (normalized,)
            )
            conn.commit()
        if cursor.rowcount == 0:
            raise _not_found(normalized)
        _LOGGER.info("Deleted log %s", normalized)

    def delete_many(self, log_ids: Sequence[str]) -> int:
        """Delete several logs by id, ignoring ids that are not stored.

        Args:
            log_ids: Target log ids.

        Returns:
            Number of rows removed.

        Raises:
            WorklogError: If no ids are given.
        """
        normalized = tuple(
            dict.fromkeys(item.strip() for item in log_ids if item.strip())
        )
        if not normalized:
            raise WorklogError(
                WorklogErrorCode.INVALID_INPUT,
                "Error: at least one log id is required.",
            )
        placeholders = ", ".join("?" for _ in normalized)
        with self._connection() as conn:
            cursor = conn.execute(
                f"DELETE FROM worklog_logs WHERE log_id IN ({placeholders})",
                normalized,
            )
            conn.commit()
        _LOGGER.info(
            "Deleted %d of %d requested logs", cursor.rowcount, len(normalized)
        )
        return cursor.rowcount

    def list_logs(self, query: LogQuery | None = None) -> LogPage:
        """List one page of logs with optional search and sorting.

        Every search term must appear in the task name or notes
        (case-insensitive).

        Args:
            query: Listing query; defaults to the first page by ``updatedAt``.

        Returns:
            Requested page plus totals.
        """
        effective = query or LogQuery()
        clauses: list[str] = []
        params: list[object] = []
        for term in effective.terms():
            pattern = f"%{_escape_like(term)}%"
            clauses.append(
                "(fold_case(task_name) LIKE ? ESCAPE '\\' "
                "OR fold_case(coalesce(notes, '')) LIKE ? ESCAPE '\\')"
            )
            params.extend((pattern, pattern))
        where = f" WHERE {' AND '.join(clauses)}" if clauses else ""
        column = _SORT_COLUMNS[effective.sort_by]
        direction = effective.sort_order.value.upper()
        with self._connection() as conn:
            total = int(
                conn.execute(
                    f"SELECT COUNT(*) FROM worklog_logs{where}", params
                ).fetchone()[0]
            )
            rows = conn.execute(
                (
                    f"{_SELECT}{where} "
                    f"ORDER BY {column} {direction}, log_id {direction} "
                    "LIMIT ? OFFSET ?"
                ),
                (*params, effective.limit, effective.page * effective.limit),
            ).fetchall()
        return LogPage(
            logs=tuple(_row_to_log(row) for row in rows),
            page=effective.page,
            limit=effective.limit,
            total=total,
            total_pages=math.ceil(total / effective.limit),
        )

    def all(self) -> tuple[Log, ...]:
        """Return every stored log ordered by creation time.

        Returns:
            All logs, oldest first.
        """
        with self._connection() as conn:
            rows = conn.execute(f"{_SELECT} ORDER BY created_at, log_id").fetchall()
        return tuple(_row_to_log(row) for row in rows)

    def import_logs(self, logs: Iterable[Log]) -> int:
        """Insert existing logs, keeping their ids and timestamps.

        Logs whose id or task name is already stored are skipped.

        Args:
            logs: Logs to insert.

        Returns:
            Number of logs inserted.
        """
        inserted = 0
        with self._connection() as conn:
            for log in logs:
                cursor = conn.execute(
                    (
                        "INSERT OR IGNORE INTO worklog_logs "
                        f"({', '.join(_COLUMNS)}) "
                        "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)"
                    ),
                    _row_values(log),
                )
                inserted += cursor.rowcount
            conn.commit()
        _LOGGER.info("Imported %d logs into %s", inserted, self._sqlite_path)
        return inserted

    def status_summary(self) -> tuple[TaskStatusSummary, ...]:
        """Summarize stored logs by status.

        Returns:
            Status summary rows.
        """
        return summary.summarize_by_status(self.all())

    def type_summary(self) -> tuple[TaskTypeSummary, ...]:
        """Summarize stored logs by task type.

        Returns:
            Type summary rows.
        """
        return summary.summarize_by_type(self.all())

    def daily_task_counts(self) -> tuple[DailyTaskCount, ...]:
        """Count stored logs per creation day.

        Returns:
            Daily count rows.
        """
        return summary.daily_task_counts(self.all())

    def completed_task_counts(
        self,
        *,
        view: CompletedView = CompletedView.WEEK,
        now: datetime | None = None,
        duration: timedelta = summary.DEFAULT_COMPLETED_DURATION,
    ) -> tuple[CompletedTaskCount, ...]:
        """Count stored completed logs per week or month.

        Args:
            view: Bucket width.
            now: Window end; defaults to the current time.
            duration: Window length.

        Returns:
            Gap-filled bucket rows.

        Raises:
            WorklogError: If the window is shorter than one day or longer
                than ``summary.MAX_COMPLETED_DURATION``.
        """
        if not timedelta(days=1) <= duration <= summary.MAX_COMPLETED_DURATION:
            raise WorklogError(
                WorklogErrorCode.INVALID_INPUT,
                "Error: report window must be between 1 and "
                f"{summary.MAX_COMPLETED_DURATION.days} days.",
                data={"duration_days": duration.days},
            )
        return summary.completed_task_counts(
            self.all(), view=view, now=now, duration=duration
        )

    def task_overview(self) -> TaskOverview:
        """Compute headline counters over stored logs.

        Returns:
            Overview counters.
        """
        return summary.task_overview(self.all())

    def _ensure_unique_name(
        self,
        conn: sqlite3.Connection,
        task_name: str,
        *,
        exclude_log_id: str | None = None,
    ) -> None:
        row = conn.execute(
            "SELECT log_id FROM worklog_logs WHERE task_name = ? LIMIT 1",
            (task_name,),
        ).fetchone()
        if row is not None and row["log_id"] != exclude_log_id:
            raise WorklogError(
                WorklogErrorCode.DUPLICATE,
                f"Error: task name '{task_name}' already exists.",
                data={"task_name": task_name, "log_id": row["log_id"]},
            )

    def _initialize(self) -> None:
        """Create required log schema if missing."""
        with self._connection() as conn:
            conn.execute(
                "CREATE TABLE IF NOT EXISTS worklog_logs ("
                "log_id TEXT PRIMARY KEY,"
                "task_name TEXT NOT NULL UNIQUE,"
                "task_type TEXT NOT NULL,"
                "task_status TEXT NOT NULL,"
                "priority INTEGER NOT NULL,"
                "notes TEXT,"
                "started_at TEXT,"
                "completed_at TEXT,"
                "created_at TEXT NOT NULL,"
                "updated_at TEXT NOT NULL"
                ")"
            )
            conn.commit()

    @contextmanager
    def _connection(self) -> Iterator[sqlite3.Connection]:
        """Open one short-lived connection and map sqlite failures.

        Yields:
            SQLite connection, closed on exit.

        Raises:
            WorklogError: ``log_duplicate`` on a uniqueness conflict,
                ``log_store_unavailable`` on any other sqlite failure.
        """
        try:
            with closing(self._connect()) as conn:
                yield conn
        except sqlite3.IntegrityError as exc:
            raise WorklogError(
                WorklogErrorCode.DUPLICATE,
                "Error: log conflicts with a stored log.",
                data={"reason": str(exc)},
            ) from exc
        except sqlite3.Error as exc:
            raise _store_unavailable(self._sqlite_path, exc) from exc

    def _connect(self) -> sqlite3.Connection:
        """Create sqlite connection in WAL journal mode.

        Registers ``fold_case`` so search matching folds non-ASCII letters
        the same way search terms are folded.

        Returns:
            SQLite connection.
        """
        conn = sqlite3.connect(self._sqlite_path)
        conn.row_factory = sqlite3.Row
        conn.create_function("fold_case", 1, _fold_case, deterministic=True)
        conn.execute("PRAGMA journal_mode=WAL;")
        return conn


ModelT = TypeVar("ModelT", LogCreate, LogUpdate)


def _coerce(
    model: type[ModelT], request: ModelT | Mapping[str, Any]
) -> ModelT:
    """Validate raw request payloads into a request model.

    Args:
        model: Target request model type.
        request: Model instance or raw mapping.

    Returns:
        Validated request model.

    Raises:
        WorklogError: If validation fails.
    """
    if isinstance(request, model):
        return request
    try:
        return model.model_validate(request)
    except ValidationError as exc:
        raise WorklogError(
            WorklogErrorCode.INVALID_INPUT,
            f"Error: invalid log payload: {_first_error(exc)}",
            data={"validation_errors": exc.errors(include_url=False)},
        ) from exc


def _first_error(exc: ValidationError) -> str:
    errors = exc.errors(include_url=False)
    if not errors:
        return str(exc)
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location}: {first.get('msg', '')}" if location else first.get("msg", "")


def _check_timestamp_order(started_at: str | None, completed_at: str | None) -> None:
    if started_at is None or completed_at is None:
        return
    if parse_timestamp(completed_at) < parse_timestamp(started_at):
        raise WorklogError(
            WorklogErrorCode.INVALID_INPUT,
            "Error: completedAt must not precede startedAt.",
            data={"started_at": started_at, "completed_at": completed_at},
        )


def _not_found(log_id: str) -> WorklogError:
    return WorklogError(
        WorklogErrorCode.NOT_FOUND,
        f"Error: no log found with id '{log_id}'.",
        data={"log_id": log_id},
    )


def _store_unavailable(sqlite_path: Path, exc: Exception) -> WorklogError:
    return WorklogError(
        WorklogErrorCode.STORE_UNAVAILABLE,
        f"Error: cannot use worklog store '{sqlite_path}'.",
        data={"path": str(sqlite_path), "reason": str(exc)},
    )


def _fold_case(value: str | None) -> str | None:
    return value.lower() if isinstance(value, str) else value


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _row_values(log: Log) -> tuple[object, ...]:
    return (
        log.log_id,
        log.task_name,
        log.task_type.value,
        log.task_status.value,
        int(log.priority),
        log.notes,
        log.started_at,
        log.completed_at,
        log.created_at,
        log.updated_at,
    )


def _row_to_log(row: sqlite3.Row) -> Log:
    return Log.model_validate({column: row[column] for column in _COLUMNS})
