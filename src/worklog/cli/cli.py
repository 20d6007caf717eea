"""Typer CLI entrypoint for Worklog."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import timedelta
from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from worklog.cli.bootstrap import (
    CliState,
    configure_logging,
    default_config_file,
    load_cli_config,
    open_repository,
)
from worklog.cli.renderers.logs import render_log_detail, render_log_page
from worklog.cli.renderers.summaries import (
    render_breakdown,
    render_completed_counts,
    render_daily_counts,
    render_overview,
)
from worklog.cli.rendering import echo_json, render_error, render_notice
from worklog.config import ConfigError, resolve_db_path, write_default_config
from worklog.logs import (
    ArchiveError,
    CompletedView,
    LogQuery,
    LogRepository,
    WorklogError,
    WorklogErrorCode,
    export_logs,
    load_archive,
)
from worklog.logs.summary import MAX_COMPLETED_DURATION

app = typer.Typer(help="Worklog CLI")
summary_app = typer.Typer(help="Summary reports over stored logs.")
app.add_typer(summary_app, name="summary")
_CONSOLE = Console()
_LOGGER = logging.getLogger(__name__)

JsonOption = Annotated[
    bool, typer.Option("--json", help="Print the raw JSON payload.")
]


@app.callback()
def main(
    ctx: typer.Context,
    config_file: Annotated[
        Path | None,
        typer.Option(
            file_okay=True,
            dir_okay=False,
            help="Path to worklog config YAML/JSON file.",
        ),
    ] = None,
    db_path: Annotated[
        Path | None,
        typer.Option(
            file_okay=True,
            dir_okay=False,
            help="SQLite file path; overrides config and WORKLOG_DB_PATH.",
        ),
    ] = None,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Log INFO records to stderr.")
    ] = False,
) -> None:
    """Track worklog entries and report on them."""
    configure_logging(verbose=verbose)
    ctx.obj = CliState(config_file=config_file, db_path=db_path, verbose=verbose)


def _state(ctx: typer.Context) -> CliState:
    state = ctx.find_root().obj
    return state if isinstance(state, CliState) else CliState()


@contextmanager
def _handle_errors() -> Iterator[None]:
    """Render known failures and exit non-zero.

    Raises:
        Exit: Raised with code 1 on worklog, config, or archive failure.
    """
    try:
        yield
    except WorklogError as exc:
        render_error(_CONSOLE, code=exc.code.value, message=str(exc), data=exc.data)
        raise typer.Exit(code=1) from exc
    except ConfigError as exc:
        render_error(_CONSOLE, code="config_invalid", message=str(exc))
        raise typer.Exit(code=1) from exc
    except ArchiveError as exc:
        render_error(_CONSOLE, code="archive_invalid", message=str(exc))
        raise typer.Exit(code=1) from exc


def _repository(ctx: typer.Context) -> LogRepository:
    _, repository = open_repository(_state(ctx))
    return repository


@app.command("init")
def init_command(
    ctx: typer.Context,
    overwrite_config: Annotated[
        bool,
        typer.Option(
            "--overwrite-config",
            help="Overwrite existing config file with default template.",
        ),
    ] = False,
) -> None:
    """Initialize the worklog config file and log store."""
    state = _state(ctx)
    with _handle_errors():
        config_file = state.config_file or default_config_file()
        config_existed = config_file.exists()
        written = write_default_config(config_file, overwrite=overwrite_config)
        config, _ = load_cli_config(CliState(config_file=config_file))
        db_path = resolve_db_path(config, override=state.db_path)
        store_existed = db_path.exists()
        LogRepository(db_path)
    if not written:
        config_action = "exists"
    elif config_existed:
        config_action = "overwritten"
    else:
        config_action = "created"
    table = Table(title="Worklog Init", show_header=True, header_style="bold cyan")
    table.add_column("Resource", style="bold")
    table.add_column("Status", style="green")
    table.add_row("config_file", config_action)
    table.add_row("log_store", "exists" if store_existed else "created")
    _CONSOLE.print(table)
    _CONSOLE.print(
        Panel(
            f"Config: {config_file}\nStore: {db_path}",
            title="Initialized",
            border_style="green",
            expand=True,
        )
    )


@app.command("add")
def add_command(  # noqa: PLR0913
    ctx: typer.Context,
    task_name: Annotated[str, typer.Argument(help="Task name; must be unique.")],
    task_type: Annotated[
        str, typer.Option("--type", "-t", help="task | bug | story")
    ] = "task",
    task_status: Annotated[
        str,
        typer.Option(
            "--status", "-s", help="backlog | pending | progress | pr | staging"
        ),
    ] = "backlog",
    priority: Annotated[
        int, typer.Option("--priority", "-p", help="1 | 5 | 7 | 10")
    ] = 1,
    notes: Annotated[str | None, typer.Option(help="Free-text notes.")] = None,
    started_at: Annotated[
        str | None, typer.Option(help="ISO-8601 start timestamp.")
    ] = None,
    completed_at: Annotated[
        str | None, typer.Option(help="ISO-8601 completion timestamp.")
    ] = None,
    as_json: JsonOption = False,
) -> None:
    """Create one log."""
    with _handle_errors():
        log = _repository(ctx).create(
            {
                "taskName": task_name,
                "taskType": task_type,
                "taskStatus": task_status,
                "priority": priority,
                "notes": notes,
                "startedAt": started_at,
                "completedAt": completed_at,
            }
        )
    if as_json:
        echo_json(log.to_payload())
        return
    render_log_detail(_CONSOLE, log, title="Log created")


@app.command("show")
def show_command(
    ctx: typer.Context,
    log_id: Annotated[str, typer.Argument(help="Log id.")],
    as_json: JsonOption = False,
) -> None:
    """Show one log."""
    with _handle_errors():
        log = _repository(ctx).get(log_id)
    if as_json:
        echo_json(log.to_payload())
        return
    render_log_detail(_CONSOLE, log)


@app.command("list")
def list_command(  # noqa: PLR0913
    ctx: typer.Context,
    search: Annotated[
        str, typer.Option("--search", "-q", help="Terms matched in name/notes.")
    ] = "",
    sort_by: Annotated[
        str | None, typer.Option(help="Log field to sort by, e.g. priority.")
    ] = None,
    sort_order: Annotated[str | None, typer.Option(help="asc | desc")] = None,
    limit: Annotated[int | None, typer.Option(help="Page size (1-100).")] = None,
    page: Annotated[int, typer.Option(help="0-based page index.")] = 0,
    as_json: JsonOption = False,
) -> None:
    """List logs with search, sorting, and paging."""
    with _handle_errors():
        config, repository = open_repository(_state(ctx))
        query = _build_query(
            {
                "search": search,
                "sortBy": sort_by or config.listing.default_sort_by,
                "sortOrder": sort_order or config.listing.default_sort_order,
                "limit": limit if limit is not None else config.listing.default_limit,
                "page": page,
            }
        )
        result = repository.list_logs(query)
    if as_json:
        echo_json(result.to_payload())
        return
    render_log_page(_CONSOLE, result)


def _build_query(payload: dict[str, object]) -> LogQuery:
    try:
        return LogQuery.model_validate(payload)
    except ValidationError as exc:
        raise WorklogError(
            WorklogErrorCode.INVALID_INPUT,
            "Error: invalid list options.",
            data={"validation_errors": exc.errors(include_url=False)},
        ) from exc


@app.command("update")
def update_command(  # noqa: PLR0913
    ctx: typer.Context,
    log_id: Annotated[str, typer.Argument(help="Log id.")],
    task_name: Annotated[str | None, typer.Option("--name", help="New name.")] = None,
    task_type: Annotated[
        str | None, typer.Option("--type", "-t", help="task | bug | story")
    ] = None,
    task_status: Annotated[
        str | None,
        typer.Option(
            "--status", "-s", help="backlog | pending | progress | pr | staging"
        ),
    ] = None,
    priority: Annotated[
        int | None, typer.Option("--priority", "-p", help="1 | 5 | 7 | 10")
    ] = None,
    notes: Annotated[str | None, typer.Option(help="Replacement notes.")] = None,
    started_at: Annotated[
        str | None, typer.Option(help="ISO-8601 start timestamp.")
    ] = None,
    completed_at: Annotated[
        str | None, typer.Option(help="ISO-8601 completion timestamp.")
    ] = None,
    as_json: JsonOption = False,
) -> None:
    """Update fields of one log."""
    with _handle_errors():
        log = _repository(ctx).update(
            {
                "logId": log_id,
                "taskName": task_name,
                "taskType": task_type,
                "taskStatus": task_status,
                "priority": priority,
                "notes": notes,
                "startedAt": started_at,
                "completedAt": completed_at,
            }
        )
    if as_json:
        echo_json({"message": "Log updated successfully", "log": log.to_payload()})
        return
    render_log_detail(_CONSOLE, log, title="Log updated")


@app.command("delete")
def delete_command(
    ctx: typer.Context,
    log_ids: Annotated[list[str], typer.Argument(help="One or more log ids.")],
) -> None:
    """Delete one or more logs."""
    with _handle_errors():
        repository = _repository(ctx)
        if len(log_ids) == 1:
            repository.delete(log_ids[0])
            removed = 1
        else:
            removed = repository.delete_many(log_ids)
    render_notice(_CONSOLE, f"Deleted {removed} log(s).", title="Deleted")


@app.command("export")
def export_command(
    ctx: typer.Context,
    path: Annotated[
        Path, typer.Argument(file_okay=True, dir_okay=False, help="Archive file.")
    ],
) -> None:
    """Export every log to a JSON archive."""
    with _handle_errors():
        count = export_logs(_repository(ctx).all(), path)
    render_notice(_CONSOLE, f"Exported {count} log(s) to {path}.", title="Exported")


@app.command("import")
def import_command(
    ctx: typer.Context,
    path: Annotated[
        Path,
        typer.Argument(
            exists=True, file_okay=True, dir_okay=False, help="Archive file."
        ),
    ],
) -> None:
    """Import logs from a JSON archive, skipping ids and names already stored."""
    with _handle_errors():
        logs = load_archive(path)
        inserted = _repository(ctx).import_logs(logs)
    skipped = len(logs) - inserted
    if skipped:
        _LOGGER.warning("Skipped %d archived log(s) already in the store", skipped)
    render_notice(
        _CONSOLE,
        f"Imported {inserted} log(s); skipped {skipped}.",
        title="Imported",
    )


@summary_app.command("status")
def summary_status_command(ctx: typer.Context, as_json: JsonOption = False) -> None:
    """Break logs down by status."""
    with _handle_errors():
        rows = _repository(ctx).status_summary()
    if as_json:
        echo_json({"statusSummary": [row.to_payload() for row in rows]})
        return
    render_breakdown(_CONSOLE, rows, title="Status Summary", label="Status")


@summary_app.command("type")
def summary_type_command(ctx: typer.Context, as_json: JsonOption = False) -> None:
    """Break logs down by task type."""
    with _handle_errors():
        rows = _repository(ctx).type_summary()
    if as_json:
        echo_json({"typeSummary": [row.to_payload() for row in rows]})
        return
    render_breakdown(_CONSOLE, rows, title="Type Summary", label="Type")


@summary_app.command("daily")
def summary_daily_command(ctx: typer.Context, as_json: JsonOption = False) -> None:
    """Count logs created per day."""
    with _handle_errors():
        rows = _repository(ctx).daily_task_counts()
    if as_json:
        echo_json({"dailyTasks": [row.to_payload() for row in rows]})
        return
    render_daily_counts(_CONSOLE, rows)


@summary_app.command("completed")
def summary_completed_command(
    ctx: typer.Context,
    view: Annotated[
        CompletedView | None, typer.Option(help="Bucket width: week | month.")
    ] = None,
    days: Annotated[
        int | None,
        typer.Option(
            min=1,
            max=MAX_COMPLETED_DURATION.days,
            help="Window length in days.",
        ),
    ] = None,
    as_json: JsonOption = False,
) -> None:
    """Count completed logs per week or month."""
    with _handle_errors():
        config, repository = open_repository(_state(ctx))
        effective_view = view or config.reports.completed_view
        duration = timedelta(days=days or config.reports.completed_duration_days)
        rows = repository.completed_task_counts(
            view=effective_view, duration=duration
        )
    if as_json:
        echo_json({"completedCount": [row.to_payload() for row in rows]})
        return
    render_completed_counts(_CONSOLE, rows, view=effective_view.value)


@summary_app.command("overview")
def summary_overview_command(
    ctx: typer.Context, as_json: JsonOption = False
) -> None:
    """Show headline counters."""
    with _handle_errors():
        overview = _repository(ctx).task_overview()
    if as_json:
        echo_json(overview.to_payload())
        return
    render_overview(_CONSOLE, overview)
