"""Summary report Rich renderer helpers."""

from __future__ import annotations

from collections.abc import Sequence

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from worklog.logs import (
    CompletedTaskCount,
    DailyTaskCount,
    TaskOverview,
    TaskStatusSummary,
    TaskTypeSummary,
)


def render_breakdown(
    console: Console,
    rows: Sequence[TaskStatusSummary] | Sequence[TaskTypeSummary],
    *,
    title: str,
    label: str,
) -> None:
    """Render a status or type breakdown with count and share columns.

    Args:
        console: Rich console.
        rows: Summary rows.
        title: Table title.
        label: Header for the grouping column.
    """
    if not rows:
        _render_empty(console, title)
        return
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column(label, style="bold")
    table.add_column("Count", justify="right")
    table.add_column("Share", justify="right", style="green")
    for row in rows:
        key = (
            row.task_status.value
            if isinstance(row, TaskStatusSummary)
            else row.task_type.value
        )
        table.add_row(key, str(row.status_count), f"{row.percentage:.1f}%")
    console.print(table)


def render_daily_counts(console: Console, rows: Sequence[DailyTaskCount]) -> None:
    """Render logs created per day.

    Args:
        console: Rich console.
        rows: Daily count rows.
    """
    if not rows:
        _render_empty(console, "Daily Task Count")
        return
    table = Table(title="Daily Task Count", show_header=True, header_style="bold cyan")
    table.add_column("Date", style="bold", no_wrap=True)
    table.add_column("Tasks", justify="right")
    for row in rows:
        table.add_row(row.formatted_date, str(row.task_count))
    console.print(table)


def render_completed_counts(
    console: Console, rows: Sequence[CompletedTaskCount], *, view: str
) -> None:
    """Render completed logs per period.

    Args:
        console: Rich console.
        rows: Bucket rows.
        view: Bucket width label.
    """
    title = f"Completed Tasks per {view}"
    if not rows:
        _render_empty(console, title)
        return
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Period Start", style="bold", no_wrap=True)
    table.add_column("Completed", justify="right")
    for row in rows:
        table.add_row(row.period_start, str(row.task_count))
    console.print(table)


def render_overview(console: Console, overview: TaskOverview) -> None:
    """Render headline counters.

    Args:
        console: Rich console.
        overview: Overview counters.
    """
    table = Table(show_header=False, box=None)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    table.add_row("Total tasks", str(overview.total_tasks))
    table.add_row("Bugs", str(overview.total_bugs))
    table.add_row("In progress", str(overview.total_progress_tasks))
    table.add_row("Highest priority", str(overview.highest_priority_tasks))
    console.print(Panel(table, title="Overview", border_style="cyan", expand=True))


def _render_empty(console: Console, title: str) -> None:
    console.print(
        Panel("No logs recorded yet.", title=title, border_style="yellow", expand=True)
    )
