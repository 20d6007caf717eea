"""Log list/detail Rich renderer helpers."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from worklog.logs import Log, LogPage, Priority, TaskStatus

STATUS_STYLES = {
    TaskStatus.BACKLOG: "dim",
    TaskStatus.PENDING: "yellow",
    TaskStatus.PROGRESS: "cyan",
    TaskStatus.PR: "magenta",
    TaskStatus.STAGING: "green",
}
PRIORITY_STYLES = {
    Priority.LOW: "dim",
    Priority.MEDIUM: "white",
    Priority.HIGH: "yellow",
    Priority.HIGHEST: "bold red",
}


def render_log_page(console: Console, page: LogPage) -> None:
    """Render one page of logs as a table.

    Args:
        console: Rich console.
        page: Listed page.
    """
    if not page.logs:
        console.print(
            Panel(
                "No logs found.",
                title="Logs",
                border_style="yellow",
                expand=True,
            )
        )
        return
    table = Table(
        title=f"Logs (page {page.page + 1} of {max(page.total_pages, 1)})",
        caption=f"{page.total} total",
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("Log ID", style="green", no_wrap=True)
    table.add_column("Task")
    table.add_column("Type")
    table.add_column("Status")
    table.add_column("Priority", justify="right")
    table.add_column("Updated", no_wrap=True)
    for log in page.logs:
        table.add_row(
            log.log_id,
            escape(log.task_name),
            log.task_type.value,
            _styled_status(log),
            _styled_priority(log),
            log.updated_at,
        )
    console.print(table)


def render_log_detail(console: Console, log: Log, *, title: str = "Log") -> None:
    """Render every field of one log.

    Args:
        console: Rich console.
        log: Log to render.
        title: Panel title.
    """
    table = Table(show_header=False, box=None)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("Log ID", log.log_id)
    table.add_row("Task", escape(log.task_name))
    table.add_row("Type", log.task_type.value)
    table.add_row("Status", _styled_status(log))
    table.add_row("Priority", _styled_priority(log))
    table.add_row("Notes", escape(log.notes or "-"))
    table.add_row("Started", log.started_at or "-")
    table.add_row("Completed", log.completed_at or "-")
    table.add_row("Created", log.created_at)
    table.add_row("Updated", log.updated_at)
    console.print(Panel(table, title=title, border_style="green", expand=True))


def _styled_status(log: Log) -> str:
    style = STATUS_STYLES[log.task_status]
    return f"[{style}]{log.task_status.value}[/{style}]"


def _styled_priority(log: Log) -> str:
    style = PRIORITY_STYLES[log.priority]
    return f"[{style}]{int(log.priority)}[/{style}]"
