"""CLI error/status panels and JSON output."""

from __future__ import annotations

import json
from collections.abc import Mapping

import typer
from rich.console import Console
from rich.json import JSON
from rich.markup import escape
from rich.panel import Panel


def render_error(
    console: Console,
    *,
    code: str,
    message: str,
    data: Mapping[str, object] | None = None,
) -> None:
    """Render one failure as a red panel plus optional diagnostics.

    Args:
        console: Rich console.
        code: Stable error code.
        message: Human-readable message.
        data: Optional structured diagnostics.
    """
    console.print(
        Panel(
            escape(message),
            title=f"Error {escape(f'[{code}]')}",
            border_style="bold red",
            expand=True,
        )
    )
    if data:
        console.print(
            Panel(
                JSON.from_data(dict(data), default=str),
                title="Data",
                border_style="cyan",
                expand=True,
            )
        )


def render_notice(console: Console, message: str, *, title: str) -> None:
    """Render a success notice.

    Args:
        console: Rich console.
        message: Notice body.
        title: Panel title.
    """
    console.print(
        Panel(escape(message), title=title, border_style="green", expand=True)
    )


def echo_json(payload: object) -> None:
    """Print a payload as indented JSON on stdout.

    Args:
        payload: JSON-compatible payload.
    """
    typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))
