"""CLI bootstrap helpers: logging, workspace paths, repository wiring."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from worklog.config import WorklogConfig, load_config, resolve_db_path
from worklog.logs import LogRepository

_LOGGING_CONFIGURED = False


@dataclass(frozen=True)
class CliState:
    """Global CLI options shared by every command."""

    config_file: Path | None = None
    db_path: Path | None = None
    verbose: bool = False


def configure_logging(*, verbose: bool = False) -> None:
    """Configure Rich-backed logging once for CLI commands.

    Log records go to stderr so command output stays machine-readable.

    Args:
        verbose: Emit INFO records instead of warnings only.
    """
    global _LOGGING_CONFIGURED  # noqa: PLW0603
    if _LOGGING_CONFIGURED:
        return
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[
            RichHandler(
                console=Console(stderr=True), show_path=False, rich_tracebacks=True
            )
        ],
    )
    _LOGGING_CONFIGURED = True


def default_workspace_dir() -> Path:
    """Return default workspace directory.

    Returns:
        Workspace path under the current directory.
    """
    return Path.cwd() / ".worklog"


def default_config_file(workspace_dir: Path | None = None) -> Path:
    """Return default config path, preferring an existing YAML then JSON file.

    Args:
        workspace_dir: Workspace directory; defaults to `.worklog` in cwd.

    Returns:
        Config file path.
    """
    root = workspace_dir or default_workspace_dir()
    yaml_path = root / "config.yaml"
    json_path = root / "config.json"
    if yaml_path.exists():
        return yaml_path
    if json_path.exists():
        return json_path
    return yaml_path


def load_cli_config(state: CliState) -> tuple[WorklogConfig, Path]:
    """Load config for the effective config file.

    Args:
        state: Global CLI options.

    Returns:
        Loaded config and the config path it came from.
    """
    config_file = state.config_file or default_config_file()
    return load_config(config_file), config_file


def open_repository(state: CliState) -> tuple[WorklogConfig, LogRepository]:
    """Load config and open the log repository it points to.

    Args:
        state: Global CLI options.

    Returns:
        Loaded config and opened repository.
    """
    config, _ = load_cli_config(state)
    db_path = resolve_db_path(config, override=state.db_path)
    return config, LogRepository(db_path)
