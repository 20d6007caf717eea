"""Worklog config models and loading helpers."""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from worklog.logs.models import CompletedView, LogSortField, SortOrder
from worklog.logs.summary import MAX_COMPLETED_DURATION

DB_PATH_ENV_VAR = "WORKLOG_DB_PATH"


class StorageSettings(BaseModel):
    """Log store location."""

    model_config = ConfigDict(extra="forbid")

    sqlite_path: str = ".worklog/worklog.sqlite"


class ListingSettings(BaseModel):
    """Defaults applied to `worklog list` when options are omitted."""

    model_config = ConfigDict(extra="forbid")

    default_limit: int = Field(default=10, ge=1, le=100)
    default_sort_by: LogSortField = LogSortField.UPDATED_AT
    default_sort_order: SortOrder = SortOrder.DESC


class ReportSettings(BaseModel):
    """Defaults for completed-task reports."""

    model_config = ConfigDict(extra="forbid")

    completed_view: CompletedView = CompletedView.WEEK
    completed_duration_days: int = Field(
        default=30, ge=1, le=MAX_COMPLETED_DURATION.days
    )


class WorklogConfig(BaseModel):
    """Root worklog configuration model."""

    model_config = ConfigDict(extra="forbid")

    storage: StorageSettings = StorageSettings()
    listing: ListingSettings = ListingSettings()
    reports: ReportSettings = ReportSettings()


class ConfigError(RuntimeError):
    """Raised when worklog config cannot be decoded or validated."""


def _decode_config_payload(path: Path) -> dict[str, object]:
    """Decode config payload from JSON or YAML.

    Args:
        path: Config file path.

    Returns:
        Parsed mapping payload.

    Raises:
        ConfigError: If decode fails or payload is not an object.
    """
    raw = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Invalid worklog config JSON: {exc}") from exc
    else:
        try:
            payload = yaml.safe_load(raw)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid worklog config YAML: {exc}") from exc
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ConfigError("Invalid worklog config payload: root must be an object")
    return payload


def load_config(path: Path) -> WorklogConfig:
    """Load worklog config from disk, defaulting when missing.

    Args:
        path: Config file path.

    Returns:
        Parsed config payload, or defaults when file does not exist.

    Raises:
        ConfigError: If payload decode or validation fails.
    """
    if not path.exists():
        return WorklogConfig()
    payload = _decode_config_payload(path)
    try:
        return WorklogConfig.model_validate(payload)
    except ValidationError as exc:
        raise ConfigError(f"Invalid worklog config payload: {exc}") from exc


def write_default_config(path: Path, *, overwrite: bool = False) -> bool:
    """Write the default config as YAML.

    Args:
        path: Target config path.
        overwrite: Whether to replace an existing file.

    Returns:
        ``True`` when the file was written.
    """
    if path.exists() and not overwrite:
        return False
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        yaml.safe_dump(WorklogConfig().model_dump(mode="json"), sort_keys=False),
        encoding="utf-8",
    )
    return True


def resolve_db_path(
    config: WorklogConfig,
    *,
    override: Path | None = None,
    environ: Mapping[str, str] | None = None,
    base_dir: Path | None = None,
) -> Path:
    """Resolve the SQLite path: explicit override, env var, then config.

    Relative paths resolve against ``base_dir`` (default: working directory).

    Args:
        config: Loaded worklog config.
        override: Explicit path, e.g. from `--db-path`.
        environ: Environment mapping; defaults to ``os.environ``.
        base_dir: Base directory for relative paths.

    Returns:
        Effective SQLite path.
    """
    env = os.environ if environ is None else environ
    if override is not None:
        candidate = override
    elif env.get(DB_PATH_ENV_VAR, "").strip():
        candidate = Path(env[DB_PATH_ENV_VAR].strip())
    else:
        candidate = Path(config.storage.sqlite_path)
    candidate = candidate.expanduser()
    if candidate.is_absolute():
        return candidate
    return (base_dir or Path.cwd()) / candidate
