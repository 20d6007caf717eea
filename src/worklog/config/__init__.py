"""Worklog configuration loading."""

from worklog.config.worklog_config import (
    DB_PATH_ENV_VAR,
    ConfigError,
    ListingSettings,
    ReportSettings,
    StorageSettings,
    WorklogConfig,
    load_config,
    resolve_db_path,
    write_default_config,
)

__all__ = [
    "DB_PATH_ENV_VAR",
    "ConfigError",
    "ListingSettings",
    "ReportSettings",
    "StorageSettings",
    "WorklogConfig",
    "load_config",
    "resolve_db_path",
    "write_default_config",
]
