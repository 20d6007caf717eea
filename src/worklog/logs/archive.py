"""Versioned JSON export/import of worklog entries."""

from __future__ import annotations

import json
from collections.abc import Iterable
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError

from worklog.logs.models import Log

ARCHIVE_SCHEMA_VERSION = 1


class ArchiveError(RuntimeError):
    """Base error for archive read/write operations."""


class ArchiveSchemaVersionError(ArchiveError):
    """Raised when an archive schema version is unsupported."""


class ArchiveDecodeError(ArchiveError):
    """Raised when an archive cannot be decoded/validated."""


class LogArchiveV1(BaseModel):
    """Versioned archive payload."""

    model_config = ConfigDict(extra="forbid")

    schema_version: int = ARCHIVE_SCHEMA_VERSION
    logs: tuple[Log, ...] = ()


def export_logs(logs: Iterable[Log], path: Path) -> int:
    """Write logs to an archive file atomically.

    Args:
        logs: Logs to export.
        path: Target archive path.

    Returns:
        Number of exported logs.

    Raises:
        ArchiveError: If the archive cannot be written.
    """
    rows = [log.to_payload() for log in logs]
    temp_path = path.with_name(f"{path.name}.tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        temp_path.write_text(
            json.dumps(
                {"schema_version": ARCHIVE_SCHEMA_VERSION, "logs": rows},
                indent=2,
                ensure_ascii=False,
            ),
            encoding="utf-8",
        )
        temp_path.replace(path)
    except OSError as exc:
        temp_path.unlink(missing_ok=True)
        raise ArchiveError(f"Unable to write archive '{path}': {exc}") from exc
    return len(rows)


def load_archive(path: Path) -> tuple[Log, ...]:
    """Read logs from an archive file.

    Args:
        path: Archive file path.

    Returns:
        Archived logs in file order.

    Raises:
        ArchiveDecodeError: If the file cannot be read, decoded or validated.
        ArchiveSchemaVersionError: If the schema version is unsupported.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ArchiveDecodeError(f"Cannot read archive '{path}': {exc}") from exc
    try:
        decoded = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ArchiveDecodeError(f"Invalid archive JSON: {exc}") from exc

    migrated = _migrate_payload(decoded)
    try:
        payload = LogArchiveV1.model_validate(migrated)
    except ValidationError as exc:
        raise ArchiveDecodeError(f"Invalid archive payload: {exc}") from exc
    return payload.logs


def _migrate_payload(payload: object) -> dict[str, object]:
    """Migrate an archive payload into the latest schema.

    Args:
        payload: Decoded JSON payload object.

    Returns:
        Payload matching the latest schema.

    Raises:
        ArchiveDecodeError: If payload is not a JSON object.
        ArchiveSchemaVersionError: If schema version is unsupported.
    """
    if not isinstance(payload, dict):
        raise ArchiveDecodeError("Invalid archive payload: expected JSON object.")
    version = payload.get("schema_version")
    if version == ARCHIVE_SCHEMA_VERSION:
        return payload
    raise ArchiveSchemaVersionError(
        f"Unsupported archive schema version: {version!r}. "
        f"Expected {ARCHIVE_SCHEMA_VERSION}."
    )
