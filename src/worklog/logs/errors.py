"""Deterministic worklog error contracts."""

from __future__ import annotations

from enum import StrEnum


class WorklogErrorCode(StrEnum):
    """Stable worklog repository error codes."""

    NOT_FOUND = "log_not_found"
    INVALID_INPUT = "log_invalid_input"
    DUPLICATE = "log_duplicate"
    NO_CHANGES = "log_no_changes"
    STORE_UNAVAILABLE = "log_store_unavailable"


class WorklogError(RuntimeError):
    """Worklog failure with stable deterministic code."""

    def __init__(
        self,
        code: WorklogErrorCode,
        message: str,
        *,
        data: dict[str, object] | None = None,
    ) -> None:
        """Create worklog failure.

        Args:
            code: Stable worklog error code.
            message: Human-readable error message.
            data: Optional structured payload for diagnostics.
        """
        super().__init__(message)
        self.code = code
        self.data = data or {}
