"""
Exception hierarchy for the Stackdriver hook.

Only construction and transport can fail. Field extraction never raises:
wrong-typed well-known fields fall back to their defaults.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class StackdriverError(Exception):
    """Base exception for this package.

    Carries a stable ``code`` and a ``details`` mapping so callers can branch
    on the failure kind without parsing messages.
    """

    def __init__(
        self,
        message: str,
        *,
        code: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.details = details or {}


class ClientInitializationError(StackdriverError):
    """The Cloud Logging client could not be constructed.

    Raised synchronously from hook construction; there is no retry.
    """

    def __init__(self, *, project_id: Optional[str], reason: str) -> None:
        super().__init__(
            f"Failed to initialize logging client for project '{project_id}': {reason}",
            code="CLIENT_INIT_FAILED",
            details={"project_id": project_id, "reason": reason},
        )


class WriteError(StackdriverError):
    """The logging API rejected a write."""

    def __init__(self, *, log_name: str, reason: str) -> None:
        super().__init__(
            f"Failed to write log entry to '{log_name}': {reason}",
            code="WRITE_FAILED",
            details={"log_name": log_name, "reason": reason},
        )
