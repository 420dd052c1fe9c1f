"""
Error types for the learning journey engine.

Only gateway failures are raised as exceptions. Soft orchestrator failures are
recorded as SoftStepError values on the snapshot; normalization, classification
and navigation absorb their failures and log them instead.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


class JourneyError(Exception):
    """Base class for all engine errors."""


class GatewayError(JourneyError):
    """A backend call failed (transport, HTTP status, payload or missing identity)."""

    def __init__(self, operation: str, message: str, status_code: int | None = None):
        self.operation = operation
        self.status_code = status_code
        detail = f"{operation}: {message}"
        if status_code is not None:
            detail = f"{detail} (HTTP {status_code})"
        super().__init__(detail)


class FatalInitError(JourneyError):
    """The basic profile step failed; the home initialization cannot proceed."""

    user_message = "Failed to load home data"

    def __init__(self, cause: BaseException):
        self.cause = cause
        super().__init__(str(cause) or self.user_message)


@dataclass(frozen=True)
class SoftStepError:
    """Record of a best-effort step that failed without aborting the run."""

    step: str
    message: str
    occurred_at: datetime = field(default_factory=datetime.now)
