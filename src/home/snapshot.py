"""
Initialization snapshot: the committed state of one home initialization run.
"""

from __future__ import annotations

import copy as _copy
from dataclasses import dataclass, field, replace
from typing import Any

from src.core.exceptions import SoftStepError

NOTIFICATION_GROUPS = ("today", "yesterday", "older")


def count_unread(notifications: Any) -> int:
    """Number of items with a falsy isRead across the today / yesterday / older groups."""
    if not isinstance(notifications, dict):
        return 0
    total = 0
    for group in NOTIFICATION_GROUPS:
        items = notifications.get(group)
        if not isinstance(items, list):
            continue
        total += sum(1 for item in items if isinstance(item, dict) and not item.get("isRead"))
    return total


@dataclass
class InitializationSnapshot:
    """
    Home data after (or during) an initialization run.

    Only the orchestrator writes to it. Readers get copies.
    """

    # Step 1 (merged with step 3)
    profile: dict[str, Any] | None = None

    # Step 2
    is_enrolled: bool | None = None

    # Step 3
    profile_details: dict[str, Any] | None = None

    # Step 4
    notifications: dict[str, Any] | None = None
    badge_count: int = 0

    # Step 5
    completion_percentage: dict[str, Any] | None = None

    # Step 6 (raw records; normalized lazily)
    enrolled_courses: list[dict[str, Any]] = field(default_factory=list)

    # Run bookkeeping
    loading: bool = False
    error: str | None = None
    generation: int = 0
    step_errors: list[SoftStepError] = field(default_factory=list)

    @property
    def failed_steps(self) -> list[str]:
        return [e.step for e in self.step_errors]

    def copy(self) -> InitializationSnapshot:
        """Deep copy, so readers cannot mutate committed state."""
        return replace(
            self,
            profile=_copy.deepcopy(self.profile),
            profile_details=_copy.deepcopy(self.profile_details),
            notifications=_copy.deepcopy(self.notifications),
            completion_percentage=_copy.deepcopy(self.completion_percentage),
            enrolled_courses=_copy.deepcopy(self.enrolled_courses),
            step_errors=list(self.step_errors),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "profile": self.profile,
            "is_enrolled": self.is_enrolled,
            "profile_details": self.profile_details,
            "notifications": self.notifications,
            "badge_count": self.badge_count,
            "completion_percentage": self.completion_percentage,
            "enrolled_courses": self.enrolled_courses,
            "loading": self.loading,
            "error": self.error,
            "generation": self.generation,
            "step_errors": [{"step": e.step, "message": e.message} for e in self.step_errors],
        }
