"""
Learning Journey Data Models.

Canonical representation of one enrollment item (Course), the derived
classification enums, and the bucketed journey view handed to presentation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping


# =============================================================================
# Enums
# =============================================================================


class ContentType(str, Enum):
    """Known content types. Course.content_type keeps unknown values verbatim."""

    COURSE = "COURSE"
    ASSESSMENT = "ASSESSMENT"
    TEST = "TEST"
    ASSIGNMENT = "ASSIGNMENT"
    SURVEY = "SURVEY"
    ROLE_RECOMMENDATION = "ROLE_RECOMMENDATION"


class LockState(str, Enum):
    """Backend gating flag, independent of completion."""

    LOCKED = "locked"
    UNLOCKED = "unlocked"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: str) -> LockState:
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN


class ResultState(str, Enum):
    """Outcome of an assessed item."""

    PASS = "pass"
    FAIL = "fail"
    NONE = "none"

    @classmethod
    def parse(cls, value: str) -> ResultState:
        if value in ("pass", "passed"):
            return cls.PASS
        if value in ("fail", "failed"):
            return cls.FAIL
        return cls.NONE


class Classification(str, Enum):
    """Presentation state of a course at one evaluation instant."""

    COMPLETED = "completed"
    ACTIVE = "active"
    LOCKED = "locked"
    COMING_SOON = "comingSoon"
    ABORTED = "aborted"


# =============================================================================
# Canonical Course
# =============================================================================


@dataclass(frozen=True)
class Course:
    """
    Normalized enrollment item.

    Two identifier namespaces are kept apart:
    - course_id: course-level calls (module / lesson lists)
    - moodle_course_id / lesson_id: lesson-level calls (contents, attempts, quiz reports)
    """

    id: str
    index: int  # Position in the backend response, used as sort tie-break
    order: float
    content_type: str = ContentType.COURSE.value
    title: str = "Untitled"

    # Identifiers
    course_id: str | None = None
    moodle_course_id: str | None = None
    lesson_id: str | None = None

    # Display
    description: str = ""
    duration: str = "3 hours"
    sub_title: str = ""
    moodle_url: str | None = None
    button_text: str | None = None
    reason: str | None = None
    icon_url: str | None = None

    # Progress
    progress_percentage: float = 0.0
    completed_modules: int = 0
    total_modules: int = 0

    # State inputs (lower-cased backend strings)
    locked_or_unlocked: LockState = LockState.UNKNOWN
    result_state: ResultState = ResultState.NONE
    progress_state: str = ""
    status: str = ""
    is_completed_flag: bool = False

    # Assessment timing
    deadline: str | None = None
    retake_days: int | None = None
    retake_exact: str | None = None
    attempt_id: str | None = None

    # Originating record, diagnostics only
    raw: Mapping[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @property
    def is_assessment_like(self) -> bool:
        return ContentType.ASSESSMENT.value in self.content_type or ContentType.TEST.value in self.content_type

    @property
    def is_assignment(self) -> bool:
        return ContentType.ASSIGNMENT.value in self.content_type

    @property
    def is_survey(self) -> bool:
        return ContentType.SURVEY.value in self.content_type

    @property
    def sort_key(self) -> tuple[float, int]:
        return (self.order, self.index)


# =============================================================================
# Evaluation Results
# =============================================================================


@dataclass(frozen=True)
class ClassifiedCourse:
    """A course with the classification computed for one evaluation instant."""

    course: Course
    classification: Classification
    deadline_exceeded: bool = False

    @property
    def id(self) -> str:
        return self.course.id


@dataclass(frozen=True)
class JourneyBucket:
    """Ordered group of courses shown together."""

    name: Classification
    courses: tuple[ClassifiedCourse, ...] = ()

    @property
    def count(self) -> int:
        return len(self.courses)

    def __iter__(self):
        return iter(self.courses)


@dataclass(frozen=True)
class JourneyView:
    """Bucketed learning journey plus aggregate counts."""

    completed: JourneyBucket
    active: JourneyBucket
    locked: JourneyBucket  # Includes aborted items
    coming_soon: JourneyBucket
    total_count: int = 0

    @property
    def completed_count(self) -> int:
        return self.completed.count

    @property
    def is_empty(self) -> bool:
        return self.total_count == 0

    def buckets(self) -> tuple[JourneyBucket, ...]:
        return (self.completed, self.active, self.locked, self.coming_soon)
