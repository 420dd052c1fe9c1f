"""
State Classifier.

Pure mapping from (Course, evaluation time) to one Classification.

Precedence (first match wins):
    1. completion signal                         -> COMPLETED
    2. fail result / aborted or failed status     -> ABORTED
    3. unlocked and active / not-started progress -> ACTIVE
    4. unlocked (not explicitly locked)           -> ACTIVE
    5. locked, or locked / coming-soon status     -> LOCKED
    6. active status                              -> ACTIVE
    7. otherwise                                  -> COMING_SOON

Deadline override: an assessment or test that is not COMPLETED or ABORTED and
whose deadline lies strictly before `now` is presented as COMPLETED with
deadline_exceeded set. result_state is left untouched.
"""

from __future__ import annotations

from datetime import UTC, datetime, tzinfo

from .deadlines import is_past
from .models import Classification, ClassifiedCourse, Course, LockState, ResultState

COMPLETED_STATES = frozenset({"completed"})
COMPLETED_STATUSES = frozenset({"completed", "passed"})
ABORTED_STATES = frozenset({"aborted", "failed", "fail"})
ACTIVE_PROGRESS_STATES = frozenset({"notstarted", "not_started", "inprogress", "in_progress", "started"})
ACTIVE_STATUSES = frozenset({"active", "in_progress", "available", "started"})
LOCKED_STATUSES = frozenset({"locked", "coming_soon", "comingsoon"})


def is_completed(course: Course) -> bool:
    return (
        course.is_completed_flag
        or course.progress_state in COMPLETED_STATES
        or course.status in COMPLETED_STATUSES
        or course.result_state is ResultState.PASS
    )


def is_aborted(course: Course) -> bool:
    return (
        course.result_state is ResultState.FAIL
        or course.status in ABORTED_STATES
        or course.progress_state in ABORTED_STATES
    )


def base_classification(course: Course) -> Classification:
    """Classification from status fields alone, before the deadline override."""
    unlocked = course.locked_or_unlocked is LockState.UNLOCKED
    locked = course.locked_or_unlocked is LockState.LOCKED
    status_active = course.status in ACTIVE_STATUSES

    if is_completed(course):
        return Classification.COMPLETED
    if is_aborted(course):
        return Classification.ABORTED
    if unlocked and (course.progress_state in ACTIVE_PROGRESS_STATES or status_active):
        return Classification.ACTIVE
    if unlocked and not locked:
        return Classification.ACTIVE
    if locked or course.status in LOCKED_STATUSES:
        return Classification.LOCKED
    if status_active:
        return Classification.ACTIVE
    return Classification.COMING_SOON


def deadline_exceeded(course: Course, base: Classification, now: datetime, tz: tzinfo = UTC) -> bool:
    """Whether the deadline override applies to a course with the given base classification."""
    if not course.is_assessment_like:
        return False
    if base in (Classification.COMPLETED, Classification.ABORTED):
        return False
    return is_past(course.deadline, now, tz)


def evaluate(course: Course, now: datetime, tz: tzinfo = UTC) -> ClassifiedCourse:
    """Classify a course and report whether the deadline override fired."""
    base = base_classification(course)
    if deadline_exceeded(course, base, now, tz):
        return ClassifiedCourse(course=course, classification=Classification.COMPLETED, deadline_exceeded=True)
    return ClassifiedCourse(course=course, classification=base)


def classify(course: Course, now: datetime, tz: tzinfo = UTC) -> Classification:
    return evaluate(course, now, tz).classification


def evaluate_all(courses: list[Course], now: datetime, tz: tzinfo = UTC) -> list[ClassifiedCourse]:
    return [evaluate(course, now, tz) for course in courses]
