"""
Course Normalizer.

Maps heterogeneous enrollment records into canonical Course objects.

Records arrive with fields at the top level, inside a course-metadata object
(`Courses` / `course`), or inside a progress object (`CourseProgress` /
`courseProgress`). Each canonical field is resolved through an ordered chain
of candidate paths in FIELD_CHAINS; the first non-empty value that coerces
cleanly wins, otherwise the field default applies.

Normalization never raises.
"""

from __future__ import annotations

import math
from typing import Any, Callable, Iterable, Mapping

from loguru import logger

from .models import ContentType, Course, LockState, ResultState

FieldPath = tuple[str, ...]
Coercer = Callable[[Any], Any]


# =============================================================================
# Coercers (return None when the value cannot be used)
# =============================================================================


def _text(value: Any) -> str | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, (int, float)) and math.isfinite(value):
        return str(value)
    return None


def _upper(value: Any) -> str | None:
    text = _text(value)
    return text.upper() if text else None


def _lower(value: Any) -> str | None:
    text = _text(value)
    return text.lower() if text else None


def _number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value if math.isfinite(value) else None
    if isinstance(value, str):
        try:
            parsed = float(value.strip())
        except ValueError:
            return None
        return parsed if math.isfinite(parsed) else None
    return None


def _integer(value: Any) -> int | None:
    number = _number(value)
    return int(number) if number is not None else None


def _percentage(value: Any) -> float | None:
    number = _number(value)
    if number is None:
        return None
    return float(min(max(number, 0), 100))


def parse_flag(value: Any) -> bool | None:
    """Boolean from a backend flag; "true", "1" and "yes" count as set."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    return None


# =============================================================================
# Field chains
# =============================================================================

# Nested containers seen in backend responses
_META = ("Courses", "course")
_PROGRESS = ("CourseProgress", "courseProgress")


def _nested(containers: tuple[str, ...], key: str) -> tuple[FieldPath, ...]:
    return tuple((container, key) for container in containers)


FIELD_CHAINS: dict[str, tuple[FieldPath, ...]] = {
    "id": (("id",), ("courseId",), *_nested(_META, "courseId")),
    "course_id": (*_nested(_META, "courseId"), ("courseId",), *_nested(_META, "id")),
    "moodle_course_id": (
        *_nested(_META, "moodleCourseId"),
        ("moodleCourseId",),
        *_nested(_META, "lessonId"),
        ("lessonId",),
    ),
    "order": (*_nested(_META, "courseOrder"), ("courseOrder",), ("order",)),
    "content_type": (*_nested(_META, "contentType"), ("contentType",)),
    "title": (*_nested(_META, "title"), ("title",), ("courseName",), ("name",)),
    "description": (*_nested(_META, "description"), ("description",), ("courseDescription",)),
    "duration": (*_nested(_META, "duration"), ("duration",), ("estimatedDuration",)),
    "sub_title": (*_nested(_META, "subTitle"), ("subTitle",)),
    "moodle_url": (*_nested(_META, "moodleUrl"), ("moodleUrl",), ("url",)),
    "button_text": (*_nested(_META, "buttonText"), ("buttonText",)),
    "reason": (*_nested(_PROGRESS, "reason"), ("reason",)),
    "icon_url": (("iconUrl",), ("thumbnailUrl",), *_nested(_META, "iconUrl")),
    "progress_percentage": (
        ("progressPercentage",),
        ("progress", "percent"),
        *_nested(_PROGRESS, "percent"),
        ("percent",),
        ("percentage",),
    ),
    "completed_modules": (("completedModules",), ("modulesCompleted",), *_nested(_PROGRESS, "completedModules")),
    "total_modules": (
        ("totalModules",),
        ("totalModulesCount",),
        ("modulesTotal",),
        *_nested(_PROGRESS, "totalModules"),
    ),
    "locked_or_unlocked": (*_nested(_PROGRESS, "lockedOrUnlocked"), ("lockedOrUnlocked",)),
    "progress_state": (
        *_nested(_PROGRESS, "courseProgress"),
        ("courseProgressStatus",),
        ("courseProgress",),
        ("progressState",),
    ),
    "result_state": (*_nested(_PROGRESS, "result"), ("result",), ("resultState",)),
    "status": (("status",), ("courseStatus",)),
    "is_completed_flag": (("isCompleted",), *_nested(_PROGRESS, "isCompleted")),
    "deadline": (*_nested(_PROGRESS, "deadline"), *_nested(_META, "deadline"), ("deadline",)),
    "retake_days": (*_nested(_PROGRESS, "retakeDays"), ("retakeDays",)),
    "retake_exact": (*_nested(_PROGRESS, "retakeExact"), ("retakeExact",)),
    "attempt_id": (*_nested(_PROGRESS, "attemptId"), ("attemptId",)),
}

FIELD_COERCERS: dict[str, Coercer] = {
    "id": _text,
    "course_id": _text,
    "moodle_course_id": _text,
    "order": _number,
    "content_type": _upper,
    "title": _text,
    "description": _text,
    "duration": _text,
    "sub_title": _text,
    "moodle_url": _text,
    "button_text": _text,
    "reason": _text,
    "icon_url": _text,
    "progress_percentage": _percentage,
    "completed_modules": _integer,
    "total_modules": _integer,
    "locked_or_unlocked": _lower,
    "progress_state": _lower,
    "result_state": _lower,
    "status": _lower,
    "is_completed_flag": parse_flag,
    "deadline": _text,
    "retake_days": _integer,
    "retake_exact": _text,
    "attempt_id": _text,
}

# Literal defaults; fields missing here default to None
FIELD_DEFAULTS: dict[str, Any] = {
    "content_type": ContentType.COURSE.value,
    "title": "Untitled",
    "description": "",
    "duration": "3 hours",
    "progress_percentage": 0.0,
    "completed_modules": 0,
    "total_modules": 0,
    "locked_or_unlocked": "",
    "progress_state": "",
    "result_state": "",
    "status": "",
    "is_completed_flag": False,
}


def _lookup(record: Mapping[str, Any], path: FieldPath) -> Any:
    current: Any = record
    for key in path:
        if not isinstance(current, Mapping):
            return None
        current = current.get(key)
    return current


def _is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def resolve_field(record: Mapping[str, Any], field_name: str) -> tuple[Any, bool]:
    """
    Resolve one canonical field through its chain.

    Returns:
        (value, resolved) where resolved is False when the default was used.
    """
    coerce = FIELD_COERCERS[field_name]
    for path in FIELD_CHAINS[field_name]:
        value = _lookup(record, path)
        if _is_empty(value):
            continue
        coerced = coerce(value)
        if coerced is None:
            logger.debug(f"Ignoring malformed {'.'.join(path)}={value!r} for {field_name}")
            continue
        return coerced, True
    return FIELD_DEFAULTS.get(field_name), False


class CourseNormalizer:
    """
    Build canonical Courses from raw enrollment records.

    Stateless; one instance can be shared.
    """

    def normalize(self, record: Any, index: int = 0) -> Course:
        """Normalize a single record. Never raises."""
        if not isinstance(record, Mapping):
            logger.debug(f"Record {index} is {type(record).__name__}, using defaults")
            record = {}

        values: dict[str, Any] = {}
        defaulted: list[str] = []
        for field_name in FIELD_CHAINS:
            value, resolved = resolve_field(record, field_name)
            values[field_name] = value
            if not resolved:
                defaulted.append(field_name)

        if defaulted:
            logger.debug(f"Record {index} defaulted fields: {', '.join(defaulted)}")

        content_type = values["content_type"]
        moodle_course_id = values["moodle_course_id"]
        if content_type == ContentType.ASSIGNMENT.value and moodle_course_id is None:
            logger.debug(f"Assignment record {index} has no moodleCourseId (keys: {list(record)})")

        order = values["order"]
        return Course(
            id=values["id"] if values["id"] is not None else str(index),
            index=index,
            order=order if order is not None else index,
            content_type=content_type,
            title=values["title"],
            course_id=values["course_id"],
            moodle_course_id=moodle_course_id,
            lesson_id=moodle_course_id,
            description=values["description"],
            duration=values["duration"],
            sub_title=values["sub_title"] or content_type,
            moodle_url=values["moodle_url"],
            button_text=values["button_text"],
            reason=values["reason"],
            icon_url=values["icon_url"],
            progress_percentage=values["progress_percentage"],
            completed_modules=values["completed_modules"],
            total_modules=values["total_modules"],
            locked_or_unlocked=LockState.parse(values["locked_or_unlocked"]),
            result_state=ResultState.parse(values["result_state"]),
            progress_state=values["progress_state"],
            status=values["status"],
            is_completed_flag=values["is_completed_flag"],
            deadline=values["deadline"],
            retake_days=values["retake_days"],
            retake_exact=values["retake_exact"],
            attempt_id=values["attempt_id"],
            raw=record,
        )

    def normalize_all(self, records: Iterable[Any] | None) -> list[Course]:
        """Normalize records and sort ascending by order, ties by original index."""
        if records is None:
            return []
        courses = [self.normalize(record, index) for index, record in enumerate(records)]
        courses.sort(key=lambda c: c.sort_key)
        return courses


_default_normalizer = CourseNormalizer()


def normalize_record(record: Any, index: int = 0) -> Course:
    return _default_normalizer.normalize(record, index)


def normalize_records(records: Iterable[Any] | None) -> list[Course]:
    return _default_normalizer.normalize_all(records)
