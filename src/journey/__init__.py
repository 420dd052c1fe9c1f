"""
Journey - normalization, classification and partitioning of enrollment records.

Pipeline:
    raw records -> normalizer -> Course -> classifier -> ClassifiedCourse
                -> partitioner -> JourneyView (completed / active / locked / coming soon)

Nothing in this package performs I/O and nothing raises on malformed input.
"""

from __future__ import annotations

from datetime import UTC, datetime, tzinfo
from typing import Any, Iterable

from src.journey.classifier import classify, evaluate, evaluate_all
from src.journey.deadlines import parse_deadline, resolve_timezone
from src.journey.models import (
    Classification,
    ClassifiedCourse,
    ContentType,
    Course,
    JourneyBucket,
    JourneyView,
    LockState,
    ResultState,
)
from src.journey.normalizer import CourseNormalizer, normalize_record, normalize_records
from src.journey.partitioner import CompletedItem, completed_items, partition


def build_journey(
    records: Iterable[Any] | None,
    now: datetime | None = None,
    tz: tzinfo = UTC,
) -> JourneyView:
    """Normalize, classify and partition raw records in one pass."""
    courses = normalize_records(records)
    return partition(evaluate_all(courses, now or datetime.now(tz), tz))


__all__ = [
    # Models
    "Classification",
    "ClassifiedCourse",
    "ContentType",
    "Course",
    "JourneyBucket",
    "JourneyView",
    "LockState",
    "ResultState",
    # Pipeline
    "CourseNormalizer",
    "normalize_record",
    "normalize_records",
    "classify",
    "evaluate",
    "evaluate_all",
    "partition",
    "completed_items",
    "CompletedItem",
    "build_journey",
    # Deadlines
    "parse_deadline",
    "resolve_timezone",
]
