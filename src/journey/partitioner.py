"""
Journey Partitioner.

Groups classified courses into the display buckets of the learning journey:
completed, active, locked (locked + aborted) and coming soon. Every bucket is
ordered ascending by course order, ties by original record index.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from src.navigation.routes import NavAction

from .models import Classification, ClassifiedCourse, JourneyBucket, JourneyView


def _ordered(items: Iterable[ClassifiedCourse]) -> tuple[ClassifiedCourse, ...]:
    return tuple(sorted(items, key=lambda item: item.course.sort_key))


def _dedup_by_id(items: Iterable[ClassifiedCourse]) -> list[ClassifiedCourse]:
    seen: set[str] = set()
    unique: list[ClassifiedCourse] = []
    for item in items:
        if item.id in seen:
            continue
        seen.add(item.id)
        unique.append(item)
    return unique


def partition(classified: Iterable[ClassifiedCourse]) -> JourneyView:
    """Split classified courses into ordered buckets."""
    items = list(classified)

    completed = _dedup_by_id(c for c in items if c.classification is Classification.COMPLETED)
    completed_ids = {c.id for c in completed}
    for item in items:
        if item.deadline_exceeded and item.course.is_assessment_like and item.id not in completed_ids:
            completed.append(item)
            completed_ids.add(item.id)

    active = [c for c in items if c.classification is Classification.ACTIVE]
    locked = [c for c in items if c.classification in (Classification.LOCKED, Classification.ABORTED)]
    coming_soon = [c for c in items if c.classification is Classification.COMING_SOON]

    return JourneyView(
        completed=JourneyBucket(Classification.COMPLETED, _ordered(completed)),
        active=JourneyBucket(Classification.ACTIVE, _ordered(active)),
        locked=JourneyBucket(Classification.LOCKED, _ordered(locked)),
        coming_soon=JourneyBucket(Classification.COMING_SOON, _ordered(coming_soon)),
        total_count=len(items),
    )


# =============================================================================
# Completed activities
# =============================================================================


@dataclass(frozen=True)
class CompletedItem:
    """One row of the completed-activities card."""

    item: ClassifiedCourse
    subtitle: str
    title: str
    button_label: str
    action: NavAction


def completed_subtitle(item: ClassifiedCourse) -> str:
    course = item.course
    if course.is_assessment_like:
        return "DEADLINE EXCEEDED" if item.deadline_exceeded else "ASSESSMENT CLEARED"
    if course.is_assignment:
        return "ASSIGNMENT COMPLETED"
    return "COURSE COMPLETED"


def completed_items(view: JourneyView) -> list[CompletedItem]:
    """Rows for the completed bucket, with the action each row's button triggers."""
    rows = []
    for item in view.completed:
        is_assessment = item.course.is_assessment_like
        rows.append(
            CompletedItem(
                item=item,
                subtitle=completed_subtitle(item),
                title=item.course.title,
                button_label="View Report" if is_assessment else "Rewatch Course",
                action=NavAction.VIEW_REPORT if is_assessment else NavAction.REWATCH,
            )
        )
    return rows
