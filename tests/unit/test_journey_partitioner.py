"""
Unit tests for journey partitioning and the completed-activities rows.
"""

import pytest

from src.journey import build_journey
from src.journey.classifier import evaluate_all
from src.journey.models import Classification, ClassifiedCourse
from src.journey.normalizer import normalize_record, normalize_records
from src.journey.partitioner import completed_items, completed_subtitle, partition
from src.navigation.routes import NavAction


def _ids(bucket):
    return [item.id for item in bucket]


class TestPartition:
    def test_buckets(self, enrolled_records, now):
        view = build_journey(enrolled_records, now)

        assert _ids(view.completed) == ["done-1", "assess-1"]
        assert _ids(view.active) == ["enrol-1"]
        assert _ids(view.locked) == ["locked-1", "fail-1"]
        assert _ids(view.coming_soon) == ["soon-1"]
        assert view.total_count == 6
        assert view.completed_count == 2

    def test_aborted_lands_in_locked_bucket(self, now):
        view = build_journey([{"id": "x", "result": "failed"}], now)
        assert view.locked.count == 1
        assert view.locked.courses[0].classification is Classification.ABORTED

    def test_buckets_are_ordered(self, now):
        records = [
            {"id": "c", "courseOrder": 9, "lockedOrUnlocked": "unlocked"},
            {"id": "a", "courseOrder": 1, "lockedOrUnlocked": "unlocked"},
            {"id": "b1", "courseOrder": 5, "lockedOrUnlocked": "unlocked"},
            {"id": "b2", "courseOrder": 5, "lockedOrUnlocked": "unlocked"},
        ]
        # Feed in reverse to show the partitioner sorts rather than trusting input order
        classified = list(reversed(evaluate_all(normalize_records(records), now)))
        view = partition(classified)
        assert _ids(view.active) == ["a", "b1", "b2", "c"]

    def test_completed_deduplicated_by_id(self, now):
        course = normalize_record({"id": "dup", "status": "completed"}, index=0)
        twin = normalize_record({"id": "dup", "isCompleted": True}, index=1)
        view = partition(
            [
                ClassifiedCourse(course, Classification.COMPLETED),
                ClassifiedCourse(twin, Classification.COMPLETED),
            ]
        )
        assert _ids(view.completed) == ["dup"]

    def test_empty(self, now):
        view = build_journey([], now)
        assert view.is_empty
        assert [b.count for b in view.buckets()] == [0, 0, 0, 0]

    def test_none_records(self, now):
        assert build_journey(None, now).is_empty


class TestCompletedItems:
    def test_rows_and_actions(self, enrolled_records, now):
        rows = completed_items(build_journey(enrolled_records, now))

        course_row, assessment_row = rows
        assert course_row.subtitle == "COURSE COMPLETED"
        assert course_row.button_label == "Rewatch Course"
        assert course_row.action is NavAction.REWATCH

        assert assessment_row.subtitle == "DEADLINE EXCEEDED"
        assert assessment_row.button_label == "View Report"
        assert assessment_row.action is NavAction.VIEW_REPORT

    @pytest.mark.parametrize(
        "record,expected",
        [
            ({"contentType": "ASSESSMENT", "status": "passed"}, "ASSESSMENT CLEARED"),
            ({"contentType": "ASSIGNMENT", "isCompleted": True}, "ASSIGNMENT COMPLETED"),
            ({"contentType": "COURSE", "status": "completed"}, "COURSE COMPLETED"),
        ],
    )
    def test_subtitles(self, record, expected):
        item = ClassifiedCourse(normalize_record(record), Classification.COMPLETED)
        assert completed_subtitle(item) == expected
