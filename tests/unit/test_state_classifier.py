"""
Unit tests for the state classifier.
"""

from datetime import UTC, datetime, timedelta

import pytest

from src.journey.classifier import base_classification, classify, evaluate, evaluate_all
from src.journey.models import Classification, ResultState
from src.journey.normalizer import normalize_record


def _course(record):
    return normalize_record(record, index=0)


class TestScenarios:
    def test_unlocked_in_progress_is_active(self, now):
        course = _course({"lockedOrUnlocked": "unlocked", "progressState": "inProgress"})
        assert classify(course, now) is Classification.ACTIVE

    def test_fail_beats_locked(self, now):
        course = _course({"result": "fail", "lockedOrUnlocked": "locked"})
        assert classify(course, now) is Classification.ABORTED

    def test_past_assessment_deadline_is_completed(self, now, assessment_record):
        result = evaluate(_course(assessment_record), now)

        assert result.classification is Classification.COMPLETED
        assert result.deadline_exceeded is True
        assert result.course.result_state is ResultState.NONE


class TestPrecedence:
    @pytest.mark.parametrize(
        "record,expected",
        [
            ({"isCompleted": True, "result": "fail"}, Classification.COMPLETED),
            ({"status": "passed", "lockedOrUnlocked": "locked"}, Classification.COMPLETED),
            ({"CourseProgress": {"result": "pass"}}, Classification.COMPLETED),
            ({"courseProgress": {"courseProgress": "completed"}}, Classification.COMPLETED),
            ({"status": "aborted", "lockedOrUnlocked": "unlocked"}, Classification.ABORTED),
            ({"progressState": "failed"}, Classification.ABORTED),
            ({"lockedOrUnlocked": "unlocked", "status": "available"}, Classification.ACTIVE),
            ({"lockedOrUnlocked": "unlocked"}, Classification.ACTIVE),
            ({"lockedOrUnlocked": "locked", "status": "active"}, Classification.LOCKED),
            ({"status": "coming_soon"}, Classification.LOCKED),
            ({"status": "active"}, Classification.ACTIVE),
            ({"lockedOrUnlocked": "something-else"}, Classification.COMING_SOON),
            ({}, Classification.COMING_SOON),
        ],
    )
    def test_first_match_wins(self, record, expected, now):
        assert classify(_course(record), now) is expected

    def test_base_classification_ignores_deadline(self, assessment_record):
        assert base_classification(_course(assessment_record)) is Classification.COMING_SOON


class TestDeadlineOverride:
    def test_only_assessment_like_content(self, now):
        course = _course({"contentType": "COURSE", "deadline": "2020-01-01T00:00:00Z"})
        result = evaluate(course, now)
        assert result.classification is Classification.COMING_SOON
        assert result.deadline_exceeded is False

    def test_test_content_type_counts(self, now):
        course = _course({"contentType": "PRE_TEST", "deadline": "2020-01-01T00:00:00Z"})
        assert evaluate(course, now).deadline_exceeded is True

    def test_aborted_is_not_overridden(self, now):
        course = _course({"contentType": "ASSESSMENT", "result": "fail", "deadline": "2020-01-01T00:00:00Z"})
        result = evaluate(course, now)
        assert result.classification is Classification.ABORTED
        assert result.deadline_exceeded is False

    def test_already_completed_is_not_flagged(self, now):
        course = _course({"contentType": "ASSESSMENT", "status": "passed", "deadline": "2020-01-01T00:00:00Z"})
        result = evaluate(course, now)
        assert result.classification is Classification.COMPLETED
        assert result.deadline_exceeded is False

    def test_future_deadline_keeps_base_state(self, now):
        course = _course(
            {"contentType": "ASSESSMENT", "lockedOrUnlocked": "unlocked", "deadline": "2099-01-01T00:00:00Z"}
        )
        result = evaluate(course, now)
        assert result.classification is Classification.ACTIVE
        assert result.deadline_exceeded is False

    def test_unparsable_deadline_is_ignored(self, now):
        course = _course({"contentType": "ASSESSMENT", "lockedOrUnlocked": "unlocked", "deadline": "someday"})
        assert classify(course, now) is Classification.ACTIVE

    def test_human_readable_deadline(self, now):
        course = _course({"contentType": "ASSESSMENT", "deadline": "7th January 2025, 5:18pm"})
        assert evaluate(course, now).deadline_exceeded is True

    def test_monotonic_in_now(self):
        course = _course(
            {"contentType": "ASSESSMENT", "lockedOrUnlocked": "unlocked", "deadline": "2025-03-01T00:00:00Z"}
        )
        start = datetime(2025, 2, 27, tzinfo=UTC)
        flags = [evaluate(course, start + timedelta(hours=h)).deadline_exceeded for h in range(0, 96, 6)]

        # Once exceeded, stays exceeded
        first = flags.index(True)
        assert all(flags[first:])
        assert not any(flags[:first])

    @pytest.mark.parametrize(
        "when,expected",
        [
            (datetime(2025, 2, 28, tzinfo=UTC), (False, False)),
            (datetime(2025, 3, 1, 12, tzinfo=UTC), (True, False)),
            (datetime(2025, 3, 2, tzinfo=UTC), (True, False)),  # equal to the deadline is not yet past
            (datetime(2025, 3, 2, 0, 0, 1, tzinfo=UTC), (True, True)),
        ],
    )
    def test_earlier_deadline_flips_first(self, when, expected):
        def assessment(course_id, deadline):
            return _course(
                {
                    "contentType": "ASSESSMENT",
                    "lockedOrUnlocked": "unlocked",
                    "moodleCourseId": course_id,
                    "deadline": deadline,
                }
            )

        first, second = evaluate_all(
            [assessment("Q-1", "2025-03-01T00:00:00Z"), assessment("Q-2", "2025-03-02T00:00:00Z")], when
        )

        assert (first.deadline_exceeded, second.deadline_exceeded) == expected
        # The later deadline never flips before the earlier one
        assert first.deadline_exceeded or not second.deadline_exceeded
        for result in (first, second):
            expected_state = Classification.COMPLETED if result.deadline_exceeded else Classification.ACTIVE
            assert result.classification is expected_state


class TestDeterminism:
    def test_same_inputs_same_result(self, now, enrolled_records):
        courses = [normalize_record(r, i) for i, r in enumerate(enrolled_records)]
        assert evaluate_all(courses, now) == evaluate_all(courses, now)

    def test_exactly_one_classification_each(self, now, enrolled_records):
        courses = [normalize_record(r, i) for i, r in enumerate(enrolled_records)]
        results = evaluate_all(courses, now)
        assert len(results) == len(courses)
        assert all(isinstance(r.classification, Classification) for r in results)
