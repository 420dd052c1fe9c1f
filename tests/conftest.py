"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import pytest
import sys
from datetime import UTC, datetime
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "slow: Slow tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def now():
    """Fixed evaluation instant."""
    return datetime(2025, 6, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def nested_course_record():
    """Course record with metadata and progress nested the way the LMS sends them."""
    return {
        "id": "enrol-1",
        "Courses": {
            "courseId": "C-100",
            "moodleCourseId": "M-200",
            "title": "Vehicle Dynamics",
            "contentType": "course",
            "courseOrder": 2,
            "moodleUrl": "https://lms.example.com/course/view.php?id=200",
        },
        "CourseProgress": {
            "lockedOrUnlocked": "Unlocked",
            "courseProgress": "inProgress",
            "percent": 40,
        },
    }


@pytest.fixture
def assessment_record():
    """Assessment record with an ISO deadline in the past."""
    return {
        "id": "assess-1",
        "contentType": "ASSESSMENT",
        "title": "STEM Assessment",
        "moodleCourseId": "Q-77",
        "courseOrder": 5,
        "deadline": "2020-01-01T00:00:00Z",
    }


@pytest.fixture
def enrolled_records(nested_course_record, assessment_record):
    """A mixed enrollment list covering each bucket."""
    return [
        nested_course_record,
        assessment_record,
        {"id": "done-1", "title": "Intro", "courseOrder": 1, "status": "completed", "courseId": "C-1"},
        {"id": "locked-1", "title": "Advanced", "courseOrder": 3, "lockedOrUnlocked": "locked"},
        {"id": "soon-1", "title": "Capstone", "courseOrder": 4},
        {"id": "fail-1", "title": "Retake", "courseOrder": 6, "result": "fail"},
    ]
