"""
Backend API configuration.

Endpoint paths of the student platform, grouped in one model so the gateway
never hardcodes a URL. Built from the root Settings via ApiConfig.from_settings().
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel

if TYPE_CHECKING:
    from config import Settings


class ApiConfig(BaseModel):
    """Configuration for the platform gateway."""

    base_url: str = "https://apis.dev.cream-collar.com"
    timeout_seconds: float = 30.0

    # Home initialization
    profile_endpoint: str = "/api/student/user-profile/data"
    enrollment_endpoint: str = "/api/student/v1/home/check-enrol"
    profile_details_endpoint: str = "/api/student/user-profile/details"
    notifications_endpoint: str = "/api/student/notification"
    profile_percentage_endpoint: str = "/api/student/user-profile/get-profile-percentage"
    enrolled_courses_endpoint: str = "/api/lms/enrol/get-enroll-course"

    # Lesson-level (keyed by moodleCourseId / lessonId)
    lesson_contents_endpoint: str = "/api/lms/lesson/contents"
    assignment_attempt_endpoint: str = "/api/lms/v1/attempt/assignment"
    quiz_attempt_endpoint: str = "/api/lms/attempt/quiz"

    health_endpoint: str = "/health"

    @classmethod
    def from_settings(cls, settings: Settings) -> ApiConfig:
        """Build the API config from application settings."""
        return cls(
            base_url=settings.api_base_url,
            timeout_seconds=settings.api_timeout_seconds,
        )
