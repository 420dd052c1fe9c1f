"""
Lesson Loader.

Performs the lesson-level backend calls a resolved route needs once the user
has picked an activity. These are user-initiated, so gateway errors propagate.
"""

from __future__ import annotations

from typing import Any

from loguru import logger

from src.core.platform_client import RemoteDataGateway

from .routes import Destination, Route

LESSON_DESTINATIONS = frozenset(
    {
        Destination.ASSIGNMENT_INSTRUCTIONS,
        Destination.SURVEY_QUESTIONS,
        Destination.ENGINEERING_ASSESSMENT_INSTRUCTIONS,
        Destination.STEM_ASSESSMENT_INSTRUCTIONS,
        Destination.STEM_ASSESSMENT_TEST,
        Destination.STEM_ASSESSMENT_REPORT,
    }
)


class LessonLoader:
    """Fetch lesson data for a Route through a RemoteDataGateway."""

    def __init__(self, gateway: RemoteDataGateway):
        self.gateway = gateway

    @staticmethod
    def lesson_id(route: Route) -> str | None:
        return route.params.get("lessonId") or route.params.get("moodleCourseId")

    async def load(self, route: Route, page: str = "quiz-report") -> dict[str, Any] | None:
        """
        Load the data behind a lesson-level route.

        Args:
            route: Route produced by NavigationResolver
            page: Quiz attempt page requested for report routes

        Returns:
            Backend payload, or None when the route needs no lesson data
        """
        if route.destination not in LESSON_DESTINATIONS:
            logger.debug(f"No lesson data needed for {route.destination.value}")
            return None

        lesson_id = self.lesson_id(route)
        if not lesson_id:
            logger.warning(f"No lessonId on route to {route.destination.value}, nothing to load")
            return None

        if route.destination is Destination.STEM_ASSESSMENT_REPORT:
            return await self.gateway.fetch_quiz_report(lesson_id, page)
        return await self.gateway.fetch_lesson_contents(lesson_id)

    async def load_attempt_summary(self, route: Route) -> dict[str, Any] | None:
        """Attempt summary for an assignment route (keyed by moodleCourseId)."""
        if route.destination is not Destination.ASSIGNMENT_INSTRUCTIONS:
            logger.debug(f"Attempt summary only applies to assignments, got {route.destination.value}")
            return None

        moodle_course_id = route.params.get("moodleCourseId")
        if not moodle_course_id:
            logger.warning("Assignment route has no moodleCourseId, cannot load attempt summary")
            return None
        return await self.gateway.fetch_attempt_summary(moodle_course_id)
