"""
Navigation destinations, user intents and resolved routes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Destination(str, Enum):
    """Screens reachable from the learning journey."""

    LEARNING_PATH = "LearningPath"  # courseId
    COURSE_DETAILS = "CourseDetails"  # courseId, courseTitle
    AUTOMOTIVE_AWARENESS = "AutomotiveAwareness"  # static, no params
    ROLE_RECOMMENDATION = "RoleRecommendation"  # static, no params
    ASSIGNMENT_INSTRUCTIONS = "AssignmentInstructions"  # lessonId, assignmentId, moodleCourseId
    SURVEY_QUESTIONS = "SurveyAssessmentQuestions"  # lessonId, moodleCourseId, attemptId?
    ENGINEERING_ASSESSMENT_INSTRUCTIONS = "EngineeringAssessmentInstructions"  # lessonId, moodleCourseId
    STEM_ASSESSMENT_INSTRUCTIONS = "StemAssessmentInstructions"  # lessonId
    STEM_ASSESSMENT_TEST = "StemAssessmentTest"  # lessonId, moodleCourseId
    STEM_ASSESSMENT_REPORT = "StemAssessmentReport"  # finalResult, lessonId, moodleCourseId
    EXTERNAL = "External"  # url, opened outside the app


class NavAction(str, Enum):
    """What the user asked for on a course card."""

    OPEN = "open"  # Primary button (start / resume / take the test)
    COURSE_DETAILS = "course_details"
    VIEW_REPORT = "view_report"
    REATTEMPT = "reattempt"
    REWATCH = "rewatch"


@dataclass(frozen=True)
class Route:
    """A destination plus the identifier payload it requires."""

    destination: Destination
    params: dict[str, Any] = field(default_factory=dict)
    rule: str = ""  # Name of the rule that produced it, for diagnostics

    @property
    def is_external(self) -> bool:
        return self.destination is Destination.EXTERNAL
