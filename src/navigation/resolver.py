"""
Navigation Resolver.

Decides which screen a course action leads to, and which identifiers that
screen needs. Rules are data: an ordered list of (name, predicate, builder)
entries evaluated top to bottom. The first rule whose predicate matches owns
the action: if its builder cannot find the identifiers it needs, the route is
unresolved and no later rule is tried.

Identifier namespaces are never mixed:
    courseId        -> course-level screens (LearningPath, CourseDetails)
    moodleCourseId  -> lesson-level screens (assignment, survey, assessment)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable
from urllib.parse import urlsplit

from loguru import logger

from src.journey.models import Course, ResultState

from .routes import Destination, NavAction, Route

DEFAULT_AUTOMOTIVE_COURSE_ID = "automotive-awareness"
DEFAULT_AUTOMOTIVE_COURSE_TITLE = "Different Players In The Automotive Industry"

ASSESSMENT_PATH_MARKERS = ("/assessment", "/test", "/quiz")
ASSESSMENT_TYPE_MARKERS = ("ASSESSMENT", "TEST", "QUIZ")
SURVEY_MARKERS = ("survey", "career")
ENGINEERING_MARKERS = ("engineering", "engintro")
EXTERNAL_SCHEMES = ("http", "https")


@dataclass(frozen=True)
class NavContext:
    """What a rule can look at: the course (if any) and the URL being opened."""

    course: Course | None
    url: str | None

    @property
    def url_path(self) -> str:
        if not self.url:
            return ""
        try:
            parts = urlsplit(self.url)
        except ValueError:
            return self.url.lower()
        return (parts.path or self.url).lower()

    @property
    def is_web_url(self) -> bool:
        if not self.url:
            return False
        try:
            parts = urlsplit(self.url)
        except ValueError:
            return False
        return parts.scheme.lower() in EXTERNAL_SCHEMES and bool(parts.netloc)

    @property
    def title(self) -> str:
        return self.course.title.lower() if self.course else ""

    @property
    def sub_title(self) -> str:
        return self.course.sub_title.lower() if self.course else ""

    @property
    def content_type(self) -> str:
        return self.course.content_type.upper() if self.course else ""

    @property
    def button_text(self) -> str:
        return (self.course.button_text or "").lower() if self.course else ""

    @property
    def lesson_id(self) -> str | None:
        if not self.course:
            return None
        return self.course.moodle_course_id or self.course.lesson_id

    @property
    def course_id(self) -> str | None:
        return self.course.course_id if self.course else None

    def trailing_segment(self) -> str | None:
        if not self.url:
            return None
        # Original casing, not url_path's lowered copy
        segments = [s for s in (urlsplit(self.url).path or self.url).split("/") if s]
        return segments[-1] if segments else None


Predicate = Callable[[NavContext], bool]
Builder = Callable[[NavContext], "Route | None"]


@dataclass(frozen=True)
class NavRule:
    name: str
    predicate: Predicate
    build: Builder


# =============================================================================
# Predicates
# =============================================================================


def is_automotive_awareness(ctx: NavContext) -> bool:
    text = f"{ctx.title} {ctx.sub_title}"
    return "automotive" in text and "awareness" in text


def is_role_recommendation(ctx: NavContext) -> bool:
    candidates = (ctx.content_type.replace("_", " ").lower(), ctx.title, ctx.button_text)
    return any("role recommendation" in text for text in candidates)


def is_assignment(ctx: NavContext) -> bool:
    return "/assignment" in ctx.url_path or "ASSIGNMENT" in ctx.content_type


def is_survey(ctx: NavContext) -> bool:
    haystacks = (ctx.url_path, ctx.title, ctx.sub_title, ctx.content_type.lower())
    return any(marker in text for text in haystacks for marker in SURVEY_MARKERS)


def is_course(ctx: NavContext) -> bool:
    return "COURSE" in ctx.content_type


def is_assessment(ctx: NavContext) -> bool:
    return any(m in ctx.url_path for m in ASSESSMENT_PATH_MARKERS) or any(
        m in ctx.content_type for m in ASSESSMENT_TYPE_MARKERS
    )


def is_engineering_variant(ctx: NavContext) -> bool:
    haystacks = (ctx.title, ctx.sub_title, ctx.url_path)
    return any(marker in text for text in haystacks for marker in ENGINEERING_MARKERS)


def is_external(ctx: NavContext) -> bool:
    return ctx.is_web_url


# =============================================================================
# Builders
# =============================================================================


def build_automotive(ctx: NavContext) -> Route:
    if ctx.course_id:
        return Route(Destination.LEARNING_PATH, {"courseId": ctx.course_id})
    return Route(Destination.AUTOMOTIVE_AWARENESS)


def build_role_recommendation(ctx: NavContext) -> Route:
    return Route(Destination.ROLE_RECOMMENDATION)


def build_assignment(ctx: NavContext) -> Route | None:
    lesson_id = ctx.lesson_id
    if lesson_id is None and "/assignment" in ctx.url_path:
        lesson_id = ctx.trailing_segment()
        logger.debug(f"Assignment lessonId taken from URL: {lesson_id}")
    if lesson_id is None:
        logger.debug(f"Assignment detected but no moodleCourseId/lessonId found. URL: {ctx.url}")
        return None
    moodle_course_id = (ctx.course.moodle_course_id if ctx.course else None) or lesson_id
    return Route(
        Destination.ASSIGNMENT_INSTRUCTIONS,
        {"lessonId": lesson_id, "assignmentId": lesson_id, "moodleCourseId": moodle_course_id},
    )


def build_survey(ctx: NavContext) -> Route | None:
    lesson_id = ctx.lesson_id
    if lesson_id is None:
        return None
    params = {"lessonId": lesson_id, "moodleCourseId": lesson_id}
    if ctx.course and ctx.course.attempt_id:
        params["attemptId"] = ctx.course.attempt_id
    return Route(Destination.SURVEY_QUESTIONS, params)


def build_course(ctx: NavContext) -> Route | None:
    if not ctx.course_id:
        return None
    return Route(Destination.LEARNING_PATH, {"courseId": ctx.course_id})


def build_assessment(ctx: NavContext) -> Route | None:
    lesson_id = ctx.lesson_id
    if lesson_id is None:
        return None
    if is_engineering_variant(ctx):
        return Route(
            Destination.ENGINEERING_ASSESSMENT_INSTRUCTIONS,
            {"lessonId": lesson_id, "moodleCourseId": lesson_id},
        )
    return Route(Destination.STEM_ASSESSMENT_INSTRUCTIONS, {"lessonId": lesson_id})


def build_external(ctx: NavContext) -> Route:
    return Route(Destination.EXTERNAL, {"url": ctx.url})


OPEN_RULES: tuple[NavRule, ...] = (
    NavRule("automotive_awareness", is_automotive_awareness, build_automotive),
    NavRule("role_recommendation", is_role_recommendation, build_role_recommendation),
    NavRule("assignment", is_assignment, build_assignment),
    NavRule("survey", is_survey, build_survey),
    NavRule("course", is_course, build_course),
    NavRule("assessment", is_assessment, build_assessment),
    NavRule("external_link", is_external, build_external),
)


# =============================================================================
# Resolver
# =============================================================================


class NavigationResolver:
    """
    Resolve a course action (or a bare URL) to a Route.

    Never raises; an action that matches nothing is logged and yields None.
    """

    def __init__(
        self,
        rules: tuple[NavRule, ...] = OPEN_RULES,
        automotive_course_title: str = DEFAULT_AUTOMOTIVE_COURSE_TITLE,
    ):
        self.rules = rules
        self.automotive_course_title = automotive_course_title

    @classmethod
    def from_settings(cls, settings: Any) -> "NavigationResolver":
        return cls(automotive_course_title=settings.automotive_course_title)

    def resolve(self, target: Course | str | None, action: NavAction = NavAction.OPEN) -> Route | None:
        if isinstance(target, Course):
            ctx = NavContext(course=target, url=target.moodle_url)
        elif isinstance(target, str):
            ctx = NavContext(course=None, url=target.strip() or None)
        else:
            ctx = NavContext(course=None, url=None)

        try:
            if action is NavAction.OPEN:
                return self._resolve_open(ctx)
            if action is NavAction.VIEW_REPORT:
                return self._resolve_report(ctx)
            if action is NavAction.REATTEMPT:
                return self._resolve_reattempt(ctx)
            return self._resolve_details(ctx, action)
        except Exception as e:  # a broken rule must not crash the caller
            logger.exception(f"Navigation rule failed for {action.value}: {e}")
            return None

    def _resolve_open(self, ctx: NavContext) -> Route | None:
        for rule in self.rules:
            if not rule.predicate(ctx):
                continue
            route = rule.build(ctx)
            if route is None:
                logger.warning(
                    f"Unresolved route: rule {rule.name} matched but its ids are missing. URL: {ctx.url!r}"
                )
                return None
            logger.debug(f"Rule {rule.name} -> {route.destination.value} {route.params}")
            return Route(route.destination, route.params, rule=rule.name)

        logger.warning(
            f"Unresolved route: URL {ctx.url!r} not handled, course: {ctx.course.title if ctx.course else 'Unknown'}"
        )
        return None

    def _resolve_report(self, ctx: NavContext) -> Route:
        result = "Fail" if ctx.course and ctx.course.result_state is ResultState.FAIL else "Pass"
        params: dict[str, str] = {"finalResult": result}
        lesson_id = ctx.lesson_id
        if lesson_id:
            params.update(lessonId=lesson_id, moodleCourseId=lesson_id)
        else:
            logger.warning("View report: no moodleCourseId found in course data")
        return Route(Destination.STEM_ASSESSMENT_REPORT, params, rule="view_report")

    def _resolve_reattempt(self, ctx: NavContext) -> Route:
        lesson_id = ctx.lesson_id
        params = {"lessonId": lesson_id, "moodleCourseId": lesson_id} if lesson_id else {}
        return Route(Destination.STEM_ASSESSMENT_TEST, params, rule="reattempt")

    def _resolve_details(self, ctx: NavContext, action: NavAction) -> Route | None:
        if is_automotive_awareness(ctx):
            return Route(
                Destination.COURSE_DETAILS,
                {
                    "courseId": ctx.course_id or DEFAULT_AUTOMOTIVE_COURSE_ID,
                    "courseTitle": self.automotive_course_title,
                },
                rule="automotive_details",
            )
        if ctx.course_id:
            return Route(Destination.LEARNING_PATH, {"courseId": ctx.course_id}, rule="course_details")

        logger.warning(
            f"Unresolved route: {action.value} for {ctx.course.title if ctx.course else 'Unknown course'}"
        )
        return None


_default_resolver = NavigationResolver()


def resolve(target: Course | str | None, action: NavAction = NavAction.OPEN) -> Route | None:
    return _default_resolver.resolve(target, action)
