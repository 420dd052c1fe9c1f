"""
Student Platform Client

HTTP client for the student platform backend. Implements the RemoteDataGateway
operations used by home initialization and by lesson-level screens.

Usage:
    async with PlatformClient(api_config, store) as client:
        profile = await client.fetch_basic_profile()
        records = await client.fetch_enrolled_courses()
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, Protocol, runtime_checkable

import httpx
from loguru import logger

from .api_config import ApiConfig
from .exceptions import GatewayError
from .storage import ACCESS_TOKEN_KEY, USER_ID_KEY, USERNAME_KEY, KeyValueStore

# Keys the enrolled-course endpoint has been seen to wrap its list in
COURSE_LIST_KEYS = ("data", "courses", "enrolledCourses")


@runtime_checkable
class RemoteDataGateway(Protocol):
    """Async operations consumed by the orchestrator and lesson loader."""

    async def fetch_basic_profile(self) -> dict[str, Any]:
        ...

    async def check_enrollment(self) -> dict[str, Any]:
        ...

    async def fetch_profile_details(self) -> dict[str, Any]:
        ...

    async def fetch_notifications(self) -> dict[str, Any] | None:
        ...

    async def fetch_completion_percentage(self) -> dict[str, Any] | None:
        ...

    async def fetch_enrolled_courses(self) -> list[dict[str, Any]]:
        ...

    async def fetch_lesson_contents(self, lesson_id: str) -> dict[str, Any]:
        ...

    async def fetch_attempt_summary(self, lesson_id: str) -> dict[str, Any]:
        ...

    async def fetch_quiz_report(self, lesson_id: str, page: str = "quiz-report") -> dict[str, Any]:
        ...


def extract_course_list(payload: Any) -> list[dict[str, Any]]:
    """
    Pull the enrolled-course list out of whatever shape the backend returned.

    Accepts a bare list, an object with the list under one of COURSE_LIST_KEYS,
    or an object whose first list-valued key holds it.
    """
    if payload is None:
        return []
    if isinstance(payload, list):
        return [item for item in payload if isinstance(item, dict)]
    if not isinstance(payload, dict):
        logger.warning(f"Unexpected enrolled-course payload type: {type(payload).__name__}")
        return []

    for key in COURSE_LIST_KEYS:
        value = payload.get(key)
        if isinstance(value, list):
            logger.debug(f"Found courses in response.{key}, length: {len(value)}")
            return [item for item in value if isinstance(item, dict)]

    for key, value in payload.items():
        if isinstance(value, list):
            logger.debug(f"Found array in key: {key}, length: {len(value)}")
            return [item for item in value if isinstance(item, dict)]

    logger.warning(f"No course list in enrolled-course response (keys: {list(payload)})")
    return []


def decode_json_array_fields(data: dict[str, Any]) -> dict[str, Any]:
    """Decode profile fields the backend sends as JSON-array strings."""
    decoded = dict(data)
    for key, value in data.items():
        if isinstance(value, str) and value.startswith("[") and value.endswith("]"):
            try:
                decoded[key] = json.loads(value)
            except json.JSONDecodeError as e:
                logger.debug(f"Leaving {key} as text, not a JSON array: {e}")
    return decoded


class PlatformClient:
    """
    HTTP client for the student platform API.

    Every operation raises GatewayError on failure; whether that failure is
    fatal is decided by the caller.
    """

    def __init__(
        self,
        config: ApiConfig,
        store: KeyValueStore,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config = config
        self.store = store
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "PlatformClient":
        await self._ensure_client()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.config.base_url,
                headers={"Content-Type": "application/json"},
                timeout=self.config.timeout_seconds,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    # =========================================================================
    # Request plumbing
    # =========================================================================

    def _auth_headers(self) -> dict[str, str]:
        token = self.store.get(ACCESS_TOKEN_KEY)
        if token:
            return {"Authorization": f"Bearer {token}"}
        return {}

    def _require(self, key: str, operation: str) -> str:
        value = self.store.get(key)
        if not value:
            raise GatewayError(operation, f"{key} not found in local store")
        return value

    async def _request(
        self,
        operation: str,
        method: str,
        url: str,
        *,
        json_body: dict[str, Any] | None = None,
        form_body: dict[str, Any] | None = None,
    ) -> Any:
        client = await self._ensure_client()
        headers = self._auth_headers()
        if form_body is not None:
            headers["Content-Type"] = "application/x-www-form-urlencoded"

        try:
            response = await client.request(
                method,
                url,
                json=json_body,
                data=form_body,
                headers=headers,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 401:
                logger.error(f"{operation}: 401 Unauthorized - token may be missing or expired")
            raise GatewayError(operation, "backend rejected the request", e.response.status_code) from e
        except httpx.RequestError as e:
            raise GatewayError(operation, f"connection error: {e}") from e

        logger.debug(f"{operation}: {method} {url} -> {response.status_code}")
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise GatewayError(operation, "response body is not JSON", response.status_code) from e

    # =========================================================================
    # Home initialization
    # =========================================================================

    async def fetch_basic_profile(self) -> dict[str, Any]:
        """Fetch the basic user profile (GET, no body)."""
        data = await self._request("fetch_basic_profile", "GET", self.config.profile_endpoint)
        return data if isinstance(data, dict) else {}

    async def check_enrollment(self) -> dict[str, Any]:
        """Check whether the student is enrolled in a role journey."""
        user_id = self._require(USER_ID_KEY, "check_enrollment")
        data = await self._request(
            "check_enrollment",
            "POST",
            self.config.enrollment_endpoint,
            json_body={"userId": user_id},
        )
        return data if isinstance(data, dict) else {}

    async def fetch_profile_details(self) -> dict[str, Any]:
        """Fetch the detailed profile; JSON-array string fields are decoded."""
        user_id = self._require(USER_ID_KEY, "fetch_profile_details")
        data = await self._request(
            "fetch_profile_details",
            "POST",
            self.config.profile_details_endpoint,
            json_body={"userId": user_id},
        )
        if not isinstance(data, dict):
            logger.warning("Profile details response is empty, returning empty object")
            return {}
        return decode_json_array_fields(data)

    async def fetch_notifications(self) -> dict[str, Any] | None:
        """Fetch notifications grouped as today / yesterday / older."""
        user_id = self._require(USER_ID_KEY, "fetch_notifications")
        return await self._request(
            "fetch_notifications",
            "GET",
            f"{self.config.notifications_endpoint}/{user_id}",
        )

    async def fetch_completion_percentage(self) -> dict[str, Any] | None:
        """Fetch profile completion percentage (form-encoded body)."""
        user_id = self._require(USER_ID_KEY, "fetch_completion_percentage")
        email = self._require(USERNAME_KEY, "fetch_completion_percentage")
        return await self._request(
            "fetch_completion_percentage",
            "POST",
            self.config.profile_percentage_endpoint,
            form_body={"email": email, "userId": user_id},
        )

    async def fetch_enrolled_courses(self) -> list[dict[str, Any]]:
        """Fetch raw enrollment records, unwrapped to a list."""
        user_id = self._require(USER_ID_KEY, "fetch_enrolled_courses")
        email = self._require(USERNAME_KEY, "fetch_enrolled_courses")
        data = await self._request(
            "fetch_enrolled_courses",
            "POST",
            self.config.enrolled_courses_endpoint,
            json_body={"email": email, "userId": user_id},
        )
        return extract_course_list(data)

    # =========================================================================
    # Lesson-level calls (lessonId == moodleCourseId namespace)
    # =========================================================================

    async def fetch_lesson_contents(self, lesson_id: str) -> dict[str, Any]:
        """Fetch lesson contents (assignment brief, instructions)."""
        user_id = self._require(USER_ID_KEY, "fetch_lesson_contents")
        data = await self._request(
            "fetch_lesson_contents",
            "POST",
            self.config.lesson_contents_endpoint,
            json_body={"lessonId": lesson_id, "userId": user_id},
        )
        return data if isinstance(data, dict) else {}

    async def fetch_attempt_summary(self, lesson_id: str) -> dict[str, Any]:
        """
        Fetch the assignment attempt summary.

        The body field is named lessonId but carries the moodleCourseId value.
        """
        user_id = self._require(USER_ID_KEY, "fetch_attempt_summary")
        data = await self._request(
            "fetch_attempt_summary",
            "POST",
            self.config.assignment_attempt_endpoint,
            json_body={"lessonId": lesson_id, "page": "attempt-summary", "userId": user_id},
        )
        return data if isinstance(data, dict) else {}

    async def fetch_quiz_report(self, lesson_id: str, page: str = "quiz-report") -> dict[str, Any]:
        """Fetch a quiz attempt page (report by default) for an assessment lesson."""
        user_id = self._require(USER_ID_KEY, "fetch_quiz_report")
        data = await self._request(
            "fetch_quiz_report",
            "POST",
            self.config.quiz_attempt_endpoint,
            json_body={"lessonId": lesson_id, "page": page, "userId": user_id},
        )
        return data if isinstance(data, dict) else {}

    # =========================================================================
    # Health Check
    # =========================================================================

    async def health_check(self) -> bool:
        """Check if the platform is reachable."""
        try:
            client = await self._ensure_client()
            response = await client.get(self.config.health_endpoint, timeout=5.0)
            return response.status_code == 200
        except (httpx.RequestError, asyncio.TimeoutError):
            return False
