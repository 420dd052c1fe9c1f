"""
Home Initialization Orchestrator.

Runs the fixed, strictly sequential set of backend calls that populate the
home screen:

    1. basic profile          (hard: failure aborts the run)
    2. enrollment check       (soft)
    3. profile details        (soft, merged over step 1)
    4. notifications          (soft, derives the unread badge count)
    5. completion percentage  (soft)
    6. enrolled courses       (soft, only when step 2 reports enrolled)

Each run takes a generation token. A run that finds its token superseded after
an await discards what it fetched and stops; only the newest run commits.
"""

from __future__ import annotations

from datetime import UTC, datetime, tzinfo
from typing import Any, Awaitable, Callable, Mapping

from loguru import logger

from src.core.exceptions import FatalInitError, GatewayError, SoftStepError
from src.core.platform_client import RemoteDataGateway
from src.journey import JourneyView, build_journey
from src.journey.normalizer import parse_flag

from .snapshot import InitializationSnapshot, count_unread


class _Superseded(Exception):
    """A newer initialize() started while this one was awaiting."""


class InitializationOrchestrator:
    """
    Owner and single writer of the home InitializationSnapshot.

    Usage:
        orchestrator = InitializationOrchestrator(client)
        snapshot = await orchestrator.initialize()
        view = orchestrator.journey()
    """

    def __init__(self, gateway: RemoteDataGateway, tz: tzinfo = UTC):
        self.gateway = gateway
        self.tz = tz
        self._snapshot = InitializationSnapshot()
        self._generation = 0

    @classmethod
    def from_settings(cls, settings: Any) -> "InitializationOrchestrator":
        """Wire a PlatformClient over the JSON-file store described by settings."""
        from src.core.api_config import ApiConfig
        from src.core.platform_client import PlatformClient
        from src.core.storage import JsonFileStore
        from src.journey.deadlines import resolve_timezone

        client = PlatformClient(ApiConfig.from_settings(settings), JsonFileStore(settings.store_path))
        return cls(client, tz=resolve_timezone(settings.deadline_timezone))

    @property
    def snapshot(self) -> InitializationSnapshot:
        """Copy of the committed state."""
        return self._snapshot.copy()

    @property
    def generation(self) -> int:
        return self._generation

    def journey(self, now: datetime | None = None) -> JourneyView:
        """Journey buckets for the currently committed enrollment records."""
        return build_journey(self._snapshot.enrolled_courses, now or datetime.now(self.tz), self.tz)

    # =========================================================================
    # Run
    # =========================================================================

    async def initialize(self) -> InitializationSnapshot:
        """
        Run all six steps. Never raises.

        Returns:
            Copy of the snapshot as committed by this run (or by the newer run
            that superseded it)
        """
        self._generation += 1
        token = self._generation
        self._snapshot = InitializationSnapshot(loading=True, generation=token)
        logger.info(f"Home initialization started (generation {token})")

        try:
            await self._run(token)
        except _Superseded as e:
            logger.debug(f"Generation {token} superseded by {self._generation} during {e}, result discarded")
            return self.snapshot
        except FatalInitError as e:
            logger.error(f"Home initialization failed at fetch_basic_profile: {e.cause}")
            self._snapshot.error = FatalInitError.user_message

        self._snapshot.loading = False
        failed = self._snapshot.failed_steps
        if self._snapshot.error:
            logger.info(f"Home initialization aborted (generation {token})")
        elif failed:
            logger.info(f"Home initialization finished with {len(failed)} failed step(s): {', '.join(failed)}")
        else:
            logger.info(f"Home initialization complete (generation {token})")
        return self.snapshot

    async def _call(
        self,
        token: int,
        step: str,
        fn: Callable[[], Awaitable[Any]],
        expect: type | tuple[type, ...] | None = None,
    ) -> tuple[Any, Exception | None]:
        """Await one step; a failure or a payload not of type `expect` comes back as the error."""
        logger.debug(f"[{token}] {step}")
        try:
            value, error = await fn(), None
        except Exception as e:  # any gateway failure is data here
            value, error = None, e
        if expect is not None and value is not None and not isinstance(value, expect):
            value, error = None, GatewayError(step, f"unexpected {type(value).__name__} payload")
        if token != self._generation:
            raise _Superseded(step)
        return value, error

    def _soft_failure(self, step: str, error: Exception) -> None:
        message = str(error) or type(error).__name__
        self._snapshot.step_errors.append(SoftStepError(step=step, message=message))
        logger.warning(f"{step} failed, continuing: {message}")

    async def _run(self, token: int) -> None:
        gw = self.gateway
        snap = self._snapshot

        # Step 1: basic profile (hard)
        profile, error = await self._call(token, "fetch_basic_profile", gw.fetch_basic_profile, Mapping)
        if error is not None:
            raise FatalInitError(error)
        snap.profile = dict(profile or {})

        # Step 2: enrollment
        enrollment, error = await self._call(token, "check_enrollment", gw.check_enrollment, Mapping)
        if error is not None:
            self._soft_failure("check_enrollment", error)
            snap.is_enrolled = False
        else:
            snap.is_enrolled = enrollment_flag(enrollment)
            logger.debug(f"Enrolled: {snap.is_enrolled}")

        # Step 3: profile details
        details, error = await self._call(token, "fetch_profile_details", gw.fetch_profile_details, Mapping)
        if error is not None:
            self._soft_failure("fetch_profile_details", error)
        elif details:
            snap.profile_details = dict(details)
            snap.profile = {**snap.profile, **details}

        # Step 4: notifications
        notifications, error = await self._call(token, "fetch_notifications", gw.fetch_notifications, Mapping)
        if error is not None:
            self._soft_failure("fetch_notifications", error)
        elif notifications:
            snap.notifications = dict(notifications)
            snap.badge_count = count_unread(snap.notifications)

        # Step 5: completion percentage
        percentage, error = await self._call(
            token, "fetch_completion_percentage", gw.fetch_completion_percentage
        )
        if error is not None:
            self._soft_failure("fetch_completion_percentage", error)
        elif percentage:
            snap.completion_percentage = percentage

        # Step 6: enrolled courses, gated on step 2
        if not snap.is_enrolled:
            logger.info("Not enrolled in a role journey, skipping enrolled courses")
            return
        courses, error = await self._call(token, "fetch_enrolled_courses", gw.fetch_enrolled_courses, list)
        if error is not None:
            self._soft_failure("fetch_enrolled_courses", error)
        else:
            snap.enrolled_courses = list(courses or [])
            logger.info(f"Loaded {len(snap.enrolled_courses)} enrollment records")


def enrollment_flag(response: Any) -> bool:
    """Read the enrolled flag, preferring `enrolled` over `roleEnrolled`."""
    if not isinstance(response, Mapping):
        return False
    flag = response.get("enrolled")
    if flag is None:
        flag = response.get("roleEnrolled")
    return bool(parse_flag(flag))
