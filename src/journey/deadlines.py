"""
Deadline parsing.

Backend deadlines come either as ISO-8601 timestamps ("2026-01-07T11:48:00Z")
or as loosely formatted human text ("7th January 2026, 5:18pm"). Parsing
never raises: anything unusable means "no deadline".
"""

from __future__ import annotations

import re
from datetime import UTC, datetime, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dateutil import parser as date_parser
from loguru import logger

_ORDINAL_SUFFIX = re.compile(r"\b(\d{1,2})(st|nd|rd|th)\b", re.IGNORECASE)


def strip_ordinal_suffixes(text: str) -> str:
    """Turn "7th January" into "7 January" so generic parsing accepts it."""
    return _ORDINAL_SUFFIX.sub(r"\1", text)


def looks_like_iso(text: str) -> bool:
    return "T" in text or "Z" in text


def resolve_timezone(name: str | None) -> tzinfo:
    """Look up a zone by name, falling back to UTC."""
    if not name or name.upper() == "UTC":
        return UTC
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning(f"Unknown deadline timezone {name!r}, using UTC")
        return UTC


def parse_deadline(value: object, tz: tzinfo = UTC) -> datetime | None:
    """
    Parse a deadline into an aware datetime.

    Args:
        value: Raw deadline (string or datetime)
        tz: Zone applied to values that carry no offset

    Returns:
        Aware datetime, or None when absent or unparsable
    """
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=tz)
    if not isinstance(value, str) or not value.strip():
        return None

    text = value.strip()
    parsed: datetime | None = None

    if looks_like_iso(text):
        try:
            parsed = date_parser.isoparse(text)
        except (ValueError, OverflowError):
            logger.debug(f"Deadline {text!r} is not ISO-8601, trying loose parse")

    if parsed is None:
        try:
            parsed = date_parser.parse(strip_ordinal_suffixes(text))
        except (ValueError, OverflowError, TypeError) as e:
            logger.debug(f"Unparsable deadline {text!r}: {e}")
            return None

    return parsed if parsed.tzinfo else parsed.replace(tzinfo=tz)


def is_past(deadline: object, now: datetime, tz: tzinfo = UTC) -> bool:
    """True when the deadline parses and is strictly before now."""
    parsed = parse_deadline(deadline, tz)
    if parsed is None:
        return False
    if now.tzinfo is None:
        now = now.replace(tzinfo=tz)
    return parsed < now
