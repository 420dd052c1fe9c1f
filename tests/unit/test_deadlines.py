"""
Unit tests for deadline parsing.
"""

from datetime import UTC, datetime, timedelta, timezone

import pytest

from src.journey.deadlines import (
    is_past,
    looks_like_iso,
    parse_deadline,
    resolve_timezone,
    strip_ordinal_suffixes,
)


class TestParseDeadline:
    def test_iso_with_zulu(self):
        parsed = parse_deadline("2026-01-07T11:48:00Z")
        assert parsed == datetime(2026, 1, 7, 11, 48, tzinfo=UTC)

    def test_iso_with_offset(self):
        parsed = parse_deadline("2026-01-07T17:18:00+05:30")
        assert parsed.utcoffset() == timedelta(hours=5, minutes=30)

    def test_ordinal_human_text(self):
        parsed = parse_deadline("7th January 2026, 5:18pm")
        assert parsed == datetime(2026, 1, 7, 17, 18, tzinfo=UTC)

    def test_naive_value_takes_given_zone(self):
        tz = timezone(timedelta(hours=5, minutes=30))
        parsed = parse_deadline("2nd March 2026 10:00", tz)
        assert parsed.tzinfo is tz
        assert parsed.hour == 10

    def test_datetime_passthrough(self):
        value = datetime(2026, 1, 1, tzinfo=UTC)
        assert parse_deadline(value) is value

    @pytest.mark.parametrize("value", [None, "", "   ", "not a date", 12345, {"at": "now"}])
    def test_unusable_values_mean_no_deadline(self, value):
        assert parse_deadline(value) is None


class TestHelpers:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("1st May", "1 May"),
            ("22nd June", "22 June"),
            ("3rd July", "3 July"),
            ("7th January 2026", "7 January 2026"),
            ("First", "First"),
        ],
    )
    def test_strip_ordinal_suffixes(self, text, expected):
        assert strip_ordinal_suffixes(text) == expected

    def test_looks_like_iso(self):
        assert looks_like_iso("2026-01-07T11:48:00Z")
        assert not looks_like_iso("7 january 2026")

    def test_resolve_timezone(self):
        assert resolve_timezone("UTC") is UTC
        assert resolve_timezone(None) is UTC
        assert resolve_timezone("Not/AZone") is UTC


class TestIsPast:
    def test_strictly_before_now(self):
        now = datetime(2026, 1, 7, 11, 48, tzinfo=UTC)
        assert is_past("2026-01-07T11:47:59Z", now)
        assert not is_past("2026-01-07T11:48:00Z", now)
        assert not is_past("2026-01-08T00:00:00Z", now)

    def test_no_deadline_is_never_past(self):
        assert not is_past(None, datetime(2099, 1, 1, tzinfo=UTC))
        assert not is_past("garbage", datetime(2099, 1, 1, tzinfo=UTC))

    def test_naive_now_uses_zone(self):
        tz = timezone(timedelta(hours=2))
        assert is_past("2026-01-01T09:00:00Z", datetime(2026, 1, 1, 11, 30), tz)
