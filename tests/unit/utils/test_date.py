"""Tests for the date utilities."""

from datetime import datetime, timedelta, timezone

import pytest

from ticket_insights.utils.date import (
    MS_PER_DAY,
    days_between,
    millis_to_days,
    parse_datetime,
    to_millis,
)

UTC_NOON = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


class TestParseDatetime:
    """Tests for parse_datetime."""

    @pytest.mark.parametrize(
        "value",
        [
            "2024-01-01T12:00:00.000+0000",
            "2024-01-01T12:00:00Z",
            "2024-01-01T14:00:00+02:00",
            1704110400000,
            "1704110400000",
            datetime(2024, 1, 1, 12, 0),
        ],
    )
    def test_supported_formats(self, value):
        assert parse_datetime(value) == UTC_NOON

    def test_date_only_is_midnight_utc(self):
        assert parse_datetime("2024-12-31") == datetime(
            2024, 12, 31, tzinfo=timezone.utc
        )

    def test_compact_date_is_not_epoch(self):
        assert parse_datetime("20240115") == datetime(
            2024, 1, 15, tzinfo=timezone.utc
        )

    def test_result_is_aware(self):
        assert parse_datetime("2024-01-01T12:00:00").tzinfo is not None

    @pytest.mark.parametrize("value", [None, "", "not a date", True, [], {}])
    def test_invalid_values(self, value):
        assert parse_datetime(value) is None


class TestConversions:
    """Tests for the millisecond and day helpers."""

    def test_to_millis(self):
        assert to_millis(timedelta(hours=1, milliseconds=5)) == 3_600_005

    @pytest.mark.parametrize("millis", [1001, 1003, 1005, 2003, 99_999])
    def test_to_millis_is_exact(self, millis):
        assert to_millis(timedelta(milliseconds=millis)) == millis

    def test_to_millis_negative(self):
        assert to_millis(timedelta(milliseconds=-1001)) == -1001

    def test_millis_to_days(self):
        assert millis_to_days(MS_PER_DAY * 1.5) == 1.5

    @pytest.mark.parametrize(
        ("end", "expected"),
        [
            (UTC_NOON + timedelta(days=2, hours=23), 2),
            (UTC_NOON + timedelta(days=3), 3),
            (UTC_NOON, 0),
            (UTC_NOON - timedelta(hours=1), -1),
        ],
    )
    def test_days_between_floors(self, end, expected):
        assert days_between(UTC_NOON, end) == expected
