"""Tests for timestamp and masking utilities."""

from datetime import datetime, timedelta, timezone

import pytest

from app.utils.masking import mask_email
from app.utils.timestamps import (
    ensure_utc,
    format_time_ago,
    format_timestamp,
    parse_iso_datetime,
    utc_now,
)

NOW = datetime(2025, 11, 10, 12, 0, 0, tzinfo=timezone.utc)


class TestUtcHelpers:
    def test_utc_now_is_aware(self):
        assert utc_now().tzinfo == timezone.utc

    def test_ensure_utc_none(self):
        assert ensure_utc(None) is None

    def test_ensure_utc_naive(self):
        assert ensure_utc(datetime(2025, 1, 1, 10, 0)) == datetime(
            2025, 1, 1, 10, 0, tzinfo=timezone.utc
        )

    def test_ensure_utc_converts_offset(self):
        pst = timezone(timedelta(hours=-8))
        converted = ensure_utc(datetime(2025, 1, 1, 2, 0, tzinfo=pst))

        assert converted.hour == 10
        assert converted.tzinfo == timezone.utc


class TestParseIsoDatetime:
    @pytest.mark.parametrize(
        "value",
        ["2025-11-04T12:00:00Z", "2025-11-04T12:00:00+00:00", "2025-11-04T17:30:00+05:30"],
    )
    def test_equivalent_forms(self, value):
        assert parse_iso_datetime(value) == datetime(2025, 11, 4, 12, 0, tzinfo=timezone.utc)

    @pytest.mark.parametrize("value", [None, "", "   ", "yesterday"])
    def test_empty_or_invalid(self, value):
        assert parse_iso_datetime(value) is None


class TestFormatTimestamp:
    def test_seconds_precision(self):
        assert format_timestamp(NOW) == "2025-11-10T12:00:00Z"

    def test_microseconds_are_fixed_width(self):
        value = NOW.replace(microsecond=5)

        assert format_timestamp(value, include_microseconds=True) == "2025-11-10T12:00:00.000005Z"

    def test_round_trip_preserves_order(self):
        """Stored strings sort in the same order as the datetimes."""
        earlier = NOW - timedelta(microseconds=1)

        assert format_timestamp(earlier, True) < format_timestamp(NOW, True)


class TestFormatTimeAgo:
    @pytest.mark.parametrize(
        "delta, expected",
        [
            (timedelta(seconds=30), "Just now"),
            (timedelta(minutes=5), "5m ago"),
            (timedelta(hours=3), "3h ago"),
            (timedelta(days=2), "2d ago"),
            (timedelta(days=10), "2025-10-31"),
        ],
    )
    def test_relative_labels(self, delta, expected):
        assert format_time_ago(NOW - delta, now=NOW) == expected


class TestMaskEmail:
    def test_masks_local_part(self):
        assert mask_email("jane.doe@example.com") == "j***@example.com"

    def test_missing_address(self):
        assert mask_email(None) == "<none>"
        assert mask_email("") == "<none>"

    def test_not_an_address(self):
        assert mask_email("jane") == "***"
