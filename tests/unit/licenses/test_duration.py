"""
Unit tests for duration strings.
"""
from datetime import datetime, timedelta, timezone

import pytest

from core.domain.exceptions import InvalidDurationError
from licenses.domain.duration import apply_duration

START = datetime(2024, 1, 31, 12, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "duration,expected",
    [
        ("30m", START + timedelta(minutes=30)),
        ("12h", START + timedelta(hours=12)),
        ("7d", START + timedelta(days=7)),
        ("2w", START + timedelta(weeks=2)),
        ("1y", datetime(2025, 1, 31, 12, 0, tzinfo=timezone.utc)),
        ("12mo", datetime(2025, 1, 31, 12, 0, tzinfo=timezone.utc)),
    ],
)
def test_apply_duration(duration, expected):
    """Test each supported unit."""
    assert apply_duration(START, duration) == expected


def test_month_end_is_clamped():
    """Test that Jan 31 + 1mo lands on the last day of February."""
    assert apply_duration(START, "1mo") == datetime(2024, 2, 29, 12, 0, tzinfo=timezone.utc)


def test_leap_day_plus_year():
    """Test that Feb 29 + 1y lands on Feb 28."""
    start = datetime(2024, 2, 29, tzinfo=timezone.utc)
    assert apply_duration(start, "1y") == datetime(2025, 2, 28, tzinfo=timezone.utc)


@pytest.mark.parametrize("duration", ["", "d", "30", "30x", "-5d", "1.5d", "mo", "abcmo"])
def test_invalid_duration(duration):
    """Test malformed duration strings."""
    with pytest.raises(InvalidDurationError):
        apply_duration(START, duration)


@pytest.mark.parametrize("duration", ["²d", "3²mo", "٣d"])
def test_non_ascii_digits_rejected(duration):
    """Test that only ASCII digits count as a duration number."""
    with pytest.raises(InvalidDurationError):
        apply_duration(START, duration)


@pytest.mark.parametrize("duration", ["99999999999y", "99999999999mo", "99999999999999d", "9000y"])
def test_out_of_range_duration(duration):
    """Test that an expiry past the last representable date is a domain error."""
    with pytest.raises(InvalidDurationError, match="out of range"):
        apply_duration(START, duration)
