"""
Duration strings for license expiry.

Supported forms: 30m (minutes), 12h, 7d, 2w, 6mo (months), 1y.
"""
import calendar
import re
from datetime import datetime, timedelta

from core.domain.exceptions import InvalidDurationError

# ASCII digits only; str.isdigit() also accepts superscripts
_DURATION_RE = re.compile(r"(\d+)(mo|m|h|d|w|y)", re.ASCII)

_FIXED_UNITS = {
    "m": timedelta(minutes=1),
    "h": timedelta(hours=1),
    "d": timedelta(days=1),
    "w": timedelta(weeks=1),
}


def _add_months(start: datetime, months: int) -> datetime:
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    # Jan 31 + 1mo lands on the last day of February
    day = min(start.day, calendar.monthrange(year, month)[1])
    return start.replace(year=year, month=month, day=day)


def apply_duration(start: datetime, duration: str) -> datetime:
    """
    Compute the expiry reached by adding a duration string to start.

    Args:
        start: Starting point (usually now)
        duration: Duration string such as "30d" or "6mo"

    Returns:
        Expiry datetime

    Raises:
        InvalidDurationError: If the string is malformed or the expiry
            falls outside the supported date range
    """
    value = (duration or "").strip()
    match = _DURATION_RE.fullmatch(value)
    if match is None:
        raise InvalidDurationError(f"Invalid duration format: {duration!r}")
    number, unit = match.groups()

    try:
        amount = int(number)
        if unit == "mo":
            return _add_months(start, amount)
        if unit == "y":
            return _add_months(start, amount * 12)
        return start + _FIXED_UNITS[unit] * amount
    except (OverflowError, ValueError):
        raise InvalidDurationError(f"Duration out of range: {duration!r}")
