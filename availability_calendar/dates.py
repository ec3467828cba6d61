"""Calendar-day normalization.

Every date that enters the layout engine passes through
``normalize_to_calendar_day`` so that feed values, timestamps and
timezone-aware datetimes all collapse to the same UTC calendar day.
"""
import math
import re
from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from . import config
from .errors import InvalidDateError

_ICAL_DATETIME = re.compile(r"^(\d{8})T(\d{6})(Z?)$")


def _parse_string(value, tz_name):
    value = value.strip()
    if not value:
        raise InvalidDateError("Empty date string")
    if len(value) == 8 and value.isdigit():
        try:
            return date(int(value[:4]), int(value[4:6]), int(value[6:8]))
        except ValueError as exc:
            raise InvalidDateError(f"Invalid date {value!r}: {exc}") from exc

    match = _ICAL_DATETIME.match(value)
    if match:
        try:
            parsed = datetime.strptime(match.group(1) + match.group(2), "%Y%m%d%H%M%S")
        except ValueError as exc:
            raise InvalidDateError(f"Invalid date {value!r}: {exc}") from exc
        if match.group(3):
            parsed = parsed.replace(tzinfo=timezone.utc)
        return _from_datetime(parsed, tz_name)

    if len(value) == 10:
        try:
            return date.fromisoformat(value)
        except ValueError as exc:
            raise InvalidDateError(f"Invalid date {value!r}: {exc}") from exc

    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as exc:
        raise InvalidDateError(f"Invalid date {value!r}: {exc}") from exc
    return _from_datetime(parsed, tz_name)


def _from_datetime(value, tz_name):
    if value.tzinfo is None:
        if tz_name.upper() == "UTC":
            return value.date()
        value = value.replace(tzinfo=ZoneInfo(tz_name))
    return value.astimezone(timezone.utc).date()


def _from_timestamp(value):
    if not math.isfinite(value):
        raise InvalidDateError(f"Invalid timestamp {value!r}")
    try:
        return datetime.fromtimestamp(value, tz=timezone.utc).date()
    except (OverflowError, OSError, ValueError) as exc:
        raise InvalidDateError(f"Invalid timestamp {value!r}: {exc}") from exc


def normalize_to_calendar_day(value, tz_name=None):
    """Return the UTC calendar day for ``value``.

    Naive datetimes are read in ``tz_name`` (``FEED_TIMEZONE`` when omitted)
    before conversion. Raises ``InvalidDateError`` for anything that cannot be
    read as a date.
    """
    tz_name = tz_name or config.feed_timezone()
    if value is None or isinstance(value, bool):
        raise InvalidDateError(f"Invalid date {value!r}")
    if isinstance(value, datetime):
        return _from_datetime(value, tz_name)
    if isinstance(value, date):
        return value
    if isinstance(value, (int, float)):
        return _from_timestamp(value)
    if isinstance(value, str):
        return _parse_string(value, tz_name)
    raise InvalidDateError(f"Unsupported date type {type(value).__name__}")


def _require_day(value):
    if isinstance(value, datetime) or not isinstance(value, date):
        raise InvalidDateError(f"Expected a normalized calendar day, got {value!r}")


def last_occupied_night(end):
    _require_day(end)
    return end - timedelta(days=1)


def checkout_day(end):
    _require_day(end)
    return end


def iter_days(first_day, last_day):
    cursor = first_day
    while cursor <= last_day:
        yield cursor
        cursor += timedelta(days=1)


def month_start(day):
    return day.replace(day=1)


def month_end(day):
    next_month = day.replace(day=28) + timedelta(days=4)
    return next_month.replace(day=1) - timedelta(days=1)


def add_months(day, months):
    index = day.year * 12 + (day.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def iter_months(start, end):
    cursor = start.replace(day=1)
    while cursor <= end:
        yield cursor
        cursor = add_months(cursor, 1)


def format_day(day):
    return f"{day:%b} {day.day}, {day.year}"
