"""Calendar-day utilities shared by every duty and task view.

All comparisons happen on local calendar days (``datetime.date``), never on
raw timestamps, so a duty dated today is never "in the future" because of the
time of day or the runtime's UTC offset.
"""

import re
from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal

from dateutil import parser as dateutil_parser

from dutydesk.core.config import constants
from dutydesk.core.errors import MalformedDateError


_YMD_PATTERN = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
_CLOCK_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})(?::\d{2})?$")
_TENTH = Decimal("0.1")


def normalize_to_midnight(value: date | datetime) -> date:
    """Strip the time of day, returning the local calendar day.

    Timezone-aware datetimes are converted to local time first.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone()
        return value.date()
    return value


def today(now: datetime | None = None) -> date:
    """Local calendar day for ``now`` (defaults to the current moment)."""
    return normalize_to_midnight(now or datetime.now())


def parse_local_date(value: str | date | datetime | None) -> date:
    """Parse a date field into a local calendar day.

    ``YYYY-MM-DD`` strings are built from their explicit components so the day
    never shifts with the runtime's UTC offset. Any other shape goes through
    dateutil. Raises MalformedDateError when nothing works.
    """
    if isinstance(value, date):
        return normalize_to_midnight(value)
    if not isinstance(value, str) or not value.strip():
        raise MalformedDateError(value)

    text = value.strip()
    match = _YMD_PATTERN.match(text)
    if match:
        year, month, day = (int(part) for part in match.groups())
        try:
            return date(year, month, day)
        except ValueError as e:
            raise MalformedDateError(value) from e

    try:
        parsed = dateutil_parser.parse(text)
    except (ValueError, OverflowError) as e:
        raise MalformedDateError(value) from e
    return normalize_to_midnight(parsed)


def is_future_day(value: str | date | datetime | None, *, now: datetime | None = None) -> bool:
    """True when the value's calendar day is strictly after today."""
    return parse_local_date(value) > today(now)


def is_past_day(value: str | date | datetime | None, *, now: datetime | None = None) -> bool:
    """True when the value's calendar day is strictly before today."""
    return parse_local_date(value) < today(now)


def week_bounds(now: datetime | None = None) -> tuple[date, date]:
    """Sunday-to-Saturday bounds of the week containing ``now``."""
    current = today(now)
    # date.weekday() is Monday=0; shift to Sunday=0
    days_since_sunday = (current.weekday() + 1) % 7
    start = current - timedelta(days=days_since_sunday)
    return start, start + timedelta(days=6)


def parse_clock(value: str) -> tuple[int, int]:
    """Parse an ``HH:mm`` time of day into (hours, minutes)."""
    match = _CLOCK_PATTERN.match(value.strip())
    if not match:
        raise MalformedDateError(value)
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours >= constants.HOURS_PER_DAY or minutes >= constants.MINUTES_PER_HOUR:
        raise MalformedDateError(value)
    return hours, minutes


def shift_duration_hours(start: str | None, end: str | None) -> str:
    """Length of a shift in hours, formatted to one decimal place.

    A shift whose end is earlier than its start is taken to cross midnight,
    so the result is always in [0, 24). Missing inputs yield "0.0".
    """
    if not start or not end:
        return constants.EMPTY_HOURS

    start_h, start_m = parse_clock(start)
    end_h, end_m = parse_clock(end)

    hours = end_h - start_h
    minutes = end_m - start_m
    if minutes < 0:
        minutes += constants.MINUTES_PER_HOUR
        hours -= 1
    if hours < 0:
        hours += constants.HOURS_PER_DAY

    total = hours + minutes / constants.MINUTES_PER_HOUR
    # halves round up: 8.25 -> "8.3"
    rounded = Decimal(str(total)).quantize(_TENTH, rounding=ROUND_HALF_UP)
    # a 23h59m shift stays below a full day
    return constants.HOURS_FORMAT.format(min(rounded, constants.HOURS_PER_DAY - _TENTH))
