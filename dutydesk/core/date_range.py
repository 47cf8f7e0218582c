"""Date-range predicate behind the all/today/week/month/custom filters."""

import logging
from datetime import date, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field, field_validator

from dutydesk.core.calendar_math import parse_local_date, today, week_bounds
from dutydesk.core.errors import MalformedDateError
from dutydesk.core.logging import log_with_context


logger = logging.getLogger(__name__)


class DateFilterMode(StrEnum):
    """Which calendar window a view is restricted to."""

    ALL = "all"
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"
    CUSTOM = "custom"


class DateRange(BaseModel):
    """A date filter selection; ``start``/``end`` only matter for CUSTOM.

    Bounds are parsed to calendar days when the range is built, so an
    unreadable bound fails here instead of on every filter pass.
    """

    mode: DateFilterMode = Field(default=DateFilterMode.ALL, description="Filter mode")
    start: date | None = Field(default=None, description="Inclusive custom start day")
    end: date | None = Field(default=None, description="Inclusive custom end day")

    @field_validator("start", "end", mode="before")
    @classmethod
    def _parse_bound(cls, value: Any) -> date | None:
        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        return parse_local_date(value)


def in_date_range(
    value: str | date | datetime | None,
    date_range: DateRange,
    *,
    now: datetime | None = None,
    item_id: str | None = None,
) -> bool:
    """Decide whether ``value`` falls inside the selected window.

    A value that cannot be parsed never matches a restricted window; the
    occurrence is logged instead of raised so one bad record cannot break a
    whole filter pass.
    """
    mode = date_range.mode
    if mode == DateFilterMode.ALL:
        return True
    # Permissive while the user is still picking bounds
    if mode == DateFilterMode.CUSTOM and (date_range.start is None or date_range.end is None):
        return True

    if value is None or (isinstance(value, str) and not value.strip()):
        logger.debug("Item %s has no date; excluded from %s view", item_id, mode)
        return False

    try:
        candidate = parse_local_date(value)
    except MalformedDateError:
        log_with_context(
            logger,
            "warning",
            "Excluding item with malformed date from date-filtered view",
            item_id=item_id,
            value=repr(value),
            mode=str(mode),
        )
        return False

    if mode == DateFilterMode.TODAY:
        return candidate == today(now)

    if mode == DateFilterMode.WEEK:
        week_start, week_end = week_bounds(now)
        return week_start <= candidate <= week_end

    if mode == DateFilterMode.MONTH:
        current = today(now)
        return candidate.year == current.year and candidate.month == current.month

    return date_range.start <= candidate <= date_range.end
