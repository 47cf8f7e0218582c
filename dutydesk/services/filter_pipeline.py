"""Tab, search and date-range filtering over a list of work items.

The three filters commute, and every pass keeps the input's relative order.
"""

import logging
from collections import Counter
from collections.abc import Iterable, Sequence
from datetime import date, datetime
from typing import Any, TypeVar

from pydantic import BaseModel, Field, field_validator

from dutydesk.core.calendar_math import parse_local_date
from dutydesk.core.date_range import DateRange, in_date_range
from dutydesk.core.errors import MalformedDateError
from dutydesk.domain.daily_duty import DailyDuty, DutyStatus
from dutydesk.domain.task import Task, TaskStatus


logger = logging.getLogger(__name__)

ItemT = TypeVar("ItemT", Task, DailyDuty)


class FilterConfig(BaseModel):
    """What a view currently shows. ``status=None`` means every tab."""

    status: str | None = Field(default=None, description="Selected status tab")
    search_query: str = Field(default="", description="Free-text search")
    date_range: DateRange = Field(default_factory=DateRange, description="Date window")

    @field_validator("status", mode="before")
    @classmethod
    def _known_tab(cls, value: Any) -> str | None:
        if value is None:
            return None
        if TaskStatus.from_label(value) is None and DutyStatus.from_label(value) is None:
            msg = f"Unknown status tab: {value!r}"
            raise ValueError(msg)
        return str(value)


def _tab_status(item: Task | DailyDuty, status: str) -> TaskStatus | DutyStatus | None:
    if isinstance(item, Task):
        return TaskStatus.from_label(status)
    return DutyStatus.from_label(status)


def matches_status(item: Task | DailyDuty, status: str | None) -> bool:
    """A tab that names the other kind's status (e.g. ACTIVE for a task) matches nothing."""
    if status is None:
        return True
    return item.status == _tab_status(item, status)


def matches_search(item: Task | DailyDuty, search_query: str) -> bool:
    query = search_query.strip().lower()
    if not query:
        return True
    return query in item.search_text()


def matches_date(item: Task | DailyDuty, date_range: DateRange, *, now: datetime | None = None) -> bool:
    return in_date_range(item.schedule_date, date_range, now=now, item_id=item.id)


def apply_filters(items: Iterable[ItemT], config: FilterConfig, *, now: datetime | None = None) -> list[ItemT]:
    """Keep the items that pass the status, search and date filters, in order."""
    return [
        item
        for item in items
        if matches_status(item, config.status)
        and matches_search(item, config.search_query)
        and matches_date(item, config.date_range, now=now)
    ]


def filter_tasks(tasks: Iterable[Task], config: FilterConfig, *, now: datetime | None = None) -> list[Task]:
    return apply_filters(tasks, config, now=now)


def filter_duties(duties: Iterable[DailyDuty], config: FilterConfig, *, now: datetime | None = None) -> list[DailyDuty]:
    return apply_filters(duties, config, now=now)


def count_by_status(items: Iterable[ItemT], config: FilterConfig, *, now: datetime | None = None) -> dict[str, int]:
    """Per-status counts over the search and date filters, ignoring the tab.

    Tab badges use this so their numbers follow the current search and window.
    """
    base = apply_filters(items, config.model_copy(update={"status": None}), now=now)
    return dict(Counter(str(item.status) for item in base))


def _sort_key(item: Task | DailyDuty) -> date:
    try:
        return parse_local_date(item.schedule_date)
    except MalformedDateError:
        return date.min


def sort_by_schedule_date(items: Sequence[ItemT], *, descending: bool = True) -> list[ItemT]:
    """Order by calendar day (newest first by default); unreadable dates go last.

    The sort is stable, so items on the same day keep their relative order.
    """
    dated = [item for item in items if _sort_key(item) != date.min]
    undated = [item for item in items if _sort_key(item) == date.min]
    return sorted(dated, key=_sort_key, reverse=descending) + undated
