"""Pydantic models for service layer return types.

These models give type safety at service boundaries: pages handed to the UI,
status counters, and proposed lifecycle transitions.
"""

from typing import Generic, TypeVar

from pydantic import BaseModel

from dutydesk.domain.daily_duty import DailyDuty
from dutydesk.domain.task import Task


ItemT = TypeVar("ItemT")


class Page(BaseModel, Generic[ItemT]):
    """One slice of a filtered collection."""

    items: list[ItemT]
    page_index: int
    page_size: int
    total_items: int
    total_pages: int

    @property
    def has_previous(self) -> bool:
        return self.page_index > 0

    @property
    def has_next(self) -> bool:
        return self.page_index < self.total_pages - 1


class TaskSummary(BaseModel):
    """Status counters for a set of special tasks."""

    total: int
    pending: int
    in_progress: int
    completed: int
    overdue: int


class DutySummary(BaseModel):
    """Status counters for a set of daily duties."""

    total: int
    scheduled: int
    active: int
    completed: int
    cancelled: int


class TransitionProposal(BaseModel):
    """Result of the pure half of a two-phase status change.

    ``proposed`` is what the item becomes once the backend confirms the write;
    ``changed`` is False when the item already had the requested status.
    """

    original: Task | DailyDuty
    proposed: Task | DailyDuty
    changed: bool

    @property
    def item_id(self) -> str:
        return self.original.id
