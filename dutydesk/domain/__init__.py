"""Domain models and DTOs."""

from dutydesk.domain.catalog import Catalog, Gun, Product
from dutydesk.domain.daily_duty import DailyDuty, DutyStatus, PumpAssignment
from dutydesk.domain.task import Task, TaskPriority, TaskStatus


WorkItem = Task | DailyDuty


__all__ = [
    "Catalog",
    "DailyDuty",
    "DutyStatus",
    "Gun",
    "Product",
    "PumpAssignment",
    "Task",
    "TaskPriority",
    "TaskStatus",
    "WorkItem",
]
