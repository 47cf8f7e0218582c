"""Special task domain models and enums."""

import logging
from datetime import datetime
from enum import StrEnum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from dutydesk.core.calendar_math import is_past_day
from dutydesk.core.errors import MalformedDateError


logger = logging.getLogger(__name__)


class TaskStatus(StrEnum):
    """Special task lifecycle state."""

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"

    @classmethod
    def from_label(cls, value: object) -> "TaskStatus | None":
        """Recognize the backend's assorted spellings; None when unrecognized."""
        text = str(value or "").strip().lower().replace("_", "-").replace(" ", "-")
        if text == "pending":
            return cls.PENDING
        if text in {"in-progress", "inprogress"}:
            return cls.IN_PROGRESS
        if text in {"completed", "complete", "done"}:
            return cls.COMPLETED
        return None

    @classmethod
    def coerce(cls, value: object) -> "TaskStatus":
        """Like ``from_label``, but anything unrecognized is pending."""
        return cls.from_label(value) or cls.PENDING


class TaskPriority(StrEnum):
    """How urgent a special task is."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Task(BaseModel):
    """Ad-hoc duty assigned to one employee."""

    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    id: str = Field(..., description="Task ID assigned by the backend")
    title: str = Field(
        default="Untitled Task",
        validation_alias=AliasChoices("title", "taskTitle"),
        description="Task title",
    )
    description: str = Field(default="", description="Detailed task description")
    priority: TaskPriority = Field(default=TaskPriority.LOW, description="high, medium or low")
    status: TaskStatus = Field(default=TaskStatus.PENDING, description="Current lifecycle state")
    assigned_to_employee_id: str = Field(
        default="",
        validation_alias=AliasChoices("assigned_to_employee_id", "assignedToEmpId", "empId", "assignedTo"),
        description="Employee the task is assigned to",
    )
    assigned_to_name: str = Field(
        default="",
        validation_alias=AliasChoices("assigned_to_name", "assignedToName", "assigneeName"),
        description="Display name of the assignee",
    )
    due_date: str | None = Field(
        default=None,
        validation_alias=AliasChoices("due_date", "dueDate"),
        description="Due day as delivered by the backend (YYYY-MM-DD)",
    )
    shift: str = Field(default="", description="Free-text shift label, e.g. 'Morning'")
    updated_at: str | None = Field(
        default=None,
        validation_alias=AliasChoices("updated_at", "updatedAt"),
        description="Backend version stamp, if supplied",
    )

    @field_validator("status", mode="before")
    @classmethod
    def _normalize_status(cls, value: Any) -> TaskStatus:
        return TaskStatus.coerce(value)

    @field_validator("priority", mode="before")
    @classmethod
    def _normalize_priority(cls, value: Any) -> str:
        text = str(value or "").strip().lower()
        return text if text in {priority.value for priority in TaskPriority} else TaskPriority.LOW

    @field_validator("title", "description", "shift", "assigned_to_employee_id", "assigned_to_name", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("title", mode="after")
    @classmethod
    def _default_title(cls, value: str) -> str:
        return value or "Untitled Task"

    @field_validator("due_date", "updated_at", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        return str(value)

    @property
    def schedule_date(self) -> str | None:
        """Date the filters and sorting work against."""
        return self.due_date

    def is_overdue(self, *, now: datetime | None = None) -> bool:
        """Not completed and due on a calendar day before today."""
        if self.status == TaskStatus.COMPLETED or not self.due_date:
            return False
        try:
            return is_past_day(self.due_date, now=now)
        except MalformedDateError:
            logger.warning("Task %s has malformed due date %r", self.id, self.due_date)
            return False

    def search_text(self) -> str:
        """Lower-cased concatenation of every user-visible field."""
        parts = [
            self.title,
            self.description,
            self.assigned_to_name,
            self.assigned_to_employee_id,
            self.shift,
            self.priority,
            self.due_date,
            self.status,
        ]
        return " ".join(str(part) for part in parts if part).lower()
