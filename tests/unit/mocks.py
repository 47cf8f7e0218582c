"""Pure Python in-memory backend for unit testing."""

import copy
from typing import Any

from dutydesk.core.errors import TransportError
from dutydesk.domain.daily_duty import DailyDuty, DutyStatus
from dutydesk.domain.task import Task, TaskStatus


class InMemoryWorkItemStore:
    """In-memory stand-in for the backend collaborator.

    Holds raw task and duty records the way the REST API returns them and
    implements the WorkItemStore protocol. Set ``fail_writes`` to make every
    status update raise TransportError, mimicking a rejected request.
    """

    def __init__(self) -> None:
        self.tasks: dict[str, dict[str, Any]] = {}
        self.duties: dict[str, dict[str, Any]] = {}
        self.fail_writes = False
        self.task_updates: list[tuple[str, str]] = []
        self.duty_updates: list[tuple[str, str]] = []
        self.fetch_calls: list[dict[str, Any]] = []

    def add_task(self, record: dict[str, Any]) -> None:
        self.tasks[str(record["id"])] = copy.deepcopy(record)

    def add_duty(self, record: dict[str, Any]) -> None:
        self.duties[str(record["id"])] = copy.deepcopy(record)

    async def fetch_tasks(
        self, *, org_id: str, employee_id: str | None = None, status: TaskStatus | None = None
    ) -> list[Task]:
        self.fetch_calls.append({"kind": "tasks", "org_id": org_id, "employee_id": employee_id, "status": status})
        records = [Task.model_validate(r) for r in self.tasks.values()]
        if employee_id is not None:
            records = [t for t in records if t.assigned_to_employee_id == employee_id]
        if status is not None:
            records = [t for t in records if t.status == status]
        return records

    async def fetch_daily_duties(self, *, org_id: str, employee_id: str | None = None) -> list[DailyDuty]:
        self.fetch_calls.append({"kind": "duties", "org_id": org_id, "employee_id": employee_id})
        records = [DailyDuty.model_validate(r) for r in self.duties.values()]
        if employee_id is not None:
            records = [d for d in records if d.employee_id == employee_id]
        return records

    async def update_task_status(self, *, org_id: str, task_id: str, new_status: TaskStatus) -> None:
        if self.fail_writes:
            raise TransportError(f"PUT task {task_id} rejected", status_code=500)
        if task_id not in self.tasks:
            raise TransportError(f"Task {task_id} not found", status_code=404)
        self.tasks[task_id]["status"] = str(new_status)
        self.task_updates.append((task_id, str(new_status)))

    async def update_daily_duty_status(self, *, org_id: str, duty_id: str, new_status: DutyStatus) -> None:
        if self.fail_writes:
            raise TransportError(f"PUT duty {duty_id} rejected", status_code=500)
        if duty_id not in self.duties:
            raise TransportError(f"Duty {duty_id} not found", status_code=404)
        self.duties[duty_id]["status"] = str(new_status)
        self.duty_updates.append((duty_id, str(new_status)))
