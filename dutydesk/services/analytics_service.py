"""Status counters shown above the duty and task lists.

- Task summary: pending / in-progress / completed, plus overdue (not completed
  and due before today).
- Duty summary: scheduled / active / completed / cancelled. Duties ingested
  without a status were already normalized to SCHEDULED by the model.
"""

import logging
from collections import Counter
from collections.abc import Iterable
from datetime import datetime

from dutydesk.core.logging import span
from dutydesk.domain.daily_duty import DailyDuty, DutyStatus
from dutydesk.domain.task import Task, TaskStatus
from dutydesk.models.service_models import DutySummary, TaskSummary


logger = logging.getLogger(__name__)


def summarize_tasks(tasks: Iterable[Task], *, now: datetime | None = None) -> TaskSummary:
    """Count tasks per status and how many are overdue."""
    with span("analytics_service.summarize_tasks"):
        task_list = list(tasks)
        counts = Counter(task.status for task in task_list)
        overdue = sum(1 for task in task_list if task.is_overdue(now=now))
        return TaskSummary(
            total=len(task_list),
            pending=counts[TaskStatus.PENDING],
            in_progress=counts[TaskStatus.IN_PROGRESS],
            completed=counts[TaskStatus.COMPLETED],
            overdue=overdue,
        )


def summarize_duties(duties: Iterable[DailyDuty]) -> DutySummary:
    """Count duties per status."""
    with span("analytics_service.summarize_duties"):
        duty_list = list(duties)
        counts = Counter(duty.status for duty in duty_list)
        return DutySummary(
            total=len(duty_list),
            scheduled=counts[DutyStatus.SCHEDULED],
            active=counts[DutyStatus.ACTIVE],
            completed=counts[DutyStatus.COMPLETED],
            cancelled=counts[DutyStatus.CANCELLED],
        )


def overdue_tasks(tasks: Iterable[Task], *, now: datetime | None = None) -> list[Task]:
    """Tasks past their due day and not completed, in input order."""
    return [task for task in tasks if task.is_overdue(now=now)]
