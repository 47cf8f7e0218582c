"""Pure state transition functions for special task lifecycle management."""

import logging

from dutydesk.core.config import settings
from dutydesk.core.errors import InvalidTransitionError
from dutydesk.core.logging import span
from dutydesk.domain.task import Task, TaskStatus


logger = logging.getLogger(__name__)


# Allowed transitions by machine variant
STRICT_TASK_TRANSITIONS: dict[TaskStatus, set[TaskStatus]] = {
    TaskStatus.PENDING: {TaskStatus.IN_PROGRESS},
    TaskStatus.IN_PROGRESS: {TaskStatus.COMPLETED},
    TaskStatus.COMPLETED: set(),
}

PERMISSIVE_TASK_TRANSITIONS: dict[TaskStatus, set[TaskStatus]] = {
    TaskStatus.PENDING: {TaskStatus.IN_PROGRESS, TaskStatus.COMPLETED},
    TaskStatus.IN_PROGRESS: {TaskStatus.COMPLETED},
    TaskStatus.COMPLETED: set(),
}


def get_transitions(*, allow_skip: bool) -> dict[TaskStatus, set[TaskStatus]]:
    """Get allowed state transitions for the configured machine."""
    if allow_skip:
        return PERMISSIVE_TASK_TRANSITIONS
    return STRICT_TASK_TRANSITIONS


def transition_task(task: Task, new_status: TaskStatus | str, *, allow_skip: bool | None = None) -> Task:
    """Return ``task`` moved to ``new_status``.

    Re-applying the current status returns the task unchanged. Skipping
    in-progress is only accepted by the permissive machine and is logged.
    """
    target = TaskStatus.coerce(new_status)
    skip_allowed = settings.allow_task_skip if allow_skip is None else allow_skip

    with span("task_state_machine.transition_task", task_id=task.id, target=str(target)):
        if task.status == target:
            logger.debug("Task %s already %s; nothing to do", task.id, target)
            return task

        allowed = get_transitions(allow_skip=skip_allowed)[task.status]
        if target not in allowed:
            raise InvalidTransitionError(current=task.status, requested=target, item_id=task.id)

        if task.status == TaskStatus.PENDING and target == TaskStatus.COMPLETED:
            logger.warning("Task %s completed without passing through in-progress", task.id)

        logger.info("Transitioned task %s from %s to %s", task.id, task.status, target)
        return task.model_copy(update={"status": target})


def start_task(task: Task) -> Task:
    """pending -> in-progress."""
    return transition_task(task, TaskStatus.IN_PROGRESS)


def complete_task(task: Task) -> Task:
    """in-progress -> completed."""
    if task.status == TaskStatus.PENDING:
        raise InvalidTransitionError(current=task.status, requested=TaskStatus.COMPLETED, item_id=task.id)
    return transition_task(task, TaskStatus.COMPLETED)


def complete_task_directly(task: Task, *, allow_skip: bool | None = None) -> Task:
    """pending -> completed, skipping in-progress (permissive machine only)."""
    return transition_task(task, TaskStatus.COMPLETED, allow_skip=allow_skip)
