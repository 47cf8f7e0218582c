"""Two-phase status changes: propose a new value, commit it after the write succeeds.

The state machines are pure; this module is the seam where a proposed status
meets the backend. Local state is only replaced after ``persist`` returns, so a
rejected write never leaves the in-memory list out of step with the backend.
"""

import logging
from collections.abc import Awaitable, Callable, MutableSequence
from datetime import datetime

from dutydesk.core.errors import StaleTransitionError
from dutydesk.core.logging import span
from dutydesk.domain.daily_duty import DailyDuty, DutyStatus
from dutydesk.domain.task import Task, TaskStatus
from dutydesk.models.service_models import TransitionProposal
from dutydesk.services import duty_state_machine, task_state_machine


logger = logging.getLogger(__name__)

Persist = Callable[[], Awaitable[object]]


def propose_transition(
    item: Task | DailyDuty,
    new_status: TaskStatus | DutyStatus | str,
    *,
    now: datetime | None = None,
    confirm: duty_state_machine.ConfirmHook | None = None,
    allow_skip: bool | None = None,
) -> TransitionProposal:
    """Validate a status change and return the value the item would become.

    Raises InvalidTransitionError, FutureDateError or ConfirmationDeclinedError
    without touching ``item``.
    """
    if isinstance(item, Task):
        proposed: Task | DailyDuty = task_state_machine.transition_task(item, new_status, allow_skip=allow_skip)
    else:
        proposed = duty_state_machine.transition_duty(item, new_status, now=now, confirm=confirm)
    return TransitionProposal(original=item, proposed=proposed, changed=proposed is not item)


def _index_of(items: MutableSequence[Task] | MutableSequence[DailyDuty], item_id: str) -> int:
    for index, item in enumerate(items):
        if item.id == item_id:
            return index
    msg = f"Item {item_id} is no longer loaded"
    raise StaleTransitionError(msg)


async def commit_transition(
    items: MutableSequence[Task] | MutableSequence[DailyDuty],
    proposal: TransitionProposal,
    persist: Persist,
) -> Task | DailyDuty:
    """Persist a proposal, then swap the proposed value into ``items``.

    If the loaded item already has the proposed status, it is returned as-is
    without calling ``persist``. If its status or version stamp moved since the
    proposal was made, StaleTransitionError is raised before any write. Errors
    from ``persist`` propagate and ``items`` is left untouched.
    """
    with span("transition_service.commit_transition", item_id=proposal.item_id):
        index = _index_of(items, proposal.item_id)
        current = items[index]

        if current.status == proposal.proposed.status:
            logger.debug("Item %s already has status %s; skipping write", proposal.item_id, current.status)
            return current

        if current.status != proposal.original.status:
            msg = (
                f"Item {proposal.item_id} moved to {current.status} since the transition "
                f"from {proposal.original.status} was proposed"
            )
            raise StaleTransitionError(msg)

        if proposal.original.updated_at and current.updated_at != proposal.original.updated_at:
            msg = f"Item {proposal.item_id} changed since the transition was proposed"
            raise StaleTransitionError(msg)

        await persist()

        items[index] = proposal.proposed  # type: ignore[assignment]
        logger.info("Committed status %s for item %s", proposal.proposed.status, proposal.item_id)
        return proposal.proposed
