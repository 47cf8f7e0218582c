"""Pure state transition functions for daily duty lifecycle management."""

import logging
from collections.abc import Callable
from datetime import datetime

from dutydesk.core.calendar_math import is_future_day
from dutydesk.core.config import settings
from dutydesk.core.errors import (
    ConfirmationDeclinedError,
    FutureDateError,
    InvalidTransitionError,
    MalformedDateError,
)
from dutydesk.core.logging import span
from dutydesk.domain.daily_duty import DailyDuty, DutyStatus


logger = logging.getLogger(__name__)

ConfirmHook = Callable[[DailyDuty], bool]


DUTY_TRANSITIONS: dict[DutyStatus, set[DutyStatus]] = {
    DutyStatus.SCHEDULED: {DutyStatus.ACTIVE, DutyStatus.CANCELLED},
    DutyStatus.ACTIVE: {DutyStatus.COMPLETED, DutyStatus.CANCELLED},
    DutyStatus.COMPLETED: set(),
    DutyStatus.CANCELLED: set(),
}


def can_start(duty: DailyDuty, *, now: datetime | None = None) -> bool:
    """Whether the start action should be offered for ``duty``.

    A duty with an unreadable date is not startable; starting it would raise
    MalformedDateError.
    """
    if duty.status != DutyStatus.SCHEDULED:
        return False
    try:
        return not _is_scheduled_later(duty, now=now)
    except MalformedDateError:
        return False


def _is_scheduled_later(duty: DailyDuty, *, now: datetime | None) -> bool:
    if not duty.duty_date:
        return False
    return is_future_day(duty.duty_date, now=now)


def transition_duty(
    duty: DailyDuty,
    new_status: DutyStatus | str,
    *,
    now: datetime | None = None,
    confirm: ConfirmHook | None = None,
) -> DailyDuty:
    """Return ``duty`` moved to ``new_status``.

    Guards:
    - SCHEDULED -> ACTIVE fails with FutureDateError when the duty's calendar
      day is after today.
    - ACTIVE -> COMPLETED asks ``confirm`` first (when supplied and enabled in
      settings) and fails with ConfirmationDeclinedError if it says no.

    Re-applying the current status returns the duty unchanged.
    """
    target = DutyStatus.coerce(new_status)

    with span("duty_state_machine.transition_duty", duty_id=duty.id, target=str(target)):
        if duty.status == target:
            logger.debug("Duty %s already %s; nothing to do", duty.id, target)
            return duty

        if target not in DUTY_TRANSITIONS[duty.status]:
            raise InvalidTransitionError(current=duty.status, requested=target, item_id=duty.id)

        if target == DutyStatus.ACTIVE and _is_scheduled_later(duty, now=now):
            raise FutureDateError(duty_date=duty.duty_date or "", duty_id=duty.id)

        if target == DutyStatus.COMPLETED and confirm is not None and settings.require_completion_confirmation:
            if not confirm(duty):
                logger.info("Completion of duty %s declined at confirmation", duty.id)
                raise ConfirmationDeclinedError(f"Completion of duty {duty.id} was not confirmed")

        logger.info("Transitioned duty %s from %s to %s", duty.id, duty.status, target)
        return duty.model_copy(update={"status": target})


def start_duty(duty: DailyDuty, *, now: datetime | None = None) -> DailyDuty:
    """SCHEDULED -> ACTIVE, refused for duties dated after today."""
    return transition_duty(duty, DutyStatus.ACTIVE, now=now)


def complete_duty(duty: DailyDuty, *, confirm: ConfirmHook | None = None) -> DailyDuty:
    """ACTIVE -> COMPLETED, optionally behind a confirmation prompt."""
    return transition_duty(duty, DutyStatus.COMPLETED, confirm=confirm)


def cancel_duty(duty: DailyDuty) -> DailyDuty:
    """SCHEDULED or ACTIVE -> CANCELLED."""
    return transition_duty(duty, DutyStatus.CANCELLED)
