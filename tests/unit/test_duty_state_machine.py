"""Unit tests for duty_state_machine module."""

from datetime import datetime

import pytest

from dutydesk.core.config import settings
from dutydesk.core.errors import ConfirmationDeclinedError, FutureDateError, InvalidTransitionError
from dutydesk.domain.daily_duty import DailyDuty, DutyStatus
from dutydesk.services.duty_state_machine import (
    DUTY_TRANSITIONS,
    can_start,
    cancel_duty,
    complete_duty,
    start_duty,
    transition_duty,
)


def _duty(make_duty, **overrides) -> DailyDuty:
    return DailyDuty.model_validate(make_duty(**overrides))


@pytest.mark.unit
class TestTransitionTable:
    """Tests for DUTY_TRANSITIONS."""

    def test_terminal_states(self):
        assert DUTY_TRANSITIONS[DutyStatus.COMPLETED] == set()
        assert DUTY_TRANSITIONS[DutyStatus.CANCELLED] == set()

    def test_every_status_has_an_entry(self):
        assert set(DUTY_TRANSITIONS) == set(DutyStatus)


@pytest.mark.unit
class TestStartDuty:
    """Tests for start_duty and can_start."""

    def test_start_today(self, make_duty, now):
        duty = _duty(make_duty, dutyDate="2024-01-10")

        result = start_duty(duty, now=now)

        assert result.status == DutyStatus.ACTIVE
        assert duty.status == DutyStatus.SCHEDULED

    def test_start_late_in_the_day(self, make_duty):
        duty = _duty(make_duty, dutyDate="2024-01-10")
        assert start_duty(duty, now=datetime(2024, 1, 10, 23, 59)).status == DutyStatus.ACTIVE

    def test_start_past_duty_allowed(self, make_duty, now):
        assert start_duty(_duty(make_duty, dutyDate="2024-01-02"), now=now).status == DutyStatus.ACTIVE

    def test_start_tomorrow_refused(self, make_duty, now):
        duty = _duty(make_duty, dutyDate="2024-01-11")

        with pytest.raises(FutureDateError) as exc_info:
            start_duty(duty, now=now)

        assert exc_info.value.duty_date == "2024-01-11"
        assert duty.status == DutyStatus.SCHEDULED

    def test_start_iso_timestamp_today(self, make_duty, now):
        duty = _duty(make_duty, dutyDate="2024-01-10T00:00:00")
        assert start_duty(duty, now=now).status == DutyStatus.ACTIVE

    def test_can_start_today(self, make_duty, now):
        assert can_start(_duty(make_duty), now=now) is True

    def test_can_start_false_for_future(self, make_duty, now):
        assert can_start(_duty(make_duty, dutyDate="2024-02-01"), now=now) is False

    def test_can_start_false_when_not_scheduled(self, make_duty, now):
        assert can_start(_duty(make_duty, status="ACTIVE"), now=now) is False

    def test_can_start_false_for_malformed_date(self, make_duty, now):
        assert can_start(_duty(make_duty, dutyDate="soon"), now=now) is False


@pytest.mark.unit
class TestCompleteDuty:
    """Tests for complete_duty."""

    def test_complete_active(self, make_duty):
        assert complete_duty(_duty(make_duty, status="ACTIVE")).status == DutyStatus.COMPLETED

    def test_complete_scheduled_rejected(self, make_duty):
        with pytest.raises(InvalidTransitionError):
            complete_duty(_duty(make_duty))

    def test_confirmation_accepted(self, make_duty):
        seen = []

        result = complete_duty(_duty(make_duty, status="ACTIVE"), confirm=lambda d: seen.append(d.id) or True)

        assert result.status == DutyStatus.COMPLETED
        assert seen == ["d1"]

    def test_confirmation_declined(self, make_duty):
        duty = _duty(make_duty, status="ACTIVE")

        with pytest.raises(ConfirmationDeclinedError):
            complete_duty(duty, confirm=lambda _: False)

        assert duty.status == DutyStatus.ACTIVE

    def test_confirmation_disabled_in_settings(self, make_duty, monkeypatch):
        monkeypatch.setattr(settings, "require_completion_confirmation", False)

        result = complete_duty(_duty(make_duty, status="ACTIVE"), confirm=lambda _: False)

        assert result.status == DutyStatus.COMPLETED


@pytest.mark.unit
class TestOtherTransitions:
    """Tests for cancellation, reversal and idempotence."""

    @pytest.mark.parametrize("status", ["SCHEDULED", "ACTIVE"])
    def test_cancel_open_duty(self, make_duty, status):
        assert cancel_duty(_duty(make_duty, status=status)).status == DutyStatus.CANCELLED

    def test_cancel_future_duty_allowed(self, make_duty, now):
        assert cancel_duty(_duty(make_duty, dutyDate="2030-01-01")).status == DutyStatus.CANCELLED

    def test_cancel_completed_duty_rejected(self, make_duty):
        with pytest.raises(InvalidTransitionError):
            cancel_duty(_duty(make_duty, status="COMPLETED"))

    def test_cancel_cancelled_duty_is_noop(self, make_duty):
        duty = _duty(make_duty, status="CANCELLED")
        assert cancel_duty(duty) is duty

    @pytest.mark.parametrize("target", [DutyStatus.SCHEDULED, DutyStatus.ACTIVE, DutyStatus.COMPLETED])
    def test_cancelled_is_terminal(self, make_duty, target, now):
        with pytest.raises(InvalidTransitionError):
            transition_duty(_duty(make_duty, status="CANCELLED"), target, now=now)

    def test_completed_cannot_reactivate(self, make_duty, now):
        with pytest.raises(InvalidTransitionError):
            transition_duty(_duty(make_duty, status="COMPLETED"), DutyStatus.ACTIVE, now=now)

    def test_active_cannot_return_to_scheduled(self, make_duty):
        with pytest.raises(InvalidTransitionError):
            transition_duty(_duty(make_duty, status="ACTIVE"), DutyStatus.SCHEDULED)

    def test_same_status_is_noop(self, make_duty):
        duty = _duty(make_duty, status="ACTIVE")
        assert transition_duty(duty, "ACTIVE") is duty

    def test_same_status_skips_future_guard(self, make_duty, now):
        duty = _duty(make_duty, status="ACTIVE", dutyDate="2030-01-01")
        assert transition_duty(duty, DutyStatus.ACTIVE, now=now) is duty

    def test_lowercase_target_accepted(self, make_duty, now):
        assert transition_duty(_duty(make_duty), "active", now=now).status == DutyStatus.ACTIVE
