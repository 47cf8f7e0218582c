"""View-level state for the special-task and daily-duty screens.

A board owns the in-memory copy of one view's work items, the current filter
selection and the page position. It is the caller of the pure pieces:

- filter changes go through setters that reset the page to 0;
- status changes run propose -> persist -> commit, so the cached list only
  changes after the backend accepts the write.

The cache is rebuilt from the backend on every ``refresh``.
"""

import logging
from datetime import date, datetime
from typing import Generic, TypeVar

from dutydesk.core.date_range import DateFilterMode, DateRange
from dutydesk.core.logging import log_with_context, span
from dutydesk.domain.daily_duty import DailyDuty, DutyStatus
from dutydesk.domain.task import Task, TaskStatus
from dutydesk.interface.backend_client import WorkItemStore
from dutydesk.models.service_models import DutySummary, Page, TaskSummary, TransitionProposal
from dutydesk.services import analytics_service, duty_state_machine, filter_pipeline, transition_service
from dutydesk.services.filter_pipeline import FilterConfig
from dutydesk.services.paginator import PageState


logger = logging.getLogger(__name__)

ItemT = TypeVar("ItemT", Task, DailyDuty)


class _Board(Generic[ItemT]):
    """Shared filter/page handling for both boards."""

    default_tab: str | None = None

    def __init__(
        self,
        *,
        store: WorkItemStore,
        org_id: str,
        employee_id: str | None = None,
        page_size: int | None = None,
        config: FilterConfig | None = None,
    ) -> None:
        self.store = store
        self.org_id = org_id
        self.employee_id = employee_id
        self.items: list[ItemT] = []
        self.config = config or FilterConfig(status=self.default_tab)
        self.pages = PageState(page_size=page_size)
        self._in_flight: set[str] = set()

    def _update_config(self, **changes: object) -> None:
        # rebuilt rather than copied so the new values are validated
        self.config = FilterConfig(**{**dict(self.config), **changes})
        self.pages.reset()

    def select_tab(self, status: str | None) -> None:
        self._update_config(status=status)

    def search(self, query: str) -> None:
        self._update_config(search_query=query)

    def filter_dates(
        self,
        mode: DateFilterMode | str,
        *,
        start: date | str | None = None,
        end: date | str | None = None,
    ) -> None:
        self._update_config(date_range=DateRange(mode=DateFilterMode(mode), start=start, end=end))

    def set_page_size(self, page_size: int) -> None:
        self.pages.set_page_size(page_size)

    def filtered(self, *, now: datetime | None = None) -> list[ItemT]:
        return filter_pipeline.apply_filters(self.items, self.config, now=now)

    def visible(self, *, now: datetime | None = None) -> Page[ItemT]:
        """The current page of the filtered list."""
        return self.pages.slice(self.filtered(now=now))

    def next_page(self, *, now: datetime | None = None) -> Page[ItemT]:
        self.pages.next(len(self.filtered(now=now)))
        return self.visible(now=now)

    def previous_page(self, *, now: datetime | None = None) -> Page[ItemT]:
        self.pages.previous()
        return self.visible(now=now)

    def tab_counts(self, *, now: datetime | None = None) -> dict[str, int]:
        return filter_pipeline.count_by_status(self.items, self.config, now=now)

    def get(self, item_id: str) -> ItemT:
        for item in self.items:
            if item.id == item_id:
                return item
        msg = f"Item {item_id} is not loaded on this board"
        raise KeyError(msg)

    def _replace_items(self, items: list[ItemT]) -> None:
        self.items = items
        self.pages.reset()

    async def _commit(self, proposal: TransitionProposal, persist: transition_service.Persist) -> ItemT:
        """Commit ``proposal``; a repeat request while the first is still being written is dropped."""
        if proposal.item_id in self._in_flight:
            logger.info("Status update for item %s already in flight; ignoring duplicate", proposal.item_id)
            return self.get(proposal.item_id)

        self._in_flight.add(proposal.item_id)
        try:
            committed = await transition_service.commit_transition(self.items, proposal, persist)
        except Exception:
            log_with_context(
                logger, "error", "Status update failed", item_id=proposal.item_id, org_id=self.org_id
            )
            raise
        finally:
            self._in_flight.discard(proposal.item_id)
        # the item usually leaves the current tab, so the filtered length changes
        if proposal.changed:
            self.pages.reset()
        return committed  # type: ignore[return-value]


class TaskBoard(_Board[Task]):
    """Special tasks for one employee, or a whole organization."""

    default_tab = TaskStatus.PENDING

    async def refresh(self) -> list[Task]:
        with span("board_service.task_board.refresh", org_id=self.org_id):
            if self.employee_id is None:
                tasks = await self.store.fetch_tasks(org_id=self.org_id)
            else:
                tasks = []
                for status in TaskStatus:
                    tasks.extend(
                        await self.store.fetch_tasks(org_id=self.org_id, employee_id=self.employee_id, status=status)
                    )
            self._replace_items(tasks)
            return tasks

    def summary(self, *, now: datetime | None = None) -> TaskSummary:
        return analytics_service.summarize_tasks(self.items, now=now)

    async def change_status(self, task_id: str, new_status: TaskStatus | str, *, allow_skip: bool | None = None) -> Task:
        """Validate, persist, then apply a task status change."""
        task = self.get(task_id)
        proposal = transition_service.propose_transition(task, new_status, allow_skip=allow_skip)
        target = TaskStatus.coerce(new_status)

        async def persist() -> None:
            await self.store.update_task_status(org_id=self.org_id, task_id=task_id, new_status=target)

        return await self._commit(proposal, persist)

    async def start(self, task_id: str) -> Task:
        return await self.change_status(task_id, TaskStatus.IN_PROGRESS)

    async def complete(self, task_id: str) -> Task:
        return await self.change_status(task_id, TaskStatus.COMPLETED)


class DutyBoard(_Board[DailyDuty]):
    """Daily duties for one employee, or a whole organization."""

    default_tab = DutyStatus.SCHEDULED

    async def refresh(self) -> list[DailyDuty]:
        with span("board_service.duty_board.refresh", org_id=self.org_id):
            duties = await self.store.fetch_daily_duties(org_id=self.org_id, employee_id=self.employee_id)
            self._replace_items(duties)
            return duties

    def summary(self) -> DutySummary:
        return analytics_service.summarize_duties(self.items)

    def can_start(self, duty_id: str, *, now: datetime | None = None) -> bool:
        return duty_state_machine.can_start(self.get(duty_id), now=now)

    async def change_status(
        self,
        duty_id: str,
        new_status: DutyStatus | str,
        *,
        now: datetime | None = None,
        confirm: duty_state_machine.ConfirmHook | None = None,
    ) -> DailyDuty:
        """Validate, persist, then apply a duty status change.

        Guard failures (future date, declined confirmation) raise before any
        request is sent.
        """
        duty = self.get(duty_id)
        proposal = transition_service.propose_transition(duty, new_status, now=now, confirm=confirm)
        target = DutyStatus.coerce(new_status)

        async def persist() -> None:
            await self.store.update_daily_duty_status(org_id=self.org_id, duty_id=duty_id, new_status=target)

        return await self._commit(proposal, persist)

    async def start(self, duty_id: str, *, now: datetime | None = None) -> DailyDuty:
        return await self.change_status(duty_id, DutyStatus.ACTIVE, now=now)

    async def complete(self, duty_id: str, *, confirm: duty_state_machine.ConfirmHook | None = None) -> DailyDuty:
        return await self.change_status(duty_id, DutyStatus.COMPLETED, confirm=confirm)

    async def cancel(self, duty_id: str) -> DailyDuty:
        return await self.change_status(duty_id, DutyStatus.CANCELLED)
