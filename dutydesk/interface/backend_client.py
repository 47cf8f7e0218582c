"""REST client for the fuel-station backend that owns tasks, duties, products and guns.

The client only moves records; it never retries. Any network failure or
non-2xx response surfaces as TransportError for the caller to present.
"""

import asyncio
import logging
from typing import Any, Protocol, TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ValidationError

from dutydesk.core.config import constants, settings
from dutydesk.core.errors import TransportError
from dutydesk.core.logging import span
from dutydesk.domain.catalog import Gun, Product
from dutydesk.domain.daily_duty import DailyDuty, DutyStatus
from dutydesk.domain.task import Task, TaskStatus


logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class WorkItemStore(Protocol):
    """Operations the boards need from whatever persists work items."""

    async def fetch_tasks(
        self, *, org_id: str, employee_id: str | None = None, status: TaskStatus | None = None
    ) -> list[Task]: ...

    async def fetch_daily_duties(self, *, org_id: str, employee_id: str | None = None) -> list[DailyDuty]: ...

    async def update_task_status(self, *, org_id: str, task_id: str, new_status: TaskStatus) -> None: ...

    async def update_daily_duty_status(self, *, org_id: str, duty_id: str, new_status: DutyStatus) -> None: ...


def _parse_records(model: type[ModelT], body: Any, *, extra: dict[str, Any] | None = None) -> list[ModelT]:
    """Validate each record, skipping (and logging) any that do not fit the model."""
    if not isinstance(body, list):
        logger.warning("Expected a list of %s records, got %s", model.__name__, type(body).__name__)
        return []

    records: list[ModelT] = []
    for raw in body:
        if not isinstance(raw, dict):
            logger.warning("Skipping non-object %s record: %r", model.__name__, raw)
            continue
        try:
            records.append(model.model_validate({**raw, **(extra or {})}))
        except ValidationError as e:
            logger.warning("Skipping invalid %s record %s: %s", model.__name__, raw.get("id"), e)
    return records


class BackendClient:
    """Async client for the organization-scoped REST endpoints."""

    def __init__(
        self,
        *,
        base_url: str | None = None,
        token: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self._token = token if token is not None else settings.api_token
        self._timeout = timeout or settings.api_timeout_seconds
        self._transport = transport

    def _org_url(self, org_id: str, path: str) -> str:
        return f"{self.base_url}/api/organizations/{quote(org_id, safe='')}{path}"

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    async def _request(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
    ) -> httpx.Response:
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.request(method, url, params=params, json=json, headers=self._headers())
        except httpx.HTTPError as e:
            msg = f"{method} {url} failed: {e!s}"
            raise TransportError(msg) from e

        if response.status_code >= constants.HTTP_CLIENT_ERROR_START:
            msg = f"{method} {url} returned {response.status_code}: {response.text}"
            raise TransportError(msg, status_code=response.status_code)
        return response

    async def _get_list(self, url: str, *, params: dict[str, str] | None = None) -> Any:
        response = await self._request("GET", url, params=params)
        try:
            return response.json()
        except ValueError:
            logger.warning("GET %s returned a non-JSON body", url)
            return []

    async def fetch_tasks(
        self, *, org_id: str, employee_id: str | None = None, status: TaskStatus | None = None
    ) -> list[Task]:
        """Fetch an organization's tasks, or one employee's.

        The per-employee endpoint filters by status but may omit it from the
        records, so fetched records are tagged with the requested status.
        """
        with span("backend_client.fetch_tasks", org_id=org_id, employee_id=employee_id):
            if employee_id is None:
                body = await self._get_list(self._org_url(org_id, "/tasks"))
                return _parse_records(Task, body)

            url = self._org_url(org_id, f"/tasks/employee/{employee_id}")
            params = {"status": str(status) if status else ""}
            body = await self._get_list(url, params=params)
            return _parse_records(Task, body, extra={"status": status} if status else None)

    async def fetch_employee_tasks(self, *, org_id: str, employee_id: str) -> list[Task]:
        """All of one employee's tasks, fetched per status concurrently."""
        batches = await asyncio.gather(
            *(self.fetch_tasks(org_id=org_id, employee_id=employee_id, status=status) for status in TaskStatus)
        )
        return [task for batch in batches for task in batch]

    async def fetch_daily_duties(self, *, org_id: str, employee_id: str | None = None) -> list[DailyDuty]:
        with span("backend_client.fetch_daily_duties", org_id=org_id, employee_id=employee_id):
            path = f"/employee-duties/employee/{employee_id}" if employee_id else "/employee-duties"
            body = await self._get_list(self._org_url(org_id, path))
            return _parse_records(DailyDuty, body)

    async def update_task_status(self, *, org_id: str, task_id: str, new_status: TaskStatus) -> None:
        with span("backend_client.update_task_status", org_id=org_id, task_id=task_id):
            url = self._org_url(org_id, f"/tasks/{task_id}/status")
            await self._request("PUT", url, params={"status": str(new_status)})
            logger.info("Persisted task %s status %s", task_id, new_status)

    async def update_daily_duty_status(self, *, org_id: str, duty_id: str, new_status: DutyStatus) -> None:
        with span("backend_client.update_daily_duty_status", org_id=org_id, duty_id=duty_id):
            url = self._org_url(org_id, f"/employee-duties/{duty_id}")
            await self._request("PUT", url, json={"status": str(new_status)})
            logger.info("Persisted duty %s status %s", duty_id, new_status)

    async def fetch_products(self, *, org_id: str) -> list[Product]:
        with span("backend_client.fetch_products", org_id=org_id):
            body = await self._get_list(self._org_url(org_id, "/products"))
            return _parse_records(Product, body)

    async def fetch_guns(self, *, org_id: str) -> list[Gun]:
        with span("backend_client.fetch_guns", org_id=org_id):
            body = await self._get_list(self._org_url(org_id, "/guninfo"))
            return _parse_records(Gun, body)
