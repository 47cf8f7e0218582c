"""Pytest configuration and fixtures for unit tests."""

from collections.abc import Callable
from typing import Any

import pytest

from tests.unit.mocks import InMemoryWorkItemStore


@pytest.fixture
def in_memory_store() -> InMemoryWorkItemStore:
    """Provides a fresh InMemoryWorkItemStore for each test."""
    return InMemoryWorkItemStore()


@pytest.fixture
def make_task() -> Callable[..., dict[str, Any]]:
    """Builds a raw task record shaped like the backend's JSON."""

    def _make(task_id: str = "t1", **overrides: Any) -> dict[str, Any]:
        record = {
            "id": task_id,
            "taskTitle": "Clean forecourt",
            "description": "Sweep and mop around pumps",
            "priority": "medium",
            "status": "pending",
            "assignedToEmpId": "emp-1",
            "assignedToName": "Ravi",
            "dueDate": "2024-01-10",
            "shift": "Morning",
        }
        record.update(overrides)
        return record

    return _make


@pytest.fixture
def make_duty() -> Callable[..., dict[str, Any]]:
    """Builds a raw daily duty record shaped like the backend's JSON."""

    def _make(duty_id: str = "d1", **overrides: Any) -> dict[str, Any]:
        record = {
            "id": duty_id,
            "empId": "emp-1",
            "dutyDate": "2024-01-10",
            "productIds": ["petrol", "diesel"],
            "gunIds": ["gun-1", "gun-2"],
            "shiftStart": "06:00",
            "shiftEnd": "14:00",
            "status": "SCHEDULED",
        }
        record.update(overrides)
        return record

    return _make
