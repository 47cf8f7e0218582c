"""Pytest configuration and shared fixtures."""

from datetime import datetime

import pytest

from dutydesk.core.config import settings


# Wednesday; its week runs Sunday 2024-01-07 to Saturday 2024-01-13
FIXED_NOW = datetime(2024, 1, 10, 15, 30)


@pytest.fixture
def now() -> datetime:
    """A fixed 'current moment' so calendar assertions do not depend on the clock."""
    return FIXED_NOW


@pytest.fixture
def permissive_tasks(monkeypatch: pytest.MonkeyPatch) -> None:
    """Run with the permissive task machine (pending -> completed allowed)."""
    monkeypatch.setattr(settings, "allow_task_skip", True)


@pytest.fixture
def strict_tasks(monkeypatch: pytest.MonkeyPatch) -> None:
    """Run with the strict task machine (in-progress cannot be skipped)."""
    monkeypatch.setattr(settings, "allow_task_skip", False)
