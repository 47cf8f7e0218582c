"""Tests for configuration validation."""

import pytest
from pydantic import ValidationError

from dutydesk.core.config import Constants, Settings


def test_defaults() -> None:
    """Test settings fall back to safe defaults when nothing is configured."""
    settings = Settings(_env_file=None)

    assert settings.items_per_page == 6
    assert settings.allow_task_skip is True
    assert settings.require_completion_confirmation is True
    assert settings.api_token is None


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test environment variables override defaults, case-insensitively."""
    monkeypatch.setenv("ITEMS_PER_PAGE", "20")
    monkeypatch.setenv("allow_task_skip", "false")

    settings = Settings(_env_file=None)

    assert settings.items_per_page == 20
    assert settings.allow_task_skip is False


def test_items_per_page_must_be_positive() -> None:
    """Test a zero page size is rejected at load time."""
    with pytest.raises(ValidationError, match="items_per_page"):
        Settings(_env_file=None, items_per_page=0)


def test_require_credential_with_valid_value() -> None:
    """Test require_credential returns value when credential is set."""
    settings = Settings(_env_file=None, api_token="tok-123")

    assert settings.require_credential("api_token", "Backend API") == "tok-123"


@pytest.mark.parametrize("value", [None, ""])
def test_require_credential_missing_raises_error(value: str | None) -> None:
    """Test require_credential raises ValueError naming the environment variable."""
    settings = Settings(_env_file=None, api_token=value)

    with pytest.raises(ValueError, match="Backend API credential not configured.*API_TOKEN"):
        settings.require_credential("api_token", "Backend API")


def test_default_page_size_is_selectable() -> None:
    """Test the default page size is one of the offered options."""
    assert Settings(_env_file=None).items_per_page in Constants.PAGE_SIZE_OPTIONS
