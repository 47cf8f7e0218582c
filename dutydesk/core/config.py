"""Configuration management for dutydesk."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Backend API Configuration
    api_base_url: str = Field(default="http://127.0.0.1:8080", description="Fuel-station backend base URL")
    api_token: str | None = Field(default=None, description="Bearer token for the backend API (optional)")
    api_timeout_seconds: float = Field(default=30.0, description="Timeout for backend API calls (in seconds)")

    # Pydantic Logfire Configuration (optional)
    logfire_token: str | None = Field(default=None, description="Pydantic Logfire token for observability")
    environment: str = Field(default="development", description="Deployment environment reported to Logfire")

    # Board Configuration
    items_per_page: int = Field(default=6, ge=1, description="Default number of work items per page")

    # Lifecycle Configuration
    allow_task_skip: bool = Field(
        default=True,
        description="Allow tasks to move from pending straight to completed (permissive machine)",
    )
    require_completion_confirmation: bool = Field(
        default=True,
        description="Ask the confirmation hook before completing an active duty",
    )

    def require_credential(self, field_name: str, service_name: str) -> str:
        """Validate that a required credential is set, raising a clear error if missing.

        Args:
            field_name: Name of the field to check
            service_name: Human-readable service name for error message

        Returns:
            The credential value

        Raises:
            ValueError: If the credential is None or empty
        """
        value = getattr(self, field_name)
        if not value:
            raise ValueError(
                f"{service_name} credential not configured. "
                f"Set {field_name.upper()} environment variable or add to .env file."
            )
        return value


# Application Constants
class Constants:
    """Application-wide constants."""

    # HTTP Status Codes
    HTTP_OK: int = 200
    HTTP_CLIENT_ERROR_START: int = 400
    HTTP_SERVER_ERROR_START: int = 500

    # Pagination
    PAGE_SIZE_OPTIONS: tuple[int, ...] = (6, 10, 20, 50)

    # Calendar
    HOURS_PER_DAY: int = 24
    MINUTES_PER_HOUR: int = 60
    HOURS_FORMAT: str = "{:.1f}"  # One decimal place, e.g. "8.0"
    EMPTY_HOURS: str = "0.0"


def get_settings() -> Settings:
    """Get application settings (singleton pattern)."""
    return Settings()


# Global settings instance
settings = get_settings()
constants = Constants()
