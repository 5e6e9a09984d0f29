"""Configuration management for FlowPilot."""

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

    # SQLite Configuration
    sqlite_db_path: str = Field(default="flowpilot.db", description="Path to the SQLite database file")

    # Pydantic Logfire Configuration (optional)
    logfire_token: str | None = Field(default=None, description="Pydantic Logfire token for observability")
    environment: str = Field(default="production", description="Deployment environment reported to Logfire")

    # Automation Scheduler Configuration
    enable_scheduler: bool = Field(default=True, description="Run the periodic overdue automation job")
    overdue_check_interval_seconds: int = Field(
        default=60, ge=1, description="Interval between ON_OVERDUE automation passes (in seconds)"
    )

    # Notification Configuration
    default_notification_limit: int = Field(
        default=50, ge=1, description="Maximum number of notifications returned by default"
    )


# Application Constants
class Constants:
    """Application-wide constants."""

    # Notifications produced by the automation engine
    NOTIFICATION_SOURCE: str = "FlowPilot"
    AUTOMATION_TITLE_PREFIX: str = "Automation: "

    # Scheduler Configuration
    OVERDUE_JOB_ID: str = "overdue_automations"
    JOB_MAX_RETRIES: int = 3
    JOB_RETRY_BASE_DELAY_SECONDS: float = 2.0
    JOB_CONSECUTIVE_FAILURE_THRESHOLD: int = 3  # Failures before a job lands in the dead letter queue

    # Pagination Defaults
    DEFAULT_PER_PAGE_LIMIT: int = 500  # Page size for list queries and full-collection scans

    # Job Tracker Configuration
    TRACKER_DEAD_LETTER_QUEUE_MAXLEN: int = 100  # Max items in dead letter queue
    TRACKER_ERROR_MAX_LENGTH: int = 500


def get_settings() -> Settings:
    """Get application settings (singleton pattern)."""
    return Settings()


# Global settings instance
settings = get_settings()
constants = Constants()
