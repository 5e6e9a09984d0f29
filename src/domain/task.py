"""Task domain models and enums."""

from datetime import UTC, datetime
from enum import StrEnum

from pydantic import Field, field_validator

from src.domain.base import DomainModel


class TaskStatus(StrEnum):
    """Task lifecycle status."""

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class Priority(StrEnum):
    """Task priority."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class TaskSource(StrEnum):
    """Channel the task was captured from."""

    MANUAL = "manual"
    VOICE = "voice"
    EMAIL = "email"
    TEXT = "text"


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC so overdue comparisons never mix naive and aware values."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


class Task(DomainModel):
    """Task data transfer object."""

    id: str = Field(..., description="Unique task ID")
    title: str = Field(..., description="Task title")
    status: TaskStatus = Field(default=TaskStatus.PENDING, description="Current lifecycle status")
    priority: Priority = Field(default=Priority.MEDIUM, description="Task priority")
    due_date: datetime = Field(..., description="Due date; overdue is derived from it")
    category: str | None = Field(default=None, description="Free text category label")
    description: str | None = Field(default=None, description="Detailed description, scanned by keyword rules")
    source: TaskSource = Field(default=TaskSource.MANUAL, description="Capture channel")
    ai_confidence: float | None = Field(default=None, ge=0, le=1, description="Parser confidence for captured tasks")
    assigned_to: str | None = Field(default=None, description="Assigned user ID")

    @field_validator("due_date")
    @classmethod
    def normalize_due_date(cls, v: datetime) -> datetime:
        """Normalize the due date to an aware UTC-compatible datetime."""
        return ensure_utc(v)

    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED

    def is_overdue(self, now: datetime) -> bool:
        """A task is overdue when it is not completed and its due date is strictly before `now`."""
        return not self.is_completed and self.due_date < ensure_utc(now)
