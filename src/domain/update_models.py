"""Update models for database operations."""

from datetime import datetime

from pydantic import Field, field_validator

from src.domain.base import DomainModel
from src.domain.create_models import _clean_title
from src.domain.task import Priority, TaskStatus, ensure_utc


class TaskUpdate(DomainModel):
    """Partial update payload for a task; unset fields are left untouched."""

    title: str | None = None
    status: TaskStatus | None = None
    priority: Priority | None = None
    due_date: datetime | None = None
    category: str | None = None
    description: str | None = None
    assigned_to: str | None = Field(default=None, description="Assigned user ID")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str | None) -> str | None:
        """Validate title is non-empty when provided."""
        return _clean_title(v) if v is not None else None

    @field_validator("due_date")
    @classmethod
    def normalize_due_date(cls, v: datetime | None) -> datetime | None:
        """Store due dates as aware datetimes."""
        return ensure_utc(v) if v is not None else None

    def changes(self) -> dict:
        """Return only the fields the client explicitly set, keyed by storage column name."""
        return self.model_dump(exclude_unset=True, exclude_none=True)
