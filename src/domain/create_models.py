"""Pydantic models for creating records in database."""

from datetime import datetime

from pydantic import Field, field_validator, model_validator

from src.domain.automation import SUPPORTED_ACTIONS, ActionType, TriggerType
from src.domain.base import DomainModel
from src.domain.task import Priority, TaskSource, TaskStatus, ensure_utc


MAX_TITLE_LENGTH = 200


def _clean_title(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Title cannot be empty")
    if len(v) > MAX_TITLE_LENGTH:
        raise ValueError(f"Title too long (max {MAX_TITLE_LENGTH} characters)")
    return v


class TaskCreate(DomainModel):
    """Pydantic model for creating a task record."""

    title: str = Field(..., description="Task title")
    status: TaskStatus = Field(default=TaskStatus.PENDING, description="Initial status")
    priority: Priority = Field(default=Priority.MEDIUM, description="Task priority")
    due_date: datetime = Field(..., description="Due date")
    category: str | None = Field(default=None, description="Category label")
    description: str | None = Field(default=None, description="Detailed description")
    source: TaskSource = Field(default=TaskSource.MANUAL, description="Capture channel")
    ai_confidence: float | None = Field(default=None, ge=0, le=1, description="Parser confidence")
    assigned_to: str | None = Field(default=None, description="Assigned user ID")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        """Validate title is non-empty and reasonably short."""
        return _clean_title(v)

    @field_validator("due_date")
    @classmethod
    def normalize_due_date(cls, v: datetime) -> datetime:
        """Store due dates as aware datetimes."""
        return ensure_utc(v)


class AutomationRuleCreate(DomainModel):
    """Pydantic model for creating an automation rule record.

    The engine itself tolerates inert rules; this model is where authoring
    mistakes are rejected so they never reach storage.
    """

    name: str = Field(..., description="Display name")
    description: str = Field(default="", description="Display description")
    trigger_type: TriggerType = Field(..., description="Event class this rule reacts to")
    trigger_condition: str | None = Field(default=None, description="Keyword for KEYWORD_MATCH rules")
    action_type: ActionType = Field(..., description="Action to perform when fired")
    action_target: str | None = Field(default=None, description="Action parameter")
    active: bool = Field(default=True, description="Whether the rule starts enabled")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Validate name is non-empty."""
        return _clean_title(v)

    @model_validator(mode="after")
    def validate_trigger_and_action(self) -> "AutomationRuleCreate":
        """Reject rule combinations the engine would silently ignore."""
        if self.trigger_type == TriggerType.KEYWORD_MATCH and not (self.trigger_condition or "").strip():
            raise ValueError("KEYWORD_MATCH rules require a non-empty trigger condition")

        if self.action_type not in SUPPORTED_ACTIONS:
            raise ValueError(f"Action {self.action_type} is not supported yet")

        if self.action_type == ActionType.SET_PRIORITY:
            allowed = ", ".join(p.value for p in Priority)
            if self.action_target not in {p.value for p in Priority}:
                raise ValueError(f"SET_PRIORITY rules require an action target of: {allowed}")

        return self
