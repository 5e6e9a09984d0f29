"""Automation rule domain models and enums."""

from datetime import datetime
from enum import StrEnum

from pydantic import Field, field_validator

from src.domain.base import DomainModel
from src.domain.task import ensure_utc


class TriggerType(StrEnum):
    """Event class an automation rule reacts to."""

    ON_CREATE = "ON_CREATE"
    ON_COMPLETE = "ON_COMPLETE"
    ON_OVERDUE = "ON_OVERDUE"
    KEYWORD_MATCH = "KEYWORD_MATCH"


class ActionType(StrEnum):
    """Side effect performed when an automation rule fires."""

    NOTIFY = "NOTIFY"
    SET_PRIORITY = "SET_PRIORITY"
    DELETE = "DELETE"
    # Reserved: there is no user directory to assign to yet, so the engine treats it as a no-op
    ASSIGN_USER = "ASSIGN_USER"


SUPPORTED_ACTIONS = frozenset({ActionType.NOTIFY, ActionType.SET_PRIORITY, ActionType.DELETE})


class AutomationRule(DomainModel):
    """User-authored "if trigger then action" rule."""

    id: str = Field(..., description="Unique rule ID")
    name: str = Field(..., description="Display name")
    description: str = Field(default="", description="Display description")
    trigger_type: TriggerType = Field(..., description="Event class this rule reacts to")
    trigger_condition: str | None = Field(default=None, description="Keyword for KEYWORD_MATCH rules")
    action_type: ActionType = Field(..., description="Action to perform when fired")
    action_target: str | None = Field(
        default=None, description="Message for NOTIFY, priority for SET_PRIORITY, unused otherwise"
    )
    active: bool = Field(default=True, description="Inactive rules are never evaluated")
    execution_count: int = Field(default=0, ge=0, description="Number of times the rule has fired")
    last_run: datetime | None = Field(default=None, description="Timestamp of the most recent firing")

    @field_validator("last_run")
    @classmethod
    def normalize_last_run(cls, v: datetime | None) -> datetime | None:
        """Normalize the last run timestamp to an aware datetime."""
        return ensure_utc(v) if v is not None else None

    def record_firing(self, fired_at: datetime) -> "AutomationRule":
        """Return a copy with the execution count bumped and `last_run` moved to `fired_at`.

        `last_run` never moves backwards, even if `fired_at` is older than the stored value.
        """
        fired_at = ensure_utc(fired_at)
        last_run = fired_at if self.last_run is None else max(self.last_run, fired_at)
        return self.model_copy(update={"execution_count": self.execution_count + 1, "last_run": last_run})
