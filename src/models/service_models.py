"""Pydantic models for service layer return types.

These models provide type safety at service boundaries, converting database
dictionaries and engine results into typed objects.
"""

from pydantic import Field

from src.domain.base import DomainModel
from src.domain.notification import AppNotification


class AutomationOutcome(DomainModel):
    """What the coordinator persisted after one trigger event."""

    trigger: str
    updated_task_ids: list[str] = Field(default_factory=list)
    deleted_task_ids: list[str] = Field(default_factory=list)
    notifications: list[AppNotification] = Field(default_factory=list)
    fired_rule_ids: list[str] = Field(default_factory=list)

    @property
    def changed_anything(self) -> bool:
        return bool(self.updated_task_ids or self.deleted_task_ids or self.notifications or self.fired_rule_ids)


class UserStats(DomainModel):
    """Dashboard statistics over the task collection."""

    pending_tasks: int
    completed_today: int
    high_priority: int
    overdue_tasks: int
