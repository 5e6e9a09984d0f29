"""Notification domain models and enums."""

from datetime import datetime
from enum import StrEnum

from pydantic import Field

from src.domain.base import DomainModel


class NotificationType(StrEnum):
    """Origin class of a notification."""

    EMAIL = "email"
    SOCIAL = "social"
    SYSTEM = "system"
    AUTOMATION = "automation"


class NotificationPriority(StrEnum):
    """Severity tag of a notification."""

    HIGH = "high"
    NORMAL = "normal"


class AppNotification(DomainModel):
    """Notification shown to the user."""

    id: str = Field(..., description="Unique notification ID")
    type: NotificationType = Field(..., description="Origin class")
    source: str = Field(..., description="Origin label (e.g. 'FlowPilot', 'Gmail')")
    title: str = Field(..., description="Display title")
    message: str = Field(..., description="Display message")
    timestamp: datetime = Field(..., description="Creation time")
    read: bool = Field(default=False, description="Whether the user has read it")
    priority: NotificationPriority | None = Field(default=None, description="Optional severity tag")
