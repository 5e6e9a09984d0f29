"""Domain models and DTOs."""

from src.domain.automation import SUPPORTED_ACTIONS, ActionType, AutomationRule, TriggerType
from src.domain.create_models import AutomationRuleCreate, TaskCreate
from src.domain.notification import AppNotification, NotificationPriority, NotificationType
from src.domain.task import Priority, Task, TaskSource, TaskStatus
from src.domain.update_models import TaskUpdate


__all__ = [
    "SUPPORTED_ACTIONS",
    "ActionType",
    "AppNotification",
    "AutomationRule",
    "AutomationRuleCreate",
    "NotificationPriority",
    "NotificationType",
    "Priority",
    "Task",
    "TaskCreate",
    "TaskSource",
    "TaskStatus",
    "TaskUpdate",
    "TriggerType",
]
