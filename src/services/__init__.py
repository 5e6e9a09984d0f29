from src.services import (
    analytics_service,
    automation_engine,
    automation_service,
    notification_service,
    rule_service,
    task_service,
)


__all__ = [
    "analytics_service",
    "automation_engine",
    "automation_service",
    "notification_service",
    "rule_service",
    "task_service",
]
