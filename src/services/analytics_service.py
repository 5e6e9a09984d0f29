"""Analytics service for dashboard statistics."""

import logging
from collections.abc import Sequence
from datetime import UTC, datetime

from src.core.logging import span
from src.domain.task import Priority, Task, TaskStatus
from src.models.service_models import UserStats
from src.services import task_service


logger = logging.getLogger(__name__)


def compute_stats(tasks: Sequence[Task], *, now: datetime) -> UserStats:
    """Compute dashboard statistics over a task snapshot.

    `completed_today` counts completed tasks due on the current UTC day; tasks do
    not record a completion time.
    """
    today = now.astimezone(UTC).date()
    return UserStats(
        pending_tasks=sum(1 for t in tasks if t.status == TaskStatus.PENDING),
        completed_today=sum(1 for t in tasks if t.is_completed and t.due_date.astimezone(UTC).date() == today),
        high_priority=sum(1 for t in tasks if t.status == TaskStatus.PENDING and t.priority == Priority.HIGH),
        overdue_tasks=sum(1 for t in tasks if t.is_overdue(now)),
    )


async def get_user_stats(*, now: datetime | None = None) -> UserStats:
    """Load the task collection and compute dashboard statistics."""
    with span("analytics_service.get_user_stats"):
        tasks = await task_service.list_all_tasks()
        stats = compute_stats(tasks, now=now or datetime.now(UTC))
        logger.debug("Computed user stats", extra=stats.model_dump())
        return stats
