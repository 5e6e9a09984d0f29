"""Notification store: persists and serves in-app notifications."""

import logging
from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any

from src.core import db_client
from src.core.config import constants, settings
from src.core.logging import span
from src.domain.notification import AppNotification, NotificationPriority, NotificationType


logger = logging.getLogger(__name__)

COLLECTION = "notifications"


def _to_notification(record: dict[str, Any]) -> AppNotification:
    return AppNotification.model_validate(record)


async def save_notifications(notifications: Iterable[AppNotification]) -> list[AppNotification]:
    """Persist notifications, keeping the IDs they were created with.

    Args:
        notifications: Notifications to store (e.g. produced by the automation engine)

    Returns:
        Stored notifications
    """
    with span("notification_service.save_notifications"):
        saved = []
        for notification in notifications:
            record = await db_client.create_record(collection=COLLECTION, data=notification.model_dump())
            saved.append(_to_notification(record))

        if saved:
            logger.info("Stored %d notification(s)", len(saved))
        return saved


async def notify_system(*, title: str, message: str) -> AppNotification:
    """Store a high-priority system notification (e.g. a scheduled job that keeps failing)."""
    notification = AppNotification(
        id=db_client.new_record_id(),
        type=NotificationType.SYSTEM,
        source=constants.NOTIFICATION_SOURCE,
        title=title,
        message=message,
        timestamp=datetime.now(UTC),
        read=False,
        priority=NotificationPriority.HIGH,
    )
    (saved,) = await save_notifications([notification])
    return saved


async def list_notifications(*, include_read: bool = False, limit: int | None = None) -> list[AppNotification]:
    """List notifications, newest first.

    Args:
        include_read: Include notifications already marked read
        limit: Maximum number returned (defaults to settings.default_notification_limit)
    """
    records = await db_client.list_records(
        collection=COLLECTION,
        filter_query="" if include_read else 'read = "false"',
        sort="-timestamp",
        per_page=limit or settings.default_notification_limit,
    )
    return [_to_notification(record) for record in records]


async def mark_read(*, notification_id: str) -> AppNotification:
    """Mark a notification as read.

    Raises:
        db_client.RecordNotFoundError: If the notification does not exist
    """
    with span("notification_service.mark_read"):
        record = await db_client.update_record(
            collection=COLLECTION,
            record_id=notification_id,
            data={"read": True},
        )
        logger.info("Marked notification %s read", notification_id)
        return _to_notification(record)


async def delete_notification(*, notification_id: str) -> None:
    """Delete a notification.

    Raises:
        db_client.RecordNotFoundError: If the notification does not exist
    """
    await db_client.delete_record(collection=COLLECTION, record_id=notification_id)
    logger.info("Deleted notification %s", notification_id)
