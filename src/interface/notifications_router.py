"""Notification endpoints."""

from fastapi import APIRouter, Query, Response, status

from src.domain.notification import AppNotification
from src.services import notification_service


router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=list[AppNotification])
async def list_notifications(
    include_read: bool = Query(default=False, alias="includeRead"),
    limit: int | None = Query(default=None, ge=1),
) -> list[AppNotification]:
    """List notifications, newest first; unread only unless includeRead is set."""
    return await notification_service.list_notifications(include_read=include_read, limit=limit)


@router.post("/{notification_id}/read", response_model=AppNotification)
async def mark_read(notification_id: str) -> AppNotification:
    """Mark a notification as read."""
    return await notification_service.mark_read(notification_id=notification_id)


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_notification(notification_id: str) -> Response:
    """Dismiss a notification."""
    await notification_service.delete_notification(notification_id=notification_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
