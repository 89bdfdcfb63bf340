"""Notification inbox endpoints."""
from fastapi import APIRouter, Depends, Query

from sindh.api.dependencies import get_notification_service
from sindh.api.responses import CountOut, NotificationOut
from sindh.notifications.service import NotificationService

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


@router.get("/unread-count/{recipient_id}", response_model=CountOut)
def unread_count(
    recipient_id: str,
    inbox: NotificationService = Depends(get_notification_service),
):
    return CountOut(count=inbox.unread_count(recipient_id))


@router.patch("/mark-all-read/{recipient_id}", response_model=CountOut)
def mark_all_read(
    recipient_id: str,
    inbox: NotificationService = Depends(get_notification_service),
):
    """Mark everything read; returns how many notifications changed."""
    return CountOut(count=inbox.mark_all_read(recipient_id))


@router.patch("/{notification_id}/read", response_model=NotificationOut)
def mark_read(
    notification_id: str,
    inbox: NotificationService = Depends(get_notification_service),
):
    return inbox.mark_read(notification_id)


@router.get("/{recipient_id}", response_model=list[NotificationOut])
def list_notifications(
    recipient_id: str,
    unread_only: bool = Query(False),
    limit: int = Query(50, ge=1, le=200),
    inbox: NotificationService = Depends(get_notification_service),
):
    """Newest first."""
    return inbox.list_for_recipient(recipient_id, unread_only=unread_only, limit=limit)
