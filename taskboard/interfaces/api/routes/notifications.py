"""Endpoints for the per-user notification inbox."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from taskboard.application.use_cases.notifications import list_unread, mark_read
from taskboard.domain.entities import Notification
from taskboard.infrastructure.database import get_db
from taskboard.interfaces.api.schemas import (
    NotificationMarkReadRequest,
    NotificationMarkReadResponse,
    NotificationRead,
)

router = APIRouter(tags=["notifications"])


def _notification_to_schema(notification: Notification) -> NotificationRead:
    return NotificationRead(
        id=notification.id or 0,
        user_id=notification.user_id,
        task_id=notification.task_id,
        type=notification.type,
        reminder_offset=notification.reminder_offset,
        message=notification.message,
        scheduled_for=notification.scheduled_for,
        read=notification.read,
        sent=notification.sent,
        sent_at=notification.sent_at,
    )


@router.get("/users/{user_id}/notifications/unread", response_model=list[NotificationRead])
def list_unread_notifications(
    user_id: int,
    limit: int | None = Query(default=None, ge=1, le=500),
    db: Session = Depends(get_db),
) -> list[NotificationRead]:
    """Return the unread notifications of ``user_id``, most recent first."""

    notifications = list_unread(db, user_id, limit=limit)
    return [_notification_to_schema(notification) for notification in notifications]


@router.post("/notifications/read", response_model=NotificationMarkReadResponse)
def mark_notifications_read(
    payload: NotificationMarkReadRequest,
    db: Session = Depends(get_db),
) -> NotificationMarkReadResponse:
    """Mark notifications as read; ids already read or unknown are ignored."""

    updated = mark_read(db, payload.unique_ids())
    return NotificationMarkReadResponse(updated=updated)
