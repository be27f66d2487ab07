"""Read-side operations on a user's notifications."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime

from sqlalchemy.orm import Session

from taskboard.domain.entities import Notification
from taskboard.infrastructure.repositories import NotificationRepository


def list_unread(
    session: Session, user_id: int, *, limit: int | None = None
) -> Sequence[Notification]:
    """Return unread notifications for ``user_id``, newest ``scheduled_for`` first."""

    return NotificationRepository(session).list_unread_for_user(user_id, limit=limit)


def mark_read(session: Session, notification_ids: Iterable[int]) -> int:
    """Flag the given notifications as read; unknown or read ids are ignored."""

    return NotificationRepository(session).mark_as_read(notification_ids)


def mark_sent(
    session: Session,
    notification_ids: Iterable[int],
    *,
    sent_at: datetime | None = None,
) -> int:
    """Flag notifications delivered through another channel (e.g. realtime) as sent."""

    return NotificationRepository(session).mark_as_sent(notification_ids, sent_at=sent_at)


__all__ = ["list_unread", "mark_read", "mark_sent"]
