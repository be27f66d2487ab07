"""Delivery sweep for persisted notifications.

Selection is a pure function of stored state (unsent, unread, due, task still
open), so a failed delivery is retried by the next sweep and a restart loses
nothing.
"""

from __future__ import annotations

import html
import logging
from datetime import datetime

from sqlalchemy.orm import Session

from taskboard.domain.entities import (
    NOTIFICATION_TYPE_OVERDUE,
    NOTIFICATION_TYPE_REMINDER,
    NOTIFICATION_TYPE_UPDATE,
    Notification,
    Task,
    User,
)
from taskboard.infrastructure.email import DeliveryChannel
from taskboard.infrastructure.repositories import (
    NotificationRepository,
    TaskRepository,
    UserRepository,
)
from taskboard.utils import ensure_app_timezone, format_deadline, now_in_app_timezone

logger = logging.getLogger(__name__)

DELIVERABLE_TYPES = (
    NOTIFICATION_TYPE_REMINDER,
    NOTIFICATION_TYPE_OVERDUE,
    NOTIFICATION_TYPE_UPDATE,
)

_HEADINGS = {
    NOTIFICATION_TYPE_OVERDUE: "Task Overdue",
    NOTIFICATION_TYPE_UPDATE: "Task Updated",
}


def render_subject(notification: Notification, task: Task | None) -> str:
    title = task.title if task else "Task"
    if notification.type == NOTIFICATION_TYPE_OVERDUE:
        return f"Overdue: {title}"
    if notification.type == NOTIFICATION_TYPE_UPDATE:
        return f"Update: {title}"
    return f"Reminder: {title} due soon"


def render_body(notification: Notification, task: Task | None, user: User) -> str:
    """Build the HTML email body for ``notification``."""

    heading = _HEADINGS.get(notification.type, "Task Reminder")
    title = html.escape(task.title if task else "Task")
    deadline_text = format_deadline(task.deadline if task else None)
    return (
        '<div style="font-family: system-ui, -apple-system, Segoe UI, Roboto, sans-serif;">'
        f"<h2>{heading}</h2>"
        f"<p>Hi {html.escape(user.display_name)},</p>"
        f"<p><strong>{title}</strong></p>"
        f"<p>{html.escape(notification.message or '')}</p>"
        f"<p><strong>Deadline:</strong> {deadline_text}</p>"
        '<hr style="border:none;border-top:1px solid #e5e7eb;margin:16px 0" />'
        '<p style="font-size:12px;color:#6b7280">'
        "You are receiving this because you are assigned to this task.</p>"
        "</div>"
    )


def _deliver(channel: DeliveryChannel, recipient: str, subject: str, body: str) -> bool:
    try:
        return bool(channel.deliver(recipient, subject, body))
    except Exception:
        logger.exception("Delivery channel raised while sending to %s", recipient)
        return False


def dispatch_pending(
    session: Session,
    channel: DeliveryChannel,
    *,
    now: datetime | None = None,
) -> list[int]:
    """Deliver every due notification and return the ids marked as sent."""

    now = ensure_app_timezone(now) or now_in_app_timezone()
    repository = NotificationRepository(session)
    pending = repository.list_pending_delivery(now, types=DELIVERABLE_TYPES)
    if not pending:
        return []

    users = UserRepository(session).get_map_by_ids([n.user_id for n in pending])
    tasks = TaskRepository(session).get_map_by_ids([n.task_id for n in pending])

    sent_ids: list[int] = []
    failed = 0
    for notification in pending:
        user = users.get(notification.user_id)
        if user is None or not user.email:
            logger.warning(
                "Notification %s has no deliverable address for user %s",
                notification.id,
                notification.user_id,
            )
            continue

        task = tasks.get(notification.task_id)
        subject = render_subject(notification, task)
        body = render_body(notification, task, user)
        if not _deliver(channel, user.email, subject, body):
            failed += 1
            logger.error(
                "Delivery failed for notification %s; it will be retried",
                notification.id,
            )
            continue

        repository.mark_as_sent([notification.id], sent_at=now)
        sent_ids.append(notification.id)

    logger.info(
        "Dispatch sweep at %s: %d pending, %d sent, %d failed",
        now.isoformat(),
        len(pending),
        len(sent_ids),
        failed,
    )
    return sent_ids


__all__ = [
    "DELIVERABLE_TYPES",
    "dispatch_pending",
    "render_body",
    "render_subject",
]
