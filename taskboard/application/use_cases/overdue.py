"""Sweep that flags tasks whose deadline has passed."""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from taskboard.domain.entities import NOTIFICATION_TYPE_OVERDUE, Notification, Task
from taskboard.infrastructure.repositories import NotificationRepository, TaskRepository
from taskboard.utils import ensure_app_timezone, now_in_app_timezone

logger = logging.getLogger(__name__)


def overdue_message(task: Task) -> str:
    return f'Task "{task.title}" is now overdue!'


def track_overdue(session: Session, *, now: datetime | None = None) -> list[Notification]:
    """Ensure every assignee of an overdue open task has one overdue notice.

    The notice is keyed by ``(user, task)`` only, so it is created once and
    never reissued while the task stays open, whether or not it was read.
    """

    now = ensure_app_timezone(now) or now_in_app_timezone()
    tasks = TaskRepository(session).list_overdue(now)
    notifications = NotificationRepository(session)
    created: list[Notification] = []

    for task in tasks:
        if task.deadline is None:  # pragma: no cover - filtered by the query
            continue
        for member_id in task.assigned_team_members:
            if notifications.exists(
                user_id=member_id, task_id=task.id, type=NOTIFICATION_TYPE_OVERDUE
            ):
                continue
            saved = notifications.create(
                Notification(
                    id=None,
                    user_id=member_id,
                    task_id=task.id,
                    type=NOTIFICATION_TYPE_OVERDUE,
                    message=overdue_message(task),
                    scheduled_for=task.deadline,
                    created_at=now,
                )
            )
            if saved is not None:
                created.append(saved)

    logger.info(
        "Overdue sweep at %s: %d overdue task(s), %d notification(s) created",
        now.isoformat(),
        len(tasks),
        len(created),
    )
    return created


__all__ = ["overdue_message", "track_overdue"]
