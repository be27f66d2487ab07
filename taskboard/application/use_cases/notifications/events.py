"""Immediate notifications emitted by the task write path."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Session

from taskboard.domain.entities import NOTIFICATION_TYPE_UPDATE, Notification, Task
from taskboard.infrastructure.repositories import NotificationRepository, UserRepository
from taskboard.utils import ensure_app_timezone, now_in_app_timezone


def notify_task_updated(
    session: Session,
    *,
    task: Task,
    author_id: int,
    now: datetime | None = None,
) -> list[Notification]:
    """Tell every assignee except the author that ``task`` changed."""

    recipients = [
        member_id
        for member_id in dict.fromkeys(task.assigned_team_members)
        if member_id != author_id
    ]
    if not recipients:
        return []

    author = UserRepository(session).get(author_id)
    author_name = author.name if author and author.name else "Someone"
    now = ensure_app_timezone(now) or now_in_app_timezone()
    message = f'{author_name} updated "{task.title}".'

    repository = NotificationRepository(session)
    created: list[Notification] = []
    for user_id in recipients:
        saved = repository.create(
            Notification(
                id=None,
                user_id=user_id,
                task_id=task.id,
                type=NOTIFICATION_TYPE_UPDATE,
                message=message,
                scheduled_for=now,
                created_at=now,
            )
        )
        if saved is not None:
            created.append(saved)
    return created


__all__ = ["notify_task_updated"]
