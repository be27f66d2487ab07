"""Per-tick scan that emits reminder notifications before task deadlines."""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from taskboard.config import get_settings
from taskboard.domain.entities import NOTIFICATION_TYPE_REMINDER, Notification, Task
from taskboard.domain.scheduling import (
    humanize_offset,
    is_due,
    reminder_trigger_time,
)
from taskboard.infrastructure.repositories import NotificationRepository, TaskRepository
from taskboard.utils import ensure_app_timezone, now_in_app_timezone

logger = logging.getLogger(__name__)


def reminder_message(task: Task, offset_minutes: int) -> str:
    return f'Task "{task.title}" is due in {humanize_offset(offset_minutes)}.'


def _due_offsets(task: Task, now: datetime, grace_minutes: int) -> list[tuple[int, datetime]]:
    if task.deadline is None:
        raise ValueError(f"Task {task.id} has reminder offsets but no deadline")
    due: list[tuple[int, datetime]] = []
    for offset in task.reminder_offsets:
        trigger = reminder_trigger_time(task.deadline, offset)
        if is_due(trigger, now, grace_minutes):
            due.append((offset, trigger))
    return due


def scan_reminders(
    session: Session,
    *,
    now: datetime | None = None,
    grace_minutes: int | None = None,
) -> list[Notification]:
    """Create the reminder notifications that became due at ``now``.

    Returns only the notifications inserted by this call; running the scan
    again without advancing time returns an empty list.
    """

    now = ensure_app_timezone(now) or now_in_app_timezone()
    if grace_minutes is None:
        grace_minutes = get_settings().reminder_grace_minutes

    tasks = TaskRepository(session).list_open_with_deadline()
    notifications = NotificationRepository(session)
    created: list[Notification] = []

    for task in tasks:
        if not task.assigned_team_members or not task.reminder_offsets:
            continue
        try:
            due = _due_offsets(task, now, grace_minutes)
        except (ValueError, OverflowError) as exc:
            logger.warning("Skipping reminders for task %s: %s", task.id, exc)
            continue

        for offset, trigger in due:
            message = reminder_message(task, offset)
            for member_id in task.assigned_team_members:
                if notifications.exists(
                    user_id=member_id,
                    task_id=task.id,
                    type=NOTIFICATION_TYPE_REMINDER,
                    reminder_offset=offset,
                ):
                    continue
                saved = notifications.create(
                    Notification(
                        id=None,
                        user_id=member_id,
                        task_id=task.id,
                        type=NOTIFICATION_TYPE_REMINDER,
                        reminder_offset=offset,
                        message=message,
                        scheduled_for=trigger,
                        created_at=now,
                    )
                )
                if saved is not None:
                    created.append(saved)

    logger.info(
        "Reminder scan at %s: %d task(s) checked, %d notification(s) created",
        now.isoformat(),
        len(tasks),
        len(created),
    )
    return created


__all__ = ["reminder_message", "scan_reminders"]
