"""Use case for moving a task between statuses."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime

from sqlalchemy.orm import Session

from taskboard.application.use_cases.notifications import notify_task_updated
from taskboard.application.use_cases.recurrence import on_task_completed
from taskboard.domain.entities import TASK_STATUSES, TASK_STATUS_DONE, Notification, Task
from taskboard.infrastructure.repositories import TaskRepository
from taskboard.utils import ensure_app_timezone, now_in_app_timezone

from .get_task import get_task

logger = logging.getLogger(__name__)


@dataclass
class StatusChange:
    """Outcome of a status update."""

    task: Task
    successor: Task | None = None
    notifications: list[Notification] = field(default_factory=list)


def update_task_status(
    session: Session,
    task_id: int,
    status: str,
    *,
    updated_by: int | None = None,
    now: datetime | None = None,
) -> StatusChange:
    """Apply ``status`` to the task and run the completion hook on Done.

    ``completed_at`` is stamped when the task enters Done and cleared when it
    leaves Done. When ``updated_by`` is given, the other assignees receive an
    ``update`` notification.
    """

    if status not in TASK_STATUSES:
        raise ValueError(f"Invalid status: {status}")

    current = get_task(session, task_id)
    now = ensure_app_timezone(now) or now_in_app_timezone()
    entering_done = current.status != TASK_STATUS_DONE and status == TASK_STATUS_DONE
    leaving_done = current.status == TASK_STATUS_DONE and status != TASK_STATUS_DONE

    completed_at = current.completed_at
    if entering_done:
        completed_at = now
    elif leaving_done:
        completed_at = None

    # The status change and the successor commit together or not at all.
    try:
        updated = TaskRepository(session).update(
            replace(current, status=status, completed_at=completed_at), commit=False
        )
        successor = on_task_completed(session, updated, commit=False) if entering_done else None
        session.commit()
    except Exception:
        session.rollback()
        raise
    change = StatusChange(task=updated, successor=successor)

    if updated_by is not None and current.status != status:
        change.notifications = notify_task_updated(
            session, task=updated, author_id=updated_by, now=now
        )

    logger.info("Task %s moved from %s to %s", task_id, current.status, status)
    return change


__all__ = ["StatusChange", "update_task_status"]
