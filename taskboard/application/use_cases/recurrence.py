"""Regenerate recurring tasks when their current instance is completed."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from taskboard.domain.entities import TASK_STATUS_TODO, Task
from taskboard.domain.scheduling import (
    derive_reminder_offsets,
    next_occurrence,
    should_spawn,
)
from taskboard.infrastructure.repositories import TaskRepository

logger = logging.getLogger(__name__)


def spawn_next_occurrence(
    session: Session, task: Task, *, commit: bool = True
) -> Task | None:
    """Create the successor of a completed recurring task, if the series continues.

    With ``commit=False`` the successor is only flushed, leaving the caller to
    commit it together with the completion of ``task``.
    """

    rule = task.recurrence
    if rule is None:
        return None
    if task.deadline is None:
        logger.warning(
            "Task %s has a recurrence rule but no deadline; not spawning", task.id
        )
        return None

    try:
        next_deadline = next_occurrence(task.deadline, rule)
    except (ValueError, OverflowError) as exc:
        logger.warning("Cannot compute next occurrence for task %s: %s", task.id, exc)
        return None

    if not should_spawn(next_deadline, rule):
        logger.info(
            "Recurring series of task %s ended; next deadline %s is past its end date",
            task.id,
            next_deadline.isoformat(),
        )
        return None

    successor = TaskRepository(session).create(
        Task(
            id=None,
            title=task.title,
            description=task.description,
            project_id=task.project_id,
            created_by=task.created_by,
            assigned_team_members=list(task.assigned_team_members),
            status=TASK_STATUS_TODO,
            deadline=next_deadline,
            reminder_offsets=derive_reminder_offsets(next_deadline, task.reminder_offsets),
            completed_at=None,
            recurrence=rule,
        ),
        commit=commit,
    )
    logger.info(
        "Created next occurrence of task %s: task %s due %s",
        task.id,
        successor.id,
        next_deadline.isoformat(),
    )
    return successor


def on_task_completed(
    session: Session, task: Task, *, commit: bool = True
) -> Task | None:
    """Hook run by the task write path when ``task`` transitions to Done."""

    if not task.is_done():
        raise ValueError("Task must be completed before spawning its next occurrence")
    return spawn_next_occurrence(session, task, commit=commit)


__all__ = ["on_task_completed", "spawn_next_occurrence"]
