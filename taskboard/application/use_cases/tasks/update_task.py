"""Use case for editing a task's details and reminder settings."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import replace
from datetime import datetime
from typing import Any

from sqlalchemy.orm import Session

from taskboard.domain.entities import RecurrenceRule, Task
from taskboard.domain.scheduling import derive_reminder_offsets
from taskboard.infrastructure.repositories import TaskRepository
from taskboard.utils import ensure_app_timezone

from .create_task import coerce_recurrence
from .get_task import get_task

logger = logging.getLogger(__name__)


def _next_reminder_offsets(
    current: Task,
    next_deadline: datetime | None,
    reminder_offsets: Iterable[object] | None,
    reminder_offsets_provided: bool,
) -> list[int]:
    if reminder_offsets_provided:
        return derive_reminder_offsets(next_deadline, reminder_offsets)
    if next_deadline is None:
        return []
    if current.deadline is None:
        # Deadline added to an undated task: start from the defaults.
        return derive_reminder_offsets(next_deadline, None)
    return list(current.reminder_offsets)


def update_task(
    session: Session,
    task_id: int,
    *,
    title: str | None = None,
    description: str | None = None,
    assigned_team_members: Iterable[int] | None = None,
    deadline: datetime | None = None,
    deadline_provided: bool = False,
    reminder_offsets: Iterable[object] | None = None,
    reminder_offsets_provided: bool = False,
    recurrence: RecurrenceRule | Mapping[str, Any] | None = None,
    recurrence_provided: bool = False,
) -> Task:
    """Apply a partial edit to a task.

    ``None`` leaves ``title``, ``description`` and ``assigned_team_members``
    untouched. ``deadline``, ``reminder_offsets`` and ``recurrence`` can be
    cleared, so their ``*_provided`` flags tell an explicit ``None`` from an
    omitted field.

    Reminder offsets follow the deadline the task ends up with: cleared when
    it has none, the defaults when a deadline is added without offsets, the
    stored list otherwise. A recurring task must keep a deadline.

    Raises:
        ValueError: If the task does not exist, the title is blank, the rule
            is malformed or a recurring task would be left without a deadline.
    """

    current = get_task(session, task_id)

    new_title = current.title
    if title is not None:
        new_title = title.strip()
        if not new_title:
            raise ValueError("Title is required")

    next_deadline = ensure_app_timezone(deadline) if deadline_provided else current.deadline
    rule = coerce_recurrence(recurrence) if recurrence_provided else current.recurrence
    if rule is not None and next_deadline is None:
        raise ValueError("A deadline is required when recurrence is enabled.")

    members = current.assigned_team_members
    if assigned_team_members is not None:
        members = list(dict.fromkeys(assigned_team_members))

    updated = TaskRepository(session).update(
        replace(
            current,
            title=new_title,
            description=description if description is not None else current.description,
            assigned_team_members=members,
            deadline=next_deadline,
            reminder_offsets=_next_reminder_offsets(
                current, next_deadline, reminder_offsets, reminder_offsets_provided
            ),
            recurrence=rule,
        )
    )
    logger.info("Task %s updated", task_id)
    return updated


__all__ = ["update_task"]
