"""Use case for creating tasks with normalized reminder settings."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any

from sqlalchemy.orm import Session

from taskboard.domain.entities import (
    TASK_STATUSES,
    TASK_STATUS_DONE,
    TASK_STATUS_TODO,
    RecurrenceRule,
    Task,
)
from taskboard.domain.scheduling import derive_reminder_offsets
from taskboard.infrastructure.repositories import ProjectRepository, TaskRepository
from taskboard.utils import ensure_app_timezone, now_in_app_timezone


def coerce_recurrence(
    recurrence: RecurrenceRule | Mapping[str, Any] | None,
) -> RecurrenceRule | None:
    """Accept a rule or its JSON payload; ``frequency: none`` means no rule."""

    if recurrence is None or isinstance(recurrence, RecurrenceRule):
        return recurrence
    if str(recurrence.get("frequency") or "").strip().lower() in ("", "none"):
        return None
    return RecurrenceRule.from_payload(dict(recurrence))


def create_task(
    session: Session,
    *,
    title: str,
    description: str = "",
    project_id: int | None = None,
    created_by: int | None = None,
    assigned_team_members: Iterable[int] = (),
    status: str = TASK_STATUS_TODO,
    deadline: datetime | None = None,
    reminder_offsets: Iterable[object] | None = None,
    recurrence: RecurrenceRule | Mapping[str, Any] | None = None,
    now: datetime | None = None,
) -> Task:
    """Persist a new task.

    Offsets are derived from the deadline: none without a deadline, the
    defaults when unset, the normalized explicit list otherwise. A recurring
    task must have a deadline.
    """

    title = (title or "").strip()
    if not title:
        raise ValueError("Title is required")
    if status not in TASK_STATUSES:
        raise ValueError(f"Invalid status: {status}")
    if project_id is not None and ProjectRepository(session).get(project_id) is None:
        raise ValueError("Project not found")

    deadline = ensure_app_timezone(deadline)
    rule = coerce_recurrence(recurrence)
    if rule is not None and deadline is None:
        raise ValueError("A deadline is required when recurrence is enabled.")

    now = ensure_app_timezone(now) or now_in_app_timezone()
    task = Task(
        id=None,
        title=title,
        description=description or "",
        project_id=project_id,
        created_by=created_by,
        assigned_team_members=list(dict.fromkeys(assigned_team_members)),
        status=status,
        deadline=deadline,
        reminder_offsets=derive_reminder_offsets(deadline, reminder_offsets),
        completed_at=now if status == TASK_STATUS_DONE else None,
        recurrence=rule,
        created_at=now,
    )
    return TaskRepository(session).create(task)


__all__ = ["coerce_recurrence", "create_task"]
