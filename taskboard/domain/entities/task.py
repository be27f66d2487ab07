"""Domain entity representing a unit of work with an optional deadline."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from .recurrence import RecurrenceRule

TASK_STATUS_TODO = "To Do"
TASK_STATUS_IN_PROGRESS = "In Progress"
TASK_STATUS_DONE = "Done"

TASK_STATUSES = (TASK_STATUS_TODO, TASK_STATUS_IN_PROGRESS, TASK_STATUS_DONE)

# 7 days, 3 days and 1 day before the deadline, in minutes.
DEFAULT_REMINDER_OFFSETS: tuple[int, ...] = (10080, 4320, 1440)


@dataclass
class Task:
    """Work item tracked by the reminder, overdue and recurrence jobs."""

    id: int | None
    title: str
    description: str = ""
    project_id: int | None = None
    created_by: int | None = None
    assigned_team_members: list[int] = field(default_factory=list)
    status: str = TASK_STATUS_TODO
    deadline: datetime | None = None
    reminder_offsets: list[int] = field(default_factory=list)
    completed_at: datetime | None = None
    recurrence: RecurrenceRule | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def is_done(self) -> bool:
        return self.status == TASK_STATUS_DONE


__all__ = [
    "DEFAULT_REMINDER_OFFSETS",
    "TASK_STATUSES",
    "TASK_STATUS_DONE",
    "TASK_STATUS_IN_PROGRESS",
    "TASK_STATUS_TODO",
    "Task",
]
