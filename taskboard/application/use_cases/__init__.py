"""Aggregate application use cases."""

from .digest import send_overdue_digest
from .dispatch import dispatch_pending
from .overdue import track_overdue
from .recurrence import on_task_completed, spawn_next_occurrence
from .reminders import scan_reminders

__all__ = [
    "dispatch_pending",
    "on_task_completed",
    "scan_reminders",
    "send_overdue_digest",
    "spawn_next_occurrence",
    "track_overdue",
]
