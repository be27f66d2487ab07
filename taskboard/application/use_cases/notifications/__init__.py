"""Public helpers for reading and emitting notifications."""

from .events import notify_task_updated
from .inbox import list_unread, mark_read, mark_sent

__all__ = [
    "list_unread",
    "mark_read",
    "mark_sent",
    "notify_task_updated",
]
