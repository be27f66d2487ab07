"""Domain entity representing a user notification."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

NOTIFICATION_TYPE_REMINDER = "reminder"
NOTIFICATION_TYPE_OVERDUE = "overdue"
NOTIFICATION_TYPE_COMMENT = "comment"
NOTIFICATION_TYPE_MENTION = "mention"
NOTIFICATION_TYPE_UPDATE = "update"

NOTIFICATION_TYPES = (
    NOTIFICATION_TYPE_REMINDER,
    NOTIFICATION_TYPE_OVERDUE,
    NOTIFICATION_TYPE_COMMENT,
    NOTIFICATION_TYPE_MENTION,
    NOTIFICATION_TYPE_UPDATE,
)


def build_dedup_key(
    user_id: int, task_id: int, type: str, reminder_offset: int | None = None
) -> str | None:
    """Return the uniqueness key for a notification, if its type has one.

    Reminders are unique per ``(user, task, offset)`` and overdue notices per
    ``(user, task)``. Other types may repeat and have no key.
    """

    if type == NOTIFICATION_TYPE_REMINDER:
        if reminder_offset is None:
            raise ValueError("Reminder notifications require a reminder offset")
        return f"{type}:{user_id}:{task_id}:{reminder_offset}"
    if type == NOTIFICATION_TYPE_OVERDUE:
        return f"{type}:{user_id}:{task_id}"
    return None


@dataclass
class Notification:
    """One thing told to one user about one task."""

    id: int | None
    user_id: int
    task_id: int
    type: str
    message: str
    scheduled_for: datetime
    reminder_offset: int | None = None
    read: bool = False
    sent: bool = False
    sent_at: datetime | None = None
    created_at: datetime | None = None

    @property
    def dedup_key(self) -> str | None:
        return build_dedup_key(
            self.user_id, self.task_id, self.type, self.reminder_offset
        )


__all__ = [
    "NOTIFICATION_TYPES",
    "NOTIFICATION_TYPE_COMMENT",
    "NOTIFICATION_TYPE_MENTION",
    "NOTIFICATION_TYPE_OVERDUE",
    "NOTIFICATION_TYPE_REMINDER",
    "NOTIFICATION_TYPE_UPDATE",
    "Notification",
    "build_dedup_key",
]
