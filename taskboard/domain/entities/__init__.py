"""Domain entities exposed by the application."""

from .notification import (
    NOTIFICATION_TYPES,
    NOTIFICATION_TYPE_COMMENT,
    NOTIFICATION_TYPE_MENTION,
    NOTIFICATION_TYPE_OVERDUE,
    NOTIFICATION_TYPE_REMINDER,
    NOTIFICATION_TYPE_UPDATE,
    Notification,
    build_dedup_key,
)
from .project import Project
from .recurrence import (
    ENDS_NEVER,
    ENDS_ON_DATE,
    Daily,
    EndsNever,
    EndsOnDate,
    Monthly,
    RecurrenceRule,
    Weekly,
)
from .task import (
    DEFAULT_REMINDER_OFFSETS,
    TASK_STATUSES,
    TASK_STATUS_DONE,
    TASK_STATUS_IN_PROGRESS,
    TASK_STATUS_TODO,
    Task,
)
from .user import User

__all__ = [
    "DEFAULT_REMINDER_OFFSETS",
    "Daily",
    "ENDS_NEVER",
    "ENDS_ON_DATE",
    "EndsNever",
    "EndsOnDate",
    "Monthly",
    "NOTIFICATION_TYPES",
    "NOTIFICATION_TYPE_COMMENT",
    "NOTIFICATION_TYPE_MENTION",
    "NOTIFICATION_TYPE_OVERDUE",
    "NOTIFICATION_TYPE_REMINDER",
    "NOTIFICATION_TYPE_UPDATE",
    "Notification",
    "Project",
    "RecurrenceRule",
    "TASK_STATUSES",
    "TASK_STATUS_DONE",
    "TASK_STATUS_IN_PROGRESS",
    "TASK_STATUS_TODO",
    "Task",
    "User",
    "Weekly",
    "build_dedup_key",
]
