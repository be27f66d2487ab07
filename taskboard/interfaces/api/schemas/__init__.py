"""Request and response schemas for the HTTP API."""

from .notification import (
    NotificationMarkReadRequest,
    NotificationMarkReadResponse,
    NotificationRead,
)
from .task import (
    RecurrenceSchema,
    TaskCreate,
    TaskRead,
    TaskStatusChangeRead,
    TaskStatusUpdate,
    TaskUpdate,
)

__all__ = [
    "NotificationMarkReadRequest",
    "NotificationMarkReadResponse",
    "NotificationRead",
    "RecurrenceSchema",
    "TaskCreate",
    "TaskRead",
    "TaskStatusChangeRead",
    "TaskStatusUpdate",
    "TaskUpdate",
]
