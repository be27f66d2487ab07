"""Use cases for the task write path consumed by the scheduling jobs."""

from .create_task import coerce_recurrence, create_task
from .get_task import get_task
from .update_task import update_task
from .update_task_status import StatusChange, update_task_status

__all__ = [
    "StatusChange",
    "coerce_recurrence",
    "create_task",
    "get_task",
    "update_task",
    "update_task_status",
]
