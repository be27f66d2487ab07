"""ORM models used by the application infrastructure."""

from .user import UserModel
from .project import ProjectModel
from .task import TaskModel, task_assignee_table
from .notification import NotificationModel

__all__ = [
    "NotificationModel",
    "ProjectModel",
    "TaskModel",
    "UserModel",
    "task_assignee_table",
]
