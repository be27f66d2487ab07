"""Repository implementations for infrastructure layer."""

from .notification_repository import NotificationRepository
from .project_repository import ProjectRepository
from .task_repository import TaskRepository
from .user_repository import UserRepository

__all__ = [
    "NotificationRepository",
    "ProjectRepository",
    "TaskRepository",
    "UserRepository",
]
