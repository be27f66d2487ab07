"""Use case for retrieving a single task."""

from sqlalchemy.orm import Session

from taskboard.domain.entities import Task
from taskboard.infrastructure.repositories import TaskRepository


def get_task(session: Session, task_id: int) -> Task:
    """Return the requested task or raise an error if it does not exist."""

    task = TaskRepository(session).get(task_id)
    if task is None:
        raise ValueError("Task not found")
    return task
