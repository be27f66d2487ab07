"""Persistence helpers for task entities."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import replace
from datetime import datetime

from sqlalchemy.orm import Session

from taskboard.domain.entities import (
    TASK_STATUS_DONE,
    EndsOnDate,
    RecurrenceRule,
    Task,
)
from taskboard.infrastructure.models import TaskModel, UserModel
from taskboard.utils import ensure_app_timezone, from_storage_datetime, to_storage_datetime

logger = logging.getLogger(__name__)


class TaskRepository:
    """Provide CRUD operations and scheduling queries for tasks."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, task_id: int) -> Task | None:
        model = self.session.get(TaskModel, task_id)
        return self._to_entity(model) if model else None

    def get_map_by_ids(self, task_ids: Sequence[int]) -> dict[int, Task]:
        if not task_ids:
            return {}
        unique_ids = {int(task_id) for task_id in task_ids}
        query = self.session.query(TaskModel).filter(TaskModel.id.in_(unique_ids))
        return {model.id: self._to_entity(model) for model in query.all()}

    def list_open_with_deadline(self) -> Sequence[Task]:
        """Return tasks that are not done and carry a deadline."""

        query = (
            self.session.query(TaskModel)
            .filter(TaskModel.status != TASK_STATUS_DONE)
            .filter(TaskModel.deadline.isnot(None))
            .order_by(TaskModel.deadline, TaskModel.id)
        )
        return [self._to_entity(model) for model in query.all()]

    def list_overdue(
        self, now: datetime, *, project_ids: Sequence[int] | None = None
    ) -> Sequence[Task]:
        """Return tasks that are not done and whose deadline is at or before ``now``."""

        query = (
            self.session.query(TaskModel)
            .filter(TaskModel.status != TASK_STATUS_DONE)
            .filter(TaskModel.deadline.isnot(None))
            .filter(TaskModel.deadline <= to_storage_datetime(now))
        )
        if project_ids is not None:
            if not project_ids:
                return []
            query = query.filter(TaskModel.project_id.in_(set(project_ids)))
        query = query.order_by(TaskModel.deadline, TaskModel.id)
        return [self._to_entity(model) for model in query.all()]

    def create(self, task: Task, *, commit: bool = True) -> Task:
        """Insert ``task``; with ``commit=False`` it is only flushed into the open transaction."""

        model = TaskModel()
        self._apply_entity_to_model(model, task, include_creation_fields=True)
        self.session.add(model)
        self._save(model, commit)
        return self._to_entity(model)

    def update(self, task: Task, *, commit: bool = True) -> Task:
        if task.id is None:
            raise ValueError("Task id is required for updates")
        model = self.session.get(TaskModel, task.id)
        if model is None:
            msg = f"Task with id {task.id} not found"
            raise ValueError(msg)
        self._apply_entity_to_model(model, task, include_creation_fields=False)
        self.session.add(model)
        self._save(model, commit)
        return self._to_entity(model)

    def _save(self, model: TaskModel, commit: bool) -> None:
        if commit:
            self.session.commit()
        else:
            self.session.flush()
        self.session.refresh(model)

    def _load_assignees(self, user_ids: Sequence[int]) -> list[UserModel]:
        unique_ids = list(dict.fromkeys(int(user_id) for user_id in user_ids))
        if not unique_ids:
            return []
        models = (
            self.session.query(UserModel).filter(UserModel.id.in_(unique_ids)).all()
        )
        found = {model.id for model in models}
        missing = [user_id for user_id in unique_ids if user_id not in found]
        if missing:
            msg = f"Assigned users not found: {', '.join(str(m) for m in missing)}"
            raise ValueError(msg)
        return models

    def _apply_entity_to_model(
        self,
        model: TaskModel,
        task: Task,
        *,
        include_creation_fields: bool,
    ) -> None:
        if include_creation_fields:
            model.created_at = to_storage_datetime(task.created_at) or model.created_at
        model.title = task.title
        model.description = task.description or ""
        model.project_id = task.project_id
        model.created_by = task.created_by
        model.status = task.status
        model.deadline = to_storage_datetime(task.deadline)
        model.reminder_offsets = list(task.reminder_offsets)
        model.completed_at = to_storage_datetime(task.completed_at)
        model.recurrence = task.recurrence.to_payload() if task.recurrence else None
        model.assignees = self._load_assignees(task.assigned_team_members)

    @staticmethod
    def _recurrence_to_entity(model: TaskModel) -> RecurrenceRule | None:
        if not model.recurrence:
            return None
        try:
            rule = RecurrenceRule.from_payload(model.recurrence)
        except ValueError as exc:
            logger.warning(
                "Ignoring malformed recurrence rule on task %s: %s", model.id, exc
            )
            return None
        if isinstance(rule.ends, EndsOnDate):
            rule = replace(rule, ends=EndsOnDate(ensure_app_timezone(rule.ends.until)))
        return rule

    @classmethod
    def _to_entity(cls, model: TaskModel) -> Task:
        return Task(
            id=model.id,
            title=model.title,
            description=model.description or "",
            project_id=model.project_id,
            created_by=model.created_by,
            assigned_team_members=[user.id for user in model.assignees],
            status=model.status,
            deadline=from_storage_datetime(model.deadline),
            reminder_offsets=list(model.reminder_offsets or []),
            completed_at=from_storage_datetime(model.completed_at),
            recurrence=cls._recurrence_to_entity(model),
            created_at=from_storage_datetime(model.created_at),
            updated_at=from_storage_datetime(model.updated_at),
        )


__all__ = ["TaskRepository"]
