"""Persistence layer for projects."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.orm import Session

from taskboard.domain.entities import Project
from taskboard.infrastructure.models import ProjectModel
from taskboard.utils import from_storage_datetime


class ProjectRepository:
    """Provide read and create operations for :class:`Project` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, project_id: int) -> Project | None:
        model = self.session.get(ProjectModel, project_id)
        return self._to_entity(model) if model else None

    def create(self, project: Project) -> Project:
        model = ProjectModel(name=project.name, created_by=project.created_by)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def list_with_owner(self) -> Sequence[Project]:
        query = (
            self.session.query(ProjectModel)
            .filter(ProjectModel.created_by.isnot(None))
            .order_by(ProjectModel.created_by, ProjectModel.id)
        )
        return [self._to_entity(model) for model in query.all()]

    @staticmethod
    def _to_entity(model: ProjectModel) -> Project:
        return Project(
            id=model.id,
            name=model.name,
            created_by=model.created_by,
            created_at=from_storage_datetime(model.created_at),
        )


__all__ = ["ProjectRepository"]
