"""SQLAlchemy models for tasks and their assignees."""

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    JSON,
    String,
    Table,
    Text,
)
from sqlalchemy.orm import relationship

from taskboard.infrastructure.database import Base
from taskboard.utils import now_in_storage_datetime

task_assignee_table = Table(
    "task_assignee",
    Base.metadata,
    Column(
        "task_id",
        Integer,
        ForeignKey("task.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "user_id",
        Integer,
        ForeignKey("user.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class TaskModel(Base):
    """Database representation of a task."""

    __tablename__ = "task"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False, default="")
    project_id = Column(Integer, ForeignKey("project.id"), nullable=True, index=True)
    created_by = Column(Integer, ForeignKey("user.id"), nullable=True, index=True)
    status = Column(String(20), nullable=False, default="To Do", index=True)
    deadline = Column(DateTime(), nullable=True, index=True)
    reminder_offsets = Column(JSON, nullable=False, default=list)
    completed_at = Column(DateTime(), nullable=True, index=True)
    recurrence = Column(JSON, nullable=True)
    created_at = Column(DateTime(), nullable=False, default=now_in_storage_datetime)
    updated_at = Column(DateTime(), nullable=True, onupdate=now_in_storage_datetime)

    assignees = relationship(
        "UserModel",
        secondary=task_assignee_table,
        lazy="selectin",
        order_by="UserModel.id",
    )
    project = relationship("ProjectModel", lazy="joined")
