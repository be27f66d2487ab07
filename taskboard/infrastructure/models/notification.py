"""SQLAlchemy model for persisted notifications."""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from taskboard.infrastructure.database import Base
from taskboard.utils import now_in_storage_datetime


class NotificationModel(Base):
    """Database representation for user notifications.

    ``dedup_key`` carries the uniqueness constraint for reminder and overdue
    notifications. It is NULL for the other types, which may repeat.
    """

    __tablename__ = "notification"
    __table_args__ = (
        Index("ix_notification_user_read_scheduled", "user_id", "read", "scheduled_for"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("user.id"), nullable=False, index=True)
    task_id = Column(
        Integer, ForeignKey("task.id", ondelete="CASCADE"), nullable=False, index=True
    )
    type = Column(String(20), nullable=False)
    reminder_offset = Column(Integer, nullable=True, index=True)
    dedup_key = Column(String(120), nullable=True, unique=True)
    message = Column(Text, nullable=False)
    scheduled_for = Column(DateTime(), nullable=False, index=True)
    read = Column(Boolean, nullable=False, default=False, index=True)
    sent = Column(Boolean, nullable=False, default=False, index=True)
    sent_at = Column(DateTime(), nullable=True)
    created_at = Column(DateTime(), nullable=False, default=now_in_storage_datetime)

    user = relationship("UserModel", lazy="joined")
    task = relationship("TaskModel", lazy="joined")


__all__ = ["NotificationModel"]
