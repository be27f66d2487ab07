"""Persistence helpers for notification entities."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime
from typing import Iterable

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from taskboard.domain.entities import (
    TASK_STATUS_DONE,
    Notification,
    build_dedup_key,
)
from taskboard.infrastructure.models import NotificationModel, TaskModel
from taskboard.utils import (
    from_storage_datetime,
    now_in_app_timezone,
    to_storage_datetime,
)

logger = logging.getLogger(__name__)


class NotificationRepository:
    """Provide CRUD operations for :class:`Notification` objects.

    Reminder and overdue notifications are unique per dedup key. The check in
    :meth:`exists` is advisory; the UNIQUE constraint on ``dedup_key`` is what
    rejects a second insert when two scans race.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def exists(
        self,
        *,
        user_id: int,
        task_id: int,
        type: str,
        reminder_offset: int | None = None,
    ) -> bool:
        query = self.session.query(NotificationModel.id)
        dedup_key = build_dedup_key(user_id, task_id, type, reminder_offset)
        if dedup_key is not None:
            query = query.filter(NotificationModel.dedup_key == dedup_key)
        else:
            query = query.filter(
                NotificationModel.user_id == user_id,
                NotificationModel.task_id == task_id,
                NotificationModel.type == type,
            )
        return query.first() is not None

    def get(self, notification_id: int) -> Notification | None:
        model = self.session.get(NotificationModel, notification_id)
        return self._to_entity(model) if model else None

    def list_for_task(self, task_id: int) -> Sequence[Notification]:
        query = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.task_id == task_id)
            .order_by(NotificationModel.id)
        )
        return [self._to_entity(model) for model in query.all()]

    def list_unread_for_user(
        self, user_id: int, *, limit: int | None = None
    ) -> Sequence[Notification]:
        query = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.user_id == user_id)
            .filter(NotificationModel.read.is_(False))
            .order_by(
                NotificationModel.scheduled_for.desc(), NotificationModel.id.desc()
            )
        )
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def list_pending_delivery(
        self, now: datetime, *, types: Sequence[str]
    ) -> Sequence[Notification]:
        """Return unsent, unread, due notifications whose task is still open."""

        query = (
            self.session.query(NotificationModel)
            .join(TaskModel, NotificationModel.task_id == TaskModel.id)
            .filter(NotificationModel.sent.is_(False))
            .filter(NotificationModel.read.is_(False))
            .filter(NotificationModel.type.in_(list(types)))
            .filter(NotificationModel.scheduled_for <= to_storage_datetime(now))
            .filter(TaskModel.status != TASK_STATUS_DONE)
            .order_by(NotificationModel.scheduled_for, NotificationModel.id)
        )
        return [self._to_entity(model) for model in query.all()]

    def create(self, notification: Notification) -> Notification | None:
        """Insert ``notification``; return ``None`` if its dedup key is taken."""

        model = NotificationModel()
        self._apply_entity_to_model(model, notification)
        dedup_key = model.dedup_key
        self.session.add(model)
        try:
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            if dedup_key is None or not self._dedup_key_taken(dedup_key):
                raise
            logger.debug("Notification %s already exists; insert rejected", dedup_key)
            return None
        self.session.refresh(model)
        return self._to_entity(model)

    def _dedup_key_taken(self, dedup_key: str) -> bool:
        query = self.session.query(NotificationModel.id).filter(
            NotificationModel.dedup_key == dedup_key
        )
        return query.first() is not None

    def mark_as_read(self, notification_ids: Iterable[int]) -> int:
        ids = [notification_id for notification_id in notification_ids if notification_id is not None]
        if not ids:
            return 0
        updated = (
            self.session.query(NotificationModel)
            .filter(
                NotificationModel.id.in_(ids),
                NotificationModel.read.is_(False),
            )
            .update({NotificationModel.read: True}, synchronize_session=False)
        )
        self.session.commit()
        return updated

    def mark_as_sent(
        self, notification_ids: Iterable[int], *, sent_at: datetime | None = None
    ) -> int:
        ids = [notification_id for notification_id in notification_ids if notification_id is not None]
        if not ids:
            return 0
        timestamp = to_storage_datetime(sent_at or now_in_app_timezone())
        updated = (
            self.session.query(NotificationModel)
            .filter(
                NotificationModel.id.in_(ids),
                NotificationModel.sent.is_(False),
            )
            .update(
                {NotificationModel.sent: True, NotificationModel.sent_at: timestamp},
                synchronize_session=False,
            )
        )
        self.session.commit()
        return updated

    @staticmethod
    def _apply_entity_to_model(
        model: NotificationModel, notification: Notification
    ) -> None:
        model.user_id = notification.user_id
        model.task_id = notification.task_id
        model.type = notification.type
        model.reminder_offset = notification.reminder_offset
        model.dedup_key = notification.dedup_key
        model.message = notification.message
        model.scheduled_for = to_storage_datetime(notification.scheduled_for)
        model.read = notification.read
        model.sent = notification.sent
        model.sent_at = to_storage_datetime(notification.sent_at)
        model.created_at = to_storage_datetime(
            notification.created_at or now_in_app_timezone()
        )

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            user_id=model.user_id,
            task_id=model.task_id,
            type=model.type,
            message=model.message,
            scheduled_for=from_storage_datetime(model.scheduled_for),
            reminder_offset=model.reminder_offset,
            read=model.read,
            sent=model.sent,
            sent_at=from_storage_datetime(model.sent_at),
            created_at=from_storage_datetime(model.created_at),
        )


__all__ = ["NotificationRepository"]
