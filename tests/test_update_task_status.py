"""Tests for the task status write path."""

from __future__ import annotations

import pytest

from conftest import at

from taskboard.application.use_cases.tasks import update_task_status
from taskboard.domain.entities import (
    NOTIFICATION_TYPE_UPDATE,
    TASK_STATUS_DONE,
    TASK_STATUS_IN_PROGRESS,
    TASK_STATUS_TODO,
)
from taskboard.infrastructure.repositories import NotificationRepository


def test_completed_at_set_and_cleared(session, make_user, make_task) -> None:
    alice = make_user("Alice")
    task = make_task(assignees=[alice], deadline=at(2025, 3, 3, 9, 0))

    done = update_task_status(session, task.id, TASK_STATUS_DONE, now=at(2025, 3, 2, 12))
    assert done.task.completed_at == at(2025, 3, 2, 12)

    still_done = update_task_status(session, task.id, TASK_STATUS_DONE, now=at(2025, 3, 5))
    assert still_done.task.completed_at == at(2025, 3, 2, 12)

    reopened = update_task_status(session, task.id, TASK_STATUS_IN_PROGRESS)
    assert reopened.task.status == TASK_STATUS_IN_PROGRESS
    assert reopened.task.completed_at is None


def test_invalid_status_and_missing_task(session) -> None:
    with pytest.raises(ValueError, match="Invalid status"):
        update_task_status(session, 1, "Archived")
    with pytest.raises(ValueError, match="Task not found"):
        update_task_status(session, 999, TASK_STATUS_TODO)


def test_update_notifies_other_assignees(session, make_user, make_task) -> None:
    alice = make_user("Alice")
    bob = make_user("Bob")
    task = make_task(assignees=[alice, bob], deadline=at(2025, 3, 3, 9, 0))

    change = update_task_status(
        session,
        task.id,
        TASK_STATUS_IN_PROGRESS,
        updated_by=alice.id,
        now=at(2025, 3, 1, 10),
    )

    assert [n.user_id for n in change.notifications] == [bob.id]
    notification = change.notifications[0]
    assert notification.type == NOTIFICATION_TYPE_UPDATE
    assert notification.message == 'Alice updated "Write report".'
    assert notification.scheduled_for == at(2025, 3, 1, 10)

    # Update notices have no dedup key and may repeat.
    update_task_status(session, task.id, TASK_STATUS_TODO, updated_by=alice.id)
    stored = NotificationRepository(session).list_for_task(task.id)
    assert len(stored) == 2
    assert all(n.dedup_key is None for n in stored)


def test_unchanged_status_does_not_notify(session, make_user, make_task) -> None:
    alice = make_user("Alice")
    bob = make_user("Bob")
    task = make_task(assignees=[alice, bob], deadline=at(2025, 3, 3, 9, 0))

    change = update_task_status(session, task.id, TASK_STATUS_TODO, updated_by=alice.id)

    assert change.notifications == []
