"""Tests for the overdue sweep."""

from __future__ import annotations

from datetime import timedelta

from conftest import at

from taskboard.application.use_cases.notifications import mark_read
from taskboard.application.use_cases.overdue import track_overdue
from taskboard.application.use_cases.tasks import update_task_status
from taskboard.domain.entities import (
    NOTIFICATION_TYPE_OVERDUE,
    TASK_STATUS_DONE,
    TASK_STATUS_IN_PROGRESS,
)
from taskboard.infrastructure.repositories import NotificationRepository

DEADLINE = at(2025, 3, 10, 17, 0)


def test_overdue_notification_created_once(session, make_user, make_task) -> None:
    alice = make_user("Alice")
    bob = make_user("Bob")
    task = make_task(assignees=[alice, bob], deadline=DEADLINE)

    assert track_overdue(session, now=DEADLINE - timedelta(minutes=1)) == []

    created = track_overdue(session, now=DEADLINE)
    assert sorted(n.user_id for n in created) == [alice.id, bob.id]
    assert {n.type for n in created} == {NOTIFICATION_TYPE_OVERDUE}
    assert created[0].message == 'Task "Write report" is now overdue!'
    assert created[0].scheduled_for == DEADLINE
    assert created[0].reminder_offset is None

    assert track_overdue(session, now=DEADLINE + timedelta(days=1)) == []
    stored = NotificationRepository(session).list_for_task(task.id)
    assert len(stored) == 2


def test_read_overdue_notification_is_not_reissued(session, make_user, make_task) -> None:
    alice = make_user("Alice")
    make_task(assignees=[alice], deadline=DEADLINE)
    created = track_overdue(session, now=DEADLINE + timedelta(hours=1))
    mark_read(session, [n.id for n in created])

    assert track_overdue(session, now=DEADLINE + timedelta(days=2)) == []


def test_completed_or_undated_tasks_are_not_overdue(session, make_user, make_task) -> None:
    alice = make_user("Alice")
    done = make_task(title="Done", assignees=[alice], deadline=DEADLINE)
    update_task_status(session, done.id, TASK_STATUS_DONE, now=DEADLINE - timedelta(hours=1))
    make_task(title="Open ended", assignees=[alice])

    assert track_overdue(session, now=DEADLINE + timedelta(days=1)) == []


def test_reopened_task_does_not_get_a_second_notice(session, make_user, make_task) -> None:
    alice = make_user("Alice")
    task = make_task(assignees=[alice], deadline=DEADLINE)
    assert len(track_overdue(session, now=DEADLINE)) == 1

    update_task_status(session, task.id, TASK_STATUS_DONE, now=DEADLINE + timedelta(hours=1))
    update_task_status(
        session, task.id, TASK_STATUS_IN_PROGRESS, now=DEADLINE + timedelta(hours=2)
    )

    assert track_overdue(session, now=DEADLINE + timedelta(days=1)) == []
