"""Tests for editing tasks and the reminder offsets that follow the deadline."""

from __future__ import annotations

import pytest

from conftest import at

from taskboard.application.use_cases.tasks import get_task, update_task
from taskboard.domain.entities import DEFAULT_REMINDER_OFFSETS, RecurrenceRule, Weekly

DEADLINE = at(2025, 3, 10, 17, 0)


def test_clearing_the_deadline_clears_offsets(make_user, make_task, session) -> None:
    alice = make_user("Alice")
    task = make_task(assignees=[alice], deadline=DEADLINE, offsets=[60])

    updated = update_task(session, task.id, deadline=None, deadline_provided=True)

    assert updated.deadline is None
    assert updated.reminder_offsets == []
    assert get_task(session, task.id).reminder_offsets == []


def test_adding_a_deadline_applies_default_offsets(make_user, make_task, session) -> None:
    alice = make_user("Alice")
    task = make_task(assignees=[alice])
    assert task.reminder_offsets == []

    updated = update_task(session, task.id, deadline=DEADLINE, deadline_provided=True)

    assert updated.deadline == DEADLINE
    assert updated.reminder_offsets == list(DEFAULT_REMINDER_OFFSETS)


def test_explicit_offsets_are_normalized(make_user, make_task, session) -> None:
    task = make_task(assignees=[make_user("Alice")], deadline=DEADLINE)

    updated = update_task(
        session, task.id, reminder_offsets=[60, "1440", 60, -5], reminder_offsets_provided=True
    )

    assert updated.reminder_offsets == [1440, 60]


def test_unrelated_edit_keeps_offsets_and_deadline(make_user, make_task, session) -> None:
    alice = make_user("Alice")
    bob = make_user("Bob")
    task = make_task(assignees=[alice], deadline=DEADLINE, offsets=[])

    updated = update_task(
        session, task.id, title="  Final report ", assigned_team_members=[bob.id, bob.id]
    )

    assert updated.title == "Final report"
    assert updated.assigned_team_members == [bob.id]
    assert updated.deadline == DEADLINE
    assert updated.reminder_offsets == []


def test_recurrence_without_deadline_is_rejected(make_user, make_task, session) -> None:
    task = make_task(assignees=[make_user("Alice")])

    with pytest.raises(ValueError, match="deadline is required"):
        update_task(
            session,
            task.id,
            recurrence={"frequency": "weekly", "interval": 1},
            recurrence_provided=True,
        )

    assert get_task(session, task.id).recurrence is None


def test_recurring_task_cannot_lose_its_deadline(make_user, make_task, session) -> None:
    task = make_task(
        assignees=[make_user("Alice")], deadline=DEADLINE, recurrence=RecurrenceRule(Weekly(1))
    )

    with pytest.raises(ValueError, match="deadline is required"):
        update_task(session, task.id, deadline=None, deadline_provided=True)

    cleared = update_task(
        session,
        task.id,
        deadline=None,
        deadline_provided=True,
        recurrence=None,
        recurrence_provided=True,
    )
    assert cleared.recurrence is None
    assert cleared.deadline is None


def test_recurrence_can_be_set_and_replaced(make_user, make_task, session) -> None:
    task = make_task(assignees=[make_user("Alice")], deadline=DEADLINE)

    weekly = update_task(
        session, task.id, recurrence={"frequency": "weekly"}, recurrence_provided=True
    )
    assert weekly.recurrence == RecurrenceRule(Weekly(1))

    none = update_task(
        session, task.id, recurrence={"frequency": "none"}, recurrence_provided=True
    )
    assert none.recurrence is None


def test_missing_task_is_reported(session) -> None:
    with pytest.raises(ValueError, match="Task not found"):
        update_task(session, 999, title="Anything")


def test_blank_title_is_rejected(make_user, make_task, session) -> None:
    task = make_task(assignees=[make_user("Alice")])

    with pytest.raises(ValueError, match="Title is required"):
        update_task(session, task.id, title="   ")
