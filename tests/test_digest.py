"""Tests for the consolidated overdue digest."""

from __future__ import annotations

import logging
from datetime import timedelta

from conftest import at

from taskboard.application.use_cases.digest import days_overdue, send_overdue_digest
from taskboard.application.use_cases.tasks import update_task_status
from taskboard.domain.entities import TASK_STATUS_DONE

NOW = at(2025, 3, 10, 9, 0)


def test_days_overdue_rounds_up() -> None:
    assert days_overdue(NOW - timedelta(hours=1), NOW) == 1
    assert days_overdue(NOW - timedelta(days=2), NOW) == 2
    assert days_overdue(NOW - timedelta(days=2, minutes=1), NOW) == 3
    assert days_overdue(NOW + timedelta(hours=3), NOW) == 0


def test_digest_groups_tasks_by_owner_and_project(
    session, channel, make_user, make_project, make_task
) -> None:
    olivia = make_user("Olivia")
    mark = make_user("Mark")
    alice = make_user("Alice")
    bob = make_user("Bob")
    apollo = make_project("Apollo", olivia)
    gemini = make_project("Gemini", olivia)
    mercury = make_project("Mercury", mark)

    make_task(title="Fuel check", assignees=[alice, bob], deadline=NOW - timedelta(days=2),
              project_id=apollo.id)
    make_task(title="Launch plan", assignees=[bob], deadline=NOW - timedelta(hours=5),
              project_id=gemini.id)
    make_task(title="Future work", assignees=[alice], deadline=NOW + timedelta(days=1),
              project_id=apollo.id)
    finished = make_task(title="Closed", assignees=[alice], deadline=NOW - timedelta(days=1),
                         project_id=mercury.id)
    update_task_status(session, finished.id, TASK_STATUS_DONE)

    delivered = send_overdue_digest(session, channel, now=NOW)

    assert delivered == 1
    recipient, subject, body = channel.sent[0]
    assert recipient == "olivia@example.com"
    assert subject == "[Taskboard] 2 overdue item(s) - please follow up"
    assert "Hi Olivia," in body
    assert "Apollo" in body and "Gemini" in body
    assert "Fuel check" in body and "2 day(s) overdue" in body
    assert "Launch plan" in body and "1 day(s) overdue" in body
    assert "Team Members: Alice, Bob" in body
    assert "Future work" not in body
    assert "Closed" not in body


def test_digest_skips_owner_without_email(session, channel, make_user, make_project, make_task) -> None:
    owner = make_user("Nobody", email="")
    alice = make_user("Alice")
    project = make_project("Apollo", owner)
    make_task(assignees=[alice], deadline=NOW - timedelta(days=1), project_id=project.id)

    assert send_overdue_digest(session, channel, now=NOW) == 0
    assert channel.sent == []


def test_failed_digest_is_not_counted(session, channel, make_user, make_project, make_task) -> None:
    owner = make_user("Olivia")
    project = make_project("Apollo", owner)
    make_task(deadline=NOW - timedelta(days=1), project_id=project.id)
    channel.failing.add("olivia@example.com")

    assert send_overdue_digest(session, channel, now=NOW) == 0


def test_raising_channel_skips_only_that_owner(
    session, channel, make_user, make_project, make_task, caplog
) -> None:
    olivia = make_user("Olivia")
    oscar = make_user("Oscar")
    make_task(deadline=NOW - timedelta(days=1), project_id=make_project("Apollo", olivia).id)
    make_task(deadline=NOW - timedelta(days=2), project_id=make_project("Gemini", oscar).id)
    channel.raising.add("olivia@example.com")

    with caplog.at_level(logging.ERROR):
        assert send_overdue_digest(session, channel, now=NOW) == 1

    assert channel.recipients == ["oscar@example.com"]
    assert f"Overdue digest delivery raised for user {olivia.id}" in caplog.text
