"""Tests for the job runner and its per-job locks."""

from __future__ import annotations

import logging
from datetime import timedelta

from conftest import at

from taskboard.application.jobs import (
    JOB_DISPATCH,
    JOB_OVERDUE,
    JOB_REMINDERS,
    JobRunner,
    run_exclusive,
)

DEADLINE = at(2025, 3, 10, 17, 0)


class BusyLock:
    """Lock that is always held by another run."""

    def __init__(self) -> None:
        self.released = False

    def acquire(self, blocking: bool = True) -> bool:
        return False

    def release(self) -> None:  # pragma: no cover - never acquired
        self.released = True


class CountingLock:
    def __init__(self) -> None:
        self.acquired = 0
        self.released = 0

    def acquire(self, blocking: bool = True) -> bool:
        self.acquired += 1
        return True

    def release(self) -> None:
        self.released += 1


def test_run_exclusive_skips_when_busy(caplog) -> None:
    calls: list[str] = []

    with caplog.at_level(logging.INFO):
        result = run_exclusive(BusyLock(), "reminders", lambda: calls.append("ran"))

    assert result is None
    assert calls == []
    assert "still running" in caplog.text


def test_run_exclusive_releases_after_failure() -> None:
    lock = CountingLock()

    def explode() -> None:
        raise RuntimeError("boom")

    try:
        run_exclusive(lock, "overdue", explode)
    except RuntimeError:
        pass

    assert lock.acquired == lock.released == 1


def test_tick_runs_reminders_overdue_and_dispatch(
    session_factory, channel, make_user, make_task
) -> None:
    alice = make_user("Alice")
    make_task(title="Soon", assignees=[alice], deadline=DEADLINE, offsets=[60])
    make_task(title="Late", assignees=[alice], deadline=DEADLINE - timedelta(hours=2))
    runner = JobRunner(session_factory, channel, grace_minutes=10)

    results = runner.run_tick(DEADLINE - timedelta(minutes=60))

    assert len(results[JOB_REMINDERS]) == 1
    assert len(results[JOB_OVERDUE]) == 1
    assert len(results[JOB_DISPATCH]) == 2
    assert sorted(subject for _, subject, _ in channel.sent) == [
        "Overdue: Late",
        "Reminder: Soon due soon",
    ]

    again = runner.run_tick(DEADLINE - timedelta(minutes=59))
    assert again == {JOB_REMINDERS: [], JOB_OVERDUE: [], JOB_DISPATCH: []}


def test_busy_job_is_skipped_but_others_run(session_factory, channel, make_user, make_task) -> None:
    alice = make_user("Alice")
    make_task(assignees=[alice], deadline=DEADLINE - timedelta(hours=2))
    runner = JobRunner(session_factory, channel, locks={JOB_DISPATCH: BusyLock()})

    results = runner.run_tick(DEADLINE)

    assert results[JOB_DISPATCH] is None
    assert len(results[JOB_OVERDUE]) == 1
    assert channel.sent == []


def test_digest_job_uses_runner_channel(
    session_factory, channel, make_user, make_project, make_task
) -> None:
    owner = make_user("Olivia")
    alice = make_user("Alice")
    project = make_project("Apollo", owner)
    make_task(
        assignees=[alice],
        deadline=DEADLINE,
        project_id=project.id,
        created_by=owner.id,
    )
    runner = JobRunner(session_factory, channel)

    assert runner.run_digest(DEADLINE + timedelta(days=1)) == 1
    assert channel.recipients == ["olivia@example.com"]
