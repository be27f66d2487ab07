"""Batch jobs run by the periodic scheduler.

Each job owns a lock. A tick that fires while the previous run of the same
job is still busy is skipped instead of overlapping it. Locks are injected so
tests can run the jobs directly, with or without contention.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Protocol, TypeVar

from sqlalchemy.orm import Session

from taskboard.application.use_cases import (
    dispatch_pending,
    scan_reminders,
    send_overdue_digest,
    track_overdue,
)
from taskboard.infrastructure.email import DeliveryChannel

logger = logging.getLogger(__name__)

T = TypeVar("T")

JOB_REMINDERS = "reminders"
JOB_OVERDUE = "overdue"
JOB_DISPATCH = "dispatch"
JOB_DIGEST = "digest"

JOB_NAMES = (JOB_REMINDERS, JOB_OVERDUE, JOB_DISPATCH, JOB_DIGEST)


class BatchLock(Protocol):
    """Non-reentrant guard shared by the runs of one job."""

    def acquire(self, blocking: bool = ...) -> bool: ...

    def release(self) -> None: ...


def run_exclusive(lock: BatchLock, name: str, func: Callable[[], T]) -> T | None:
    """Run ``func`` holding ``lock``; return ``None`` without running if busy."""

    if not lock.acquire(blocking=False):
        logger.info("Job %s is still running; skipping this tick", name)
        return None
    try:
        return func()
    finally:
        lock.release()


class JobRunner:
    """Open a session per job run and execute the scheduling use cases."""

    def __init__(
        self,
        session_factory: Callable[[], Session],
        channel: DeliveryChannel,
        *,
        locks: Mapping[str, BatchLock] | None = None,
        grace_minutes: int | None = None,
    ) -> None:
        self.session_factory = session_factory
        self.channel = channel
        self.grace_minutes = grace_minutes
        self.locks: dict[str, BatchLock] = {name: threading.Lock() for name in JOB_NAMES}
        if locks:
            self.locks.update(locks)

    def _run(self, name: str, job: Callable[[Session], T]) -> T | None:
        def execute() -> T:
            session = self.session_factory()
            try:
                return job(session)
            finally:
                session.close()

        return run_exclusive(self.locks[name], name, execute)

    def run_reminders(self, now: datetime | None = None):
        return self._run(
            JOB_REMINDERS,
            lambda session: scan_reminders(
                session, now=now, grace_minutes=self.grace_minutes
            ),
        )

    def run_overdue(self, now: datetime | None = None):
        return self._run(JOB_OVERDUE, lambda session: track_overdue(session, now=now))

    def run_dispatch(self, now: datetime | None = None):
        return self._run(
            JOB_DISPATCH,
            lambda session: dispatch_pending(session, self.channel, now=now),
        )

    def run_digest(self, now: datetime | None = None):
        return self._run(
            JOB_DIGEST,
            lambda session: send_overdue_digest(session, self.channel, now=now),
        )

    def run_tick(self, now: datetime | None = None) -> dict[str, object]:
        """Run reminders, overdue detection and delivery once, in that order."""

        return {
            JOB_REMINDERS: self.run_reminders(now),
            JOB_OVERDUE: self.run_overdue(now),
            JOB_DISPATCH: self.run_dispatch(now),
        }


__all__ = [
    "BatchLock",
    "JOB_DIGEST",
    "JOB_DISPATCH",
    "JOB_NAMES",
    "JOB_OVERDUE",
    "JOB_REMINDERS",
    "JobRunner",
    "run_exclusive",
]
