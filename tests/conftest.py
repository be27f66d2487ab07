"""Shared fixtures for the scheduling test suite."""

from __future__ import annotations

import os
import sys
from datetime import datetime
from pathlib import Path

import pytest

# Ensure the project root (which contains the ``taskboard`` package) is importable
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Keep the module level engine away from any real database file
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["APP_TIMEZONE"] = "Asia/Singapore"
os.environ.pop("SENDGRID_API_KEY", None)
os.environ.pop("SENDGRID_SENDER", None)

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from taskboard.application.use_cases.tasks import create_task
from taskboard.domain.entities import TASK_STATUS_TODO, Project, User
from taskboard.infrastructure.database import Base, initialize_database
from taskboard.infrastructure.repositories import ProjectRepository, UserRepository
from taskboard.utils import get_app_timezone


def at(year: int, month: int, day: int, hour: int = 0, minute: int = 0) -> datetime:
    """Return an aware datetime in the application timezone."""

    return datetime(year, month, day, hour, minute, tzinfo=get_app_timezone())


class RecordingChannel:
    """Delivery channel that records messages instead of sending them."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, str, str]] = []
        self.failing: set[str] = set()
        self.raising: set[str] = set()

    def deliver(self, recipient: str, subject: str, body: str) -> bool:
        if recipient in self.raising:
            raise RuntimeError("connection reset")
        if recipient in self.failing:
            return False
        self.sent.append((recipient, subject, body))
        return True

    @property
    def recipients(self) -> list[str]:
        return [recipient for recipient, _, _ in self.sent]


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    initialize_database(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def channel() -> RecordingChannel:
    return RecordingChannel()


@pytest.fixture()
def make_user(session):
    repository = UserRepository(session)

    def _make(name: str = "Alice", email: str | None = None) -> User:
        address = email if email is not None else f"{name.lower()}@example.com"
        return repository.create(User(id=None, name=name, email=address or None))

    return _make


@pytest.fixture()
def make_project(session):
    repository = ProjectRepository(session)

    def _make(name: str, owner: User) -> Project:
        return repository.create(Project(id=None, name=name, created_by=owner.id))

    return _make


@pytest.fixture()
def make_task(session):
    def _make(
        *,
        assignees=(),
        deadline: datetime | None = None,
        offsets=None,
        status: str = TASK_STATUS_TODO,
        recurrence=None,
        title: str = "Write report",
        project_id: int | None = None,
        created_by: int | None = None,
    ):
        return create_task(
            session,
            title=title,
            project_id=project_id,
            created_by=created_by,
            assigned_team_members=[user.id for user in assignees],
            status=status,
            deadline=deadline,
            reminder_offsets=offsets,
            recurrence=recurrence,
            now=at(2025, 1, 1),
        )

    return _make
