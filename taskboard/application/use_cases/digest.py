"""Daily consolidated overdue summary for project owners."""

from __future__ import annotations

import html
import logging
import math
from collections import defaultdict
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from taskboard.domain.entities import Project, Task, User
from taskboard.infrastructure.email import DeliveryChannel
from taskboard.infrastructure.repositories import (
    ProjectRepository,
    TaskRepository,
    UserRepository,
)
from taskboard.utils import ensure_app_timezone, now_in_app_timezone

logger = logging.getLogger(__name__)

_SECONDS_PER_DAY = 86400


def days_overdue(deadline: datetime, now: datetime) -> int:
    """Whole days past ``deadline``, rounded up, never negative."""

    elapsed = now.astimezone(timezone.utc) - deadline.astimezone(timezone.utc)
    return max(0, math.ceil(elapsed.total_seconds() / _SECONDS_PER_DAY))


def _render_digest(
    owner: User,
    projects: dict[int, Project],
    tasks_by_project: dict[int, list[Task]],
    members: dict[int, User],
    now: datetime,
) -> str:
    sections: list[str] = []
    for project_id, tasks in tasks_by_project.items():
        project = projects.get(project_id)
        items: list[str] = []
        for task in tasks:
            names = [
                members[m].name or members[m].email or str(m)
                for m in task.assigned_team_members
                if m in members
            ]
            team = ", ".join(names) if names else "Unassigned"
            late = days_overdue(task.deadline, now) if task.deadline else 0
            items.append(
                '<li style="margin:6px 0;">'
                f"<strong>{html.escape(task.title)}</strong>"
                f" - <em>{late} day(s) overdue</em><br/>"
                f'<span style="color:#555">Team Members: {html.escape(team)}</span>'
                "</li>"
            )
        name = project.name if project and project.name else "Untitled Project"
        sections.append(
            '<section style="margin:16px 0;">'
            f'<h3 style="margin:0 0 6px 0;">{html.escape(name)}</h3>'
            f'<ul style="margin:0 0 0 16px; padding:0;">{"".join(items)}</ul>'
            "</section>"
        )

    return (
        f"<p>Hi {html.escape(owner.name or 'Manager')},</p>"
        "<p>Here's your consolidated overdue summary for "
        f"<strong>{now.strftime('%d %b %Y')}</strong>:</p>"
        f"{''.join(sections)}"
        "<p>Please follow up with your team. This is an automated message.</p>"
    )


def send_overdue_digest(
    session: Session,
    channel: DeliveryChannel,
    *,
    now: datetime | None = None,
) -> int:
    """Email each project owner one summary of the overdue tasks in their projects.

    Returns the number of digests accepted by ``channel``.
    """

    now = ensure_app_timezone(now) or now_in_app_timezone()
    projects_by_owner: dict[int, dict[int, Project]] = defaultdict(dict)
    for project in ProjectRepository(session).list_with_owner():
        projects_by_owner[project.created_by][project.id] = project
    if not projects_by_owner:
        return 0

    user_repository = UserRepository(session)
    owners = user_repository.get_map_by_ids(list(projects_by_owner))
    task_repository = TaskRepository(session)
    delivered = 0

    for owner_id, projects in projects_by_owner.items():
        owner = owners.get(owner_id)
        if owner is None or not owner.email:
            continue

        overdue = task_repository.list_overdue(now, project_ids=list(projects))
        if not overdue:
            continue

        tasks_by_project: dict[int, list[Task]] = defaultdict(list)
        for task in overdue:
            tasks_by_project[task.project_id].append(task)
        members = user_repository.get_map_by_ids(
            [m for task in overdue for m in task.assigned_team_members]
        )

        subject = f"[Taskboard] {len(overdue)} overdue item(s) - please follow up"
        body = _render_digest(owner, projects, tasks_by_project, members, now)
        try:
            accepted = channel.deliver(owner.email, subject, body)
        except Exception:
            logger.exception("Overdue digest delivery raised for user %s", owner_id)
            accepted = False
        if accepted:
            delivered += 1
        else:
            logger.error("Overdue digest delivery failed for user %s", owner_id)

    logger.info("Overdue digest at %s: %d email(s) delivered", now.isoformat(), delivered)
    return delivered


__all__ = ["days_overdue", "send_overdue_digest"]
