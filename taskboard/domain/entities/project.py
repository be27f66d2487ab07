"""Domain entity representing a project grouping tasks."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Project:
    """A project and the manager who owns it."""

    id: int | None
    name: str
    created_by: int | None = None
    created_at: datetime | None = None
