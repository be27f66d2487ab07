"""Pydantic models for the task endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator


class RecurrenceSchema(BaseModel):
    """Recurrence rule as submitted and returned by the API."""

    frequency: Literal["daily", "weekly", "monthly"]
    interval: int = Field(default=1, ge=1)
    ends: Literal["never", "onDate"] = "never"
    until: datetime | None = None

    @model_validator(mode="after")
    def _require_until(self) -> "RecurrenceSchema":
        if self.ends == "onDate" and self.until is None:
            raise ValueError("'until' is required when the recurrence ends on a date")
        return self


class TaskCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    project_id: int | None = None
    created_by: int | None = None
    assigned_team_members: list[int] = Field(default_factory=list)
    status: Literal["To Do", "In Progress", "Done"] = "To Do"
    deadline: datetime | None = None
    reminder_offsets: list[int] | None = Field(
        default=None,
        description="Minutes before the deadline; omit for the 7d/3d/1d defaults",
    )
    recurrence: RecurrenceSchema | None = None


class TaskUpdate(BaseModel):
    """Partial edit. Omitted fields keep their value; ``null`` clears the deadline or recurrence."""

    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    assigned_team_members: list[int] | None = None
    deadline: datetime | None = None
    reminder_offsets: list[int] | None = None
    recurrence: RecurrenceSchema | None = None


class TaskStatusUpdate(BaseModel):
    status: Literal["To Do", "In Progress", "Done"]
    updated_by: int | None = None


class TaskRead(BaseModel):
    id: int
    title: str
    description: str
    project_id: int | None = None
    created_by: int | None = None
    assigned_team_members: list[int]
    status: str
    deadline: datetime | None = None
    reminder_offsets: list[int]
    completed_at: datetime | None = None
    recurrence: RecurrenceSchema | None = None


class TaskStatusChangeRead(BaseModel):
    task: TaskRead
    successor: TaskRead | None = None


__all__ = [
    "RecurrenceSchema",
    "TaskCreate",
    "TaskRead",
    "TaskStatusChangeRead",
    "TaskStatusUpdate",
    "TaskUpdate",
]
