"""Task endpoints used to create and edit work items and move them between statuses."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from taskboard.application.use_cases.tasks import (
    create_task as create_task_uc,
    get_task as get_task_uc,
    update_task as update_task_uc,
    update_task_status as update_task_status_uc,
)
from taskboard.domain.entities import Task
from taskboard.infrastructure.database import get_db
from taskboard.interfaces.api.schemas import (
    RecurrenceSchema,
    TaskCreate,
    TaskRead,
    TaskStatusChangeRead,
    TaskStatusUpdate,
    TaskUpdate,
)

router = APIRouter(prefix="/tasks", tags=["tasks"])


def _to_read_model(task: Task) -> TaskRead:
    recurrence = None
    if task.recurrence is not None:
        recurrence = RecurrenceSchema.model_validate(task.recurrence.to_payload())
    return TaskRead(
        id=task.id or 0,
        title=task.title,
        description=task.description,
        project_id=task.project_id,
        created_by=task.created_by,
        assigned_team_members=list(task.assigned_team_members),
        status=task.status,
        deadline=task.deadline,
        reminder_offsets=list(task.reminder_offsets),
        completed_at=task.completed_at,
        recurrence=recurrence,
    )


@router.post("/", response_model=TaskRead, status_code=status.HTTP_201_CREATED)
def create_task(task_in: TaskCreate, db: Session = Depends(get_db)) -> TaskRead:
    """Create a task; omitted reminder offsets fall back to 7d, 3d and 1d."""

    recurrence = task_in.recurrence.model_dump() if task_in.recurrence else None
    try:
        task = create_task_uc(
            db,
            title=task_in.title,
            description=task_in.description,
            project_id=task_in.project_id,
            created_by=task_in.created_by,
            assigned_team_members=task_in.assigned_team_members,
            status=task_in.status,
            deadline=task_in.deadline,
            reminder_offsets=task_in.reminder_offsets,
            recurrence=recurrence,
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return _to_read_model(task)


@router.get("/{task_id}", response_model=TaskRead)
def read_task(task_id: int, db: Session = Depends(get_db)) -> TaskRead:
    try:
        task = get_task_uc(db, task_id)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return _to_read_model(task)


@router.patch("/{task_id}", response_model=TaskRead)
def update_task(
    task_id: int,
    task_in: TaskUpdate,
    db: Session = Depends(get_db),
) -> TaskRead:
    """Edit a task; reminder offsets are re-derived from the resulting deadline."""

    update_data = task_in.model_dump(exclude_unset=True)
    try:
        task = update_task_uc(
            db,
            task_id,
            title=update_data.get("title"),
            description=update_data.get("description"),
            assigned_team_members=update_data.get("assigned_team_members"),
            deadline=update_data.get("deadline"),
            deadline_provided="deadline" in update_data,
            reminder_offsets=update_data.get("reminder_offsets"),
            reminder_offsets_provided="reminder_offsets" in update_data,
            recurrence=update_data.get("recurrence"),
            recurrence_provided="recurrence" in update_data,
        )
    except ValueError as exc:
        status_code = status.HTTP_400_BAD_REQUEST
        if str(exc) == "Task not found":
            status_code = status.HTTP_404_NOT_FOUND
        raise HTTPException(status_code=status_code, detail=str(exc)) from exc
    return _to_read_model(task)


@router.patch("/{task_id}/status", response_model=TaskStatusChangeRead)
def update_task_status(
    task_id: int,
    payload: TaskStatusUpdate,
    db: Session = Depends(get_db),
) -> TaskStatusChangeRead:
    """Change the status; completing a recurring task returns its successor."""

    try:
        change = update_task_status_uc(
            db,
            task_id,
            payload.status,
            updated_by=payload.updated_by,
        )
    except ValueError as exc:
        status_code = status.HTTP_400_BAD_REQUEST
        if str(exc) == "Task not found":
            status_code = status.HTTP_404_NOT_FOUND
        raise HTTPException(status_code=status_code, detail=str(exc)) from exc

    successor = _to_read_model(change.successor) if change.successor else None
    return TaskStatusChangeRead(task=_to_read_model(change.task), successor=successor)
