"""
Task API endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from app.dependencies import (
    get_db,
    get_current_user_id,
    get_recurrence_scheduler,
    get_reminder_scheduler,
)
from app.models.task import TaskStatus
from app.recurrence.reminders import ReminderScheduler
from app.recurrence.scheduler import RecurrenceScheduler
from app.schemas.task import TaskCreate, TaskUpdate, TaskResponse, TaskListResponse
from app.services import task_service

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get("", response_model=TaskListResponse)
def list_tasks(
    page: int = Query(1, ge=1),
    per_page: int = Query(50, ge=1, le=100),
    status: Optional[TaskStatus] = None,
    is_recurring: Optional[bool] = None,
    category_id: Optional[str] = None,
    search: Optional[str] = None,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """List tasks with filtering and pagination"""
    tasks, total = task_service.list_tasks(
        db,
        user_id,
        page=page,
        per_page=per_page,
        status=status,
        is_recurring=is_recurring,
        category_id=category_id,
        search=search,
    )
    pages = (total + per_page - 1) // per_page

    return TaskListResponse(
        items=[TaskResponse.model_validate(t) for t in tasks],
        total=total,
        page=page,
        pages=pages
    )


@router.post("", response_model=TaskResponse, status_code=201)
def create_task(
    data: TaskCreate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    scheduler: RecurrenceScheduler = Depends(get_recurrence_scheduler),
    reminders: ReminderScheduler = Depends(get_reminder_scheduler),
):
    """Create a task. Recurring tasks and reminders are scheduled right away."""
    try:
        task = task_service.create_task(db, user_id, data, scheduler, reminders)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return TaskResponse.model_validate(task)


@router.get("/{task_id}", response_model=TaskResponse)
def get_task(
    task_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Get a single task"""
    task = task_service.get_task(db, user_id, task_id)
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    return TaskResponse.model_validate(task)


@router.patch("/{task_id}", response_model=TaskResponse)
def update_task(
    task_id: str,
    update: TaskUpdate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    scheduler: RecurrenceScheduler = Depends(get_recurrence_scheduler),
):
    """Update a task. Changing its recurrence reschedules it."""
    task = task_service.get_task(db, user_id, task_id)
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")

    try:
        task = task_service.update_task(db, task, update, scheduler)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return TaskResponse.model_validate(task)


@router.delete("/{task_id}", status_code=204)
def delete_task(
    task_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    scheduler: RecurrenceScheduler = Depends(get_recurrence_scheduler),
    reminders: ReminderScheduler = Depends(get_reminder_scheduler),
):
    """Delete a task and cancel everything scheduled for it."""
    task = task_service.get_task(db, user_id, task_id)
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")

    task_service.delete_task(db, task, scheduler, reminders)
    return None


@router.get("/{task_id}/occurrences", response_model=List[TaskResponse])
def list_task_occurrences(
    task_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Tasks created from a recurring task."""
    task = task_service.get_task(db, user_id, task_id)
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")

    return [TaskResponse.model_validate(t) for t in task_service.list_occurrences(db, task)]
