"""
Task reminder API endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List

from app.dependencies import get_db, get_current_user_id, get_reminder_scheduler
from app.recurrence.reminders import ReminderScheduler
from app.schemas.reminder import ReminderCreate, ReminderResponse
from app.services import reminder_service, task_service

router = APIRouter(prefix="/tasks/{task_id}/reminders", tags=["reminders"])


def _get_task_or_404(db: Session, user_id: str, task_id: str):
    task = task_service.get_task(db, user_id, task_id)
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    return task


@router.get("", response_model=List[ReminderResponse])
def list_reminders(
    task_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """List a task's reminders."""
    task = _get_task_or_404(db, user_id, task_id)
    return [ReminderResponse.model_validate(r) for r in task.reminders]


@router.post("", response_model=ReminderResponse, status_code=201)
def create_reminder(
    task_id: str,
    data: ReminderCreate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    reminders: ReminderScheduler = Depends(get_reminder_scheduler),
):
    """Add a reminder. A reminder time in the past is delivered immediately."""
    task = _get_task_or_404(db, user_id, task_id)
    reminder = reminder_service.add_reminder(db, task, data.remind_at, reminders)
    return ReminderResponse.model_validate(reminder)


@router.delete("/{reminder_id}", status_code=204)
def delete_reminder(
    task_id: str,
    reminder_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    reminders: ReminderScheduler = Depends(get_reminder_scheduler),
):
    """Delete a reminder and cancel its job."""
    task = _get_task_or_404(db, user_id, task_id)
    reminder = reminder_service.get_reminder(db, task, reminder_id)
    if not reminder:
        raise HTTPException(status_code=404, detail="Reminder not found")

    reminder_service.delete_reminder(db, reminder, reminders)
    return None
