"""Service for task reminders."""

from datetime import datetime
from typing import Optional
from sqlalchemy.orm import Session
import uuid

from app.models.reminder import TaskReminder
from app.models.task import TodoTask
from app.recurrence.reminders import ReminderScheduler
from app.services.recurrence_service import naive_utc


def get_reminder(db: Session, task: TodoTask, reminder_id: str) -> Optional[TaskReminder]:
    return db.query(TaskReminder).filter(
        TaskReminder.id == reminder_id,
        TaskReminder.task_id == task.id
    ).first()


def add_reminder(
    db: Session,
    task: TodoTask,
    remind_at: datetime,
    reminders: ReminderScheduler,
) -> TaskReminder:
    """Save a reminder and schedule it. Reminders already due fire immediately."""
    reminder = TaskReminder(
        id=str(uuid.uuid4()),
        task_id=task.id,
        remind_at=naive_utc(remind_at),
    )
    db.add(reminder)
    db.commit()

    reminders.schedule_reminder(reminder)
    db.refresh(reminder)
    return reminder


def delete_reminder(db: Session, reminder: TaskReminder, reminders: ReminderScheduler) -> None:
    reminders.cancel_reminder(reminder.id)
    db.delete(reminder)
    db.commit()
