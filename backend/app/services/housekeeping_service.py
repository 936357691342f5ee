"""Service for the periodic task checks: due-date notifications and archiving."""

import logging
from datetime import datetime, timedelta
from typing import List
from sqlalchemy.orm import Session

from app.models.task import TodoTask, TaskStatus
from app.recurrence.base import Notifier

logger = logging.getLogger(__name__)

CLOSED_STATUSES = (TaskStatus.completed, TaskStatus.archived)


def _open_tasks(db: Session):
    # Recurring templates are not work items; their occurrences are
    return db.query(TodoTask).filter(
        TodoTask.status.notin_(CLOSED_STATUSES),
        TodoTask.is_recurring == False,
        TodoTask.due_date.isnot(None),
    )


def _start_of_day(now: datetime) -> datetime:
    return datetime(now.year, now.month, now.day)


def get_overdue_tasks(db: Session, now: datetime) -> List[TodoTask]:
    """Open tasks whose due date is before today."""
    return _open_tasks(db).filter(
        TodoTask.due_date < _start_of_day(now)
    ).order_by(TodoTask.due_date).all()


def get_tasks_due_today(db: Session, now: datetime) -> List[TodoTask]:
    """Open tasks due at any time today."""
    today = _start_of_day(now)
    return _open_tasks(db).filter(
        TodoTask.due_date >= today,
        TodoTask.due_date < today + timedelta(days=1)
    ).order_by(TodoTask.due_date).all()


def notify_overdue_tasks(db: Session, notifier: Notifier, now: datetime) -> int:
    """Send one notification per overdue task. Returns how many were sent."""
    tasks = get_overdue_tasks(db, now)
    for task in tasks:
        notifier.notify(
            task.user_id,
            f"Overdue Task: {task.title}",
            f"'{task.title}' was due {task.due_date:%Y-%m-%d %H:%M} UTC."
        )
        logger.info(f"Sent overdue notification for task {task.id} to user {task.user_id}")
    return len(tasks)


def notify_tasks_due_today(db: Session, notifier: Notifier, now: datetime) -> int:
    """Send one notification per task due today. Returns how many were sent."""
    tasks = get_tasks_due_today(db, now)
    for task in tasks:
        notifier.notify(
            task.user_id,
            f"Task Due Today: {task.title}",
            f"'{task.title}' is due today at {task.due_date:%H:%M} UTC."
        )
        logger.info(f"Sent due today notification for task {task.id} to user {task.user_id}")
    return len(tasks)


def archive_completed_tasks(db: Session, now: datetime, days_to_keep: int = 90) -> int:
    """Archive tasks completed more than `days_to_keep` days ago. Returns the count."""
    cutoff = now - timedelta(days=days_to_keep)
    tasks = db.query(TodoTask).filter(
        TodoTask.status == TaskStatus.completed,
        TodoTask.completed_at.isnot(None),
        TodoTask.completed_at < cutoff
    ).all()

    for task in tasks:
        task.status = TaskStatus.archived
        task.updated_at = now

    db.commit()
    logger.info(f"Archived {len(tasks)} completed tasks older than {days_to_keep} days")
    return len(tasks)
