"""Service for task management, including recurring task templates."""

import logging
from typing import List, Optional, Tuple
from sqlalchemy.orm import Session
from sqlalchemy import or_
import uuid

from app.models.recurrence import RecurrenceType
from app.models.reminder import TaskReminder
from app.models.task import TodoTask, TaskStatus
from app.recurrence.errors import BackendUnavailable
from app.recurrence.reminders import ReminderScheduler
from app.recurrence.scheduler import RecurrenceScheduler
from app.schemas.task import TaskCreate, TaskUpdate
from app.services import category_service, recurrence_service, tag_service
from app.services.recurrence_service import naive_utc

logger = logging.getLogger(__name__)


def get_task(db: Session, user_id: str, task_id: str) -> Optional[TodoTask]:
    """Get a task owned by the user."""
    return db.query(TodoTask).filter(
        TodoTask.id == task_id,
        TodoTask.user_id == user_id
    ).first()


def list_tasks(
    db: Session,
    user_id: str,
    page: int = 1,
    per_page: int = 50,
    status: Optional[TaskStatus] = None,
    is_recurring: Optional[bool] = None,
    category_id: Optional[str] = None,
    search: Optional[str] = None,
) -> Tuple[List[TodoTask], int]:
    """List the user's tasks with filtering and pagination. Returns (tasks, total)."""
    query = db.query(TodoTask).filter(TodoTask.user_id == user_id)

    if status:
        query = query.filter(TodoTask.status == status)
    if is_recurring is not None:
        query = query.filter(TodoTask.is_recurring == is_recurring)
    if category_id:
        query = query.filter(TodoTask.category_id == category_id)
    if search:
        search_term = f"%{search}%"
        query = query.filter(
            or_(
                TodoTask.title.ilike(search_term),
                TodoTask.description.ilike(search_term)
            )
        )

    total = query.count()

    query = query.order_by(TodoTask.due_date.is_(None), TodoTask.due_date, TodoTask.created_at.desc())
    tasks = query.offset((page - 1) * per_page).limit(per_page).all()
    return tasks, total


def list_occurrences(db: Session, task: TodoTask) -> List[TodoTask]:
    """Tasks materialized from a recurring task, newest first."""
    return db.query(TodoTask).filter(
        TodoTask.recurring_parent_id == task.id
    ).order_by(TodoTask.created_at.desc()).all()


def create_task(
    db: Session,
    user_id: str,
    data: TaskCreate,
    scheduler: RecurrenceScheduler,
    reminders: ReminderScheduler,
) -> TodoTask:
    """
    Create a task, then schedule its recurrence and reminders.
    Raises ValueError for invalid references or recurrence settings.
    """
    now = scheduler.clock.now()
    category_service.require_category(db, user_id, data.category_id)

    task = TodoTask(
        id=str(uuid.uuid4()),
        user_id=user_id,
        title=data.title,
        description=data.description,
        priority=data.priority,
        status=data.status,
        due_date=naive_utc(data.due_date),
        category_id=data.category_id,
        completed_at=now if data.status == TaskStatus.completed else None,
        created_at=now,
        updated_at=now,
    )
    task.tags = tag_service.get_or_create_tags(db, user_id, data.tags)

    if data.recurrence is not None and data.recurrence.recurrence_type != RecurrenceType.none:
        recurrence_service.set_recurrence(task, data.recurrence.model_dump(), now, scheduler.cron_evaluator)

    for remind_at in data.reminders:
        task.reminders.append(TaskReminder(id=str(uuid.uuid4()), remind_at=naive_utc(remind_at)))

    db.add(task)
    db.commit()
    db.refresh(task)
    logger.info(f"Created task {task.id} for user {user_id}")

    if task.is_recurring:
        scheduler.schedule(task)
    for reminder in list(task.reminders):
        reminders.schedule_reminder(reminder)

    db.refresh(task)
    return task


def update_task(
    db: Session,
    task: TodoTask,
    data: TaskUpdate,
    scheduler: RecurrenceScheduler,
) -> TodoTask:
    """
    Apply a partial update. Recurrence changes re-arm the task; turning
    recurrence off cancels it.
    """
    now = scheduler.clock.now()
    update_data = data.model_dump(exclude_unset=True)
    tag_names = update_data.pop("tags", None)
    is_recurring = update_data.pop("is_recurring", None)
    recurrence_data = update_data.pop("recurrence", None)

    if update_data.get("category_id"):
        category_service.require_category(db, task.user_id, update_data["category_id"])
    if "due_date" in update_data:
        update_data["due_date"] = naive_utc(update_data["due_date"])

    for field, value in update_data.items():
        if value is None and field in ("title", "priority", "status"):
            continue
        setattr(task, field, value)

    if update_data.get("status") == TaskStatus.completed:
        if task.completed_at is None:
            task.completed_at = now
    elif update_data.get("status") is not None:
        task.completed_at = None

    if tag_names is not None:
        task.tags = tag_service.get_or_create_tags(db, task.user_id, tag_names)

    recurrence_changed = False
    if recurrence_service.stops_recurring(is_recurring, recurrence_data):
        recurrence_changed = recurrence_service.clear_recurrence(task)
    elif recurrence_data or is_recurring:
        recurrence_service.set_recurrence(task, recurrence_data, now, scheduler.cron_evaluator)
        recurrence_changed = True

    task.updated_at = now
    if recurrence_changed:
        # The scheduler commits the pending changes once the job backend agrees
        db.flush()
        try:
            if task.is_recurring:
                scheduler.update(task)
            else:
                scheduler.cancel(task.id)
        except BackendUnavailable:
            db.rollback()
            raise
    else:
        db.commit()

    db.refresh(task)
    return task


def delete_task(
    db: Session,
    task: TodoTask,
    scheduler: RecurrenceScheduler,
    reminders: ReminderScheduler,
) -> None:
    """Cancel everything scheduled for a task, then delete it."""
    task_id = task.id
    scheduler.cancel(task_id)
    for reminder in task.reminders:
        reminders.cancel_reminder(reminder.id)

    db.delete(task)
    db.commit()
    logger.info(f"Deleted task {task_id}")
