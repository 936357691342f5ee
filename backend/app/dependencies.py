"""
FastAPI dependencies.
"""

from typing import Generator
from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from app.database import SessionLocal
from app.recurrence.jobs import get_clock, get_cron_evaluator, get_job_backend, get_notifier
from app.recurrence.reminders import ReminderScheduler
from app.recurrence.scheduler import RecurrenceScheduler


def get_db() -> Generator[Session, None, None]:
    """
    Dependency for getting database sessions.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_user_id(x_user_id: str = Header(None)) -> str:
    """
    Tenant of the request, taken from the X-User-Id header.
    """
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Missing X-User-Id header")
    return x_user_id


def get_recurrence_scheduler(db: Session = Depends(get_db)) -> RecurrenceScheduler:
    return RecurrenceScheduler(
        db,
        get_job_backend(),
        clock=get_clock(),
        cron_evaluator=get_cron_evaluator(),
    )


def get_reminder_scheduler(db: Session = Depends(get_db)) -> ReminderScheduler:
    return ReminderScheduler(db, get_job_backend(), get_notifier(), clock=get_clock())
