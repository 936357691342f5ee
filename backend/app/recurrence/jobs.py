"""
Job entry points and process-wide scheduling wiring.

The job functions are registered by textual reference so a persistent job
store can reload them after a restart. Each run opens its own session.
"""

import logging
from datetime import datetime
from typing import Optional

from app.config import settings
from app.database import SessionLocal
from app.recurrence.backend import APSchedulerJobBackend, CronTriggerEvaluator, LoggingNotifier
from app.recurrence.base import Clock, CronEvaluator, JobBackend, Notifier, SystemClock
from app.recurrence.errors import BackendUnavailable
from app.recurrence.reminders import ReminderScheduler
from app.recurrence.scheduler import RecurrenceScheduler
from app.services import housekeeping_service

logger = logging.getLogger(__name__)

JOB_TARGETS = {
    "recurring": "app.recurrence.jobs:fire_recurrence",
    "reminder": "app.recurrence.jobs:fire_reminder",
}
SWEEP_TARGET = "app.recurrence.jobs:sweep_recurrences"

_job_backend: Optional[JobBackend] = None
_notifier: Optional[Notifier] = None
_cron_evaluator: Optional[CronEvaluator] = None
_clock: Optional[Clock] = None


def periodic_jobs():
    """(job id, target, crontab) of every job that runs on a fixed schedule."""
    return [
        ("sweep-recurrences", SWEEP_TARGET, settings.sweep_cron),
        ("check-overdue-tasks", "app.recurrence.jobs:check_overdue_tasks", settings.overdue_check_cron),
        ("check-tasks-due-today", "app.recurrence.jobs:check_tasks_due_today", settings.due_today_check_cron),
        ("archive-completed-tasks", "app.recurrence.jobs:archive_completed_tasks", settings.archive_cron),
    ]


def get_job_backend() -> JobBackend:
    global _job_backend
    if _job_backend is None:
        _job_backend = APSchedulerJobBackend(
            JOB_TARGETS,
            jobstore_url=settings.scheduler_jobstore_url,
            misfire_grace_seconds=settings.scheduler_misfire_grace_seconds,
        )
    return _job_backend


def set_job_backend(backend: Optional[JobBackend]) -> None:
    global _job_backend
    _job_backend = backend


def get_notifier() -> Notifier:
    global _notifier
    if _notifier is None:
        _notifier = LoggingNotifier()
    return _notifier


def set_notifier(notifier: Optional[Notifier]) -> None:
    global _notifier
    _notifier = notifier


def get_cron_evaluator() -> CronEvaluator:
    global _cron_evaluator
    if _cron_evaluator is None:
        _cron_evaluator = CronTriggerEvaluator()
    return _cron_evaluator


def get_clock() -> Clock:
    global _clock
    if _clock is None:
        _clock = SystemClock()
    return _clock


def set_clock(clock: Optional[Clock]) -> None:
    global _clock
    _clock = clock


def fire_recurrence(kind: str, template_id: str, scheduled_for: Optional[datetime] = None) -> None:
    """Runs when a recurring template's next occurrence is due."""
    db = SessionLocal()
    try:
        scheduler = RecurrenceScheduler(db, get_job_backend(), get_clock(), get_cron_evaluator())
        scheduler.process_firing(kind, template_id, scheduled_for)
    finally:
        db.close()


def fire_reminder(reminder_id: str) -> None:
    """Runs when a reminder is due."""
    db = SessionLocal()
    try:
        reminders = ReminderScheduler(db, get_job_backend(), get_notifier(), get_clock())
        reminders.process_reminder(reminder_id)
    finally:
        db.close()


def sweep_recurrences() -> None:
    """Daily safety net: re-arm every recurring template."""
    db = SessionLocal()
    try:
        RecurrenceScheduler(db, get_job_backend(), get_clock(), get_cron_evaluator()).rearm_all()
    finally:
        db.close()


def check_overdue_tasks() -> None:
    """Daily: notify owners of open tasks that are past due."""
    db = SessionLocal()
    try:
        housekeeping_service.notify_overdue_tasks(db, get_notifier(), get_clock().now())
    finally:
        db.close()


def check_tasks_due_today() -> None:
    """Daily: notify owners of open tasks due today."""
    db = SessionLocal()
    try:
        housekeeping_service.notify_tasks_due_today(db, get_notifier(), get_clock().now())
    finally:
        db.close()


def archive_completed_tasks() -> None:
    """Monthly: archive tasks completed long ago."""
    db = SessionLocal()
    try:
        housekeeping_service.archive_completed_tasks(db, get_clock().now(), settings.archive_after_days)
    finally:
        db.close()


def init_scheduling() -> None:
    """Start the job backend and re-arm everything stored in the database."""
    backend = get_job_backend()
    if isinstance(backend, APSchedulerJobBackend):
        backend.start()
        for job_id, target, crontab in periodic_jobs():
            backend.schedule_cron(job_id, target, crontab)

    db = SessionLocal()
    try:
        RecurrenceScheduler(db, backend, get_clock(), get_cron_evaluator()).rearm_all()
        ReminderScheduler(db, backend, get_notifier(), get_clock()).rearm_pending()
    except BackendUnavailable:
        logger.exception("Error re-arming scheduled jobs at startup")
    finally:
        db.close()


def shutdown_scheduling() -> None:
    backend = get_job_backend()
    if isinstance(backend, APSchedulerJobBackend):
        backend.shutdown()
