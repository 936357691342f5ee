"""
One-shot task reminders.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from app.config import settings
from app.models.reminder import TaskReminder
from app.models.task import TodoTask, TaskStatus
from app.recurrence.base import Clock, JobBackend, Notifier, SystemClock

logger = logging.getLogger(__name__)


class ReminderScheduler:
    """Schedule reminders on the job backend and deliver them through a notifier."""

    def __init__(
        self,
        db: Session,
        backend: JobBackend,
        notifier: Notifier,
        clock: Optional[Clock] = None,
    ):
        self.db = db
        self.backend = backend
        self.notifier = notifier
        self.clock = clock or SystemClock()

    @staticmethod
    def job_key(reminder_id: str) -> str:
        return f"reminder:{reminder_id}"

    def schedule_reminder(self, reminder: TaskReminder) -> bool:
        """
        Schedule a reminder for its fire time.
        Reminders that are already due are processed in-line instead.
        Returns True when a backend job was registered.
        """
        if reminder.remind_at <= self.clock.now():
            self.process_reminder(reminder.id)
            return False

        self.backend.enqueue(
            self.job_key(reminder.id),
            reminder.remind_at,
            {"reminder_id": reminder.id},
        )
        logger.info(f"Scheduled reminder {reminder.id} for {reminder.remind_at}")
        return True

    def cancel_reminder(self, reminder_id: str) -> None:
        self.backend.remove_if_exists(self.job_key(reminder_id))
        logger.info(f"Cancelled reminder {reminder_id}")

    def process_reminder(self, reminder_id: str) -> bool:
        """Deliver a reminder once. Returns True when a notification was sent."""
        reminder = self.db.query(TaskReminder).filter(TaskReminder.id == reminder_id).first()
        if reminder is None:
            logger.warning(f"Reminder {reminder_id} not found")
            return False

        if reminder.is_sent:
            logger.info(f"Reminder {reminder_id} already sent")
            return False

        task = reminder.task
        now = self.clock.now()

        if task.status == TaskStatus.completed:
            logger.info(f"Skipping reminder for completed task {task.id}")
            reminder.is_sent = True
            reminder.sent_at = now
            self.db.commit()
            return False

        self.notifier.notify(
            task.user_id,
            settings.reminder_subject,
            f"Reminder: Your task '{task.title}' is due soon.",
        )

        reminder.is_sent = True
        reminder.sent_at = now
        self.db.commit()
        logger.info(f"Processed reminder {reminder_id} for task {task.id}")
        return True

    def rearm_pending(self) -> int:
        """
        Schedule every unsent reminder of an unfinished task. Returns how many.
        Reminders that came due while the process was down are delivered now.
        """
        reminders = self.db.query(TaskReminder).join(TodoTask).filter(
            TaskReminder.is_sent == False,
            TodoTask.status != TaskStatus.completed,
        ).all()

        for reminder in reminders:
            self.schedule_reminder(reminder)

        logger.info(f"Re-armed {len(reminders)} pending reminders")
        return len(reminders)
