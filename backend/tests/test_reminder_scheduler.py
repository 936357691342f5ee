"""Tests for task reminders."""

from datetime import datetime
import uuid

from app.models.reminder import ReminderStatus, TaskReminder
from app.models.task import TaskStatus
from app.recurrence.reminders import ReminderScheduler


def add_reminder(db_session, task, remind_at, is_sent=False):
    reminder = TaskReminder(id=str(uuid.uuid4()), task_id=task.id, remind_at=remind_at, is_sent=is_sent)
    db_session.add(reminder)
    db_session.commit()
    db_session.refresh(reminder)
    return reminder


class TestScheduleReminder:
    """Test scheduling reminders."""

    def test_job_key(self):
        assert ReminderScheduler.job_key("abc") == "reminder:abc"

    def test_future_reminder_is_enqueued(self, db_session, reminder_scheduler, job_backend, notifier, sample_task):
        reminder = add_reminder(db_session, sample_task, datetime(2024, 1, 20, 8, 0))

        assert reminder_scheduler.schedule_reminder(reminder) is True

        run_at, payload = job_backend.jobs[f"reminder:{reminder.id}"]
        assert run_at == datetime(2024, 1, 20, 8, 0)
        assert payload == {"reminder_id": reminder.id}
        assert notifier.sent == []
        assert reminder.status == ReminderStatus.pending

    def test_past_reminder_fires_immediately(self, db_session, reminder_scheduler, job_backend, notifier, sample_task):
        reminder = add_reminder(db_session, sample_task, datetime(2024, 1, 14, 8, 0))

        assert reminder_scheduler.schedule_reminder(reminder) is False

        assert job_backend.jobs == {}
        assert len(notifier.sent) == 1
        user_id, subject, body = notifier.sent[0]
        assert user_id == sample_task.user_id
        assert subject == "Task Reminder"
        assert "Renew passport" in body

        db_session.refresh(reminder)
        assert reminder.is_sent is True
        assert reminder.sent_at == datetime(2024, 1, 15, 9, 0)
        assert reminder.status == ReminderStatus.sent

    def test_cancel_reminder(self, db_session, reminder_scheduler, job_backend, sample_task):
        reminder = add_reminder(db_session, sample_task, datetime(2024, 1, 20, 8, 0))
        reminder_scheduler.schedule_reminder(reminder)

        reminder_scheduler.cancel_reminder(reminder.id)
        reminder_scheduler.cancel_reminder(reminder.id)

        assert job_backend.jobs == {}


class TestProcessReminder:
    """Test delivering reminders."""

    def test_delivers_once(self, db_session, reminder_scheduler, notifier, sample_task):
        reminder = add_reminder(db_session, sample_task, datetime(2024, 1, 15, 9, 0))

        assert reminder_scheduler.process_reminder(reminder.id) is True
        assert reminder_scheduler.process_reminder(reminder.id) is False

        assert len(notifier.sent) == 1

    def test_completed_task_is_not_notified(self, db_session, reminder_scheduler, notifier, sample_task):
        sample_task.status = TaskStatus.completed
        db_session.commit()
        reminder = add_reminder(db_session, sample_task, datetime(2024, 1, 15, 9, 0))

        assert reminder_scheduler.process_reminder(reminder.id) is False

        assert notifier.sent == []
        db_session.refresh(reminder)
        assert reminder.is_sent is True

    def test_missing_reminder(self, reminder_scheduler, notifier):
        assert reminder_scheduler.process_reminder("gone") is False
        assert notifier.sent == []


class TestRearmPending:
    """Test re-arming reminders at startup."""

    def test_rearms_unsent_reminders(self, db_session, reminder_scheduler, job_backend, notifier, sample_task):
        future = add_reminder(db_session, sample_task, datetime(2024, 1, 20, 8, 0))
        overdue = add_reminder(db_session, sample_task, datetime(2024, 1, 14, 8, 0))
        add_reminder(db_session, sample_task, datetime(2024, 1, 21, 8, 0), is_sent=True)

        assert reminder_scheduler.rearm_pending() == 2

        assert list(job_backend.jobs) == [f"reminder:{future.id}"]
        assert len(notifier.sent) == 1
        db_session.refresh(overdue)
        assert overdue.is_sent is True

    def test_skips_completed_tasks(self, db_session, reminder_scheduler, job_backend, sample_task):
        add_reminder(db_session, sample_task, datetime(2024, 1, 20, 8, 0))
        sample_task.status = TaskStatus.completed
        db_session.commit()

        assert reminder_scheduler.rearm_pending() == 0
        assert job_backend.jobs == {}
