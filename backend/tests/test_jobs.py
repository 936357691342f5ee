"""Tests for the job entry points run by the scheduler."""

import pytest
from datetime import datetime
import uuid

from app.models.reminder import TaskReminder
from app.models.task import TodoTask
from app.recurrence import jobs


@pytest.fixture
def job_wiring(monkeypatch, db_session, job_backend, notifier):
    """Point the job entry points at the test session and fakes."""
    monkeypatch.setattr(jobs, "SessionLocal", lambda: db_session)
    jobs.set_job_backend(job_backend)
    jobs.set_notifier(notifier)
    yield
    jobs.set_job_backend(None)
    jobs.set_notifier(None)


def test_fire_recurrence(job_wiring, db_session, job_backend, recurring_task):
    task_id = recurring_task.id

    jobs.fire_recurrence("task", task_id, None)

    occurrences = db_session.query(TodoTask).filter(TodoTask.recurring_parent_id == task_id).all()
    assert len(occurrences) == 1
    assert f"recurring:{task_id}" in job_backend.jobs


def test_fire_reminder(job_wiring, db_session, notifier, sample_task):
    reminder_id = str(uuid.uuid4())
    db_session.add(TaskReminder(id=reminder_id, task_id=sample_task.id, remind_at=datetime(2024, 1, 1)))
    db_session.commit()

    jobs.fire_reminder(reminder_id)

    assert len(notifier.sent) == 1


def test_sweep_recurrences(job_wiring, job_backend, recurring_task, recurring_expense):
    expected = {f"recurring:{recurring_task.id}", f"recurring:{recurring_expense.id}"}

    jobs.sweep_recurrences()

    assert set(job_backend.jobs) == expected


def test_init_scheduling_rearms_everything(job_wiring, db_session, job_backend, recurring_task, sample_task):
    reminder_id = str(uuid.uuid4())
    db_session.add(TaskReminder(id=reminder_id, task_id=sample_task.id, remind_at=datetime(2999, 1, 1)))
    db_session.commit()
    task_id = recurring_task.id

    jobs.init_scheduling()

    assert f"recurring:{task_id}" in job_backend.jobs
    assert f"reminder:{reminder_id}" in job_backend.jobs
