"""Shared test fixtures."""

import os

# Keep the app from touching a real database or starting the job scheduler
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["SCHEDULER_ENABLED"] = "false"

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient
from datetime import date, datetime
from decimal import Decimal
import uuid

from app.database import Base
from app.dependencies import get_db, get_recurrence_scheduler, get_reminder_scheduler
from app.main import app
from app.models.category import Category
from app.models.tag import Tag
from app.models.task import TodoTask, TaskPriority, TaskStatus
from app.models.expense import Expense, ExpenseType
from app.models.recurrence import Recurrence, RecurrenceType
from app.recurrence.backend import CronTriggerEvaluator
from app.recurrence.base import Clock, JobBackend, Notifier
from app.recurrence.errors import BackendUnavailable
from app.recurrence.reminders import ReminderScheduler
from app.recurrence.scheduler import RecurrenceScheduler

USER_ID = "user-1"
OTHER_USER_ID = "user-2"

# Monday
NOW = datetime(2024, 1, 15, 9, 0)


class RecordingJobBackend(JobBackend):
    """In-memory job backend that records calls and can be switched off."""

    def __init__(self):
        self.jobs = {}
        self.calls = []
        self.fail = False
        self.fail_enqueue = False

    def enqueue(self, key, run_at, payload):
        self.calls.append(("enqueue", key))
        if self.fail or self.fail_enqueue:
            raise BackendUnavailable("job backend down", key=key)
        self.jobs[key] = (run_at, payload)

    def remove_if_exists(self, key):
        self.calls.append(("remove", key))
        if self.fail:
            raise BackendUnavailable("job backend down", key=key)
        self.jobs.pop(key, None)


class FixedClock(Clock):
    def __init__(self, current):
        self.current = current

    def now(self):
        return self.current


class RecordingNotifier(Notifier):
    def __init__(self):
        self.sent = []

    def notify(self, user_id, subject, body):
        self.sent.append((user_id, subject, body))


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database for each test using in-memory SQLite."""
    # Use StaticPool to ensure all connections use the same in-memory database
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    Base.metadata.create_all(bind=engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def job_backend():
    return RecordingJobBackend()


@pytest.fixture
def clock():
    return FixedClock(NOW)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def cron_evaluator():
    return CronTriggerEvaluator()


@pytest.fixture
def scheduler(db_session, job_backend, clock, cron_evaluator):
    return RecurrenceScheduler(db_session, job_backend, clock=clock, cron_evaluator=cron_evaluator)


@pytest.fixture
def reminder_scheduler(db_session, job_backend, notifier, clock):
    return ReminderScheduler(db_session, job_backend, notifier, clock=clock)


@pytest.fixture(scope="function")
def client(db_session, scheduler, reminder_scheduler):
    """Create a test client with database and scheduler overrides."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_recurrence_scheduler] = lambda: scheduler
    app.dependency_overrides[get_reminder_scheduler] = lambda: reminder_scheduler
    with TestClient(app) as test_client:
        test_client.headers.update({"X-User-Id": USER_ID})
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def sample_category(db_session):
    """Create a sample category."""
    category = Category(
        id=str(uuid.uuid4()),
        user_id=USER_ID,
        name="Household",
        color="#22c55e",
        icon="home"
    )
    db_session.add(category)
    db_session.commit()
    db_session.refresh(category)
    return category


@pytest.fixture
def sample_tag(db_session):
    tag = Tag(id=str(uuid.uuid4()), user_id=USER_ID, name="chores")
    db_session.add(tag)
    db_session.commit()
    db_session.refresh(tag)
    return tag


@pytest.fixture
def sample_task(db_session, sample_category):
    """Create a plain, non-recurring task."""
    task = TodoTask(
        id=str(uuid.uuid4()),
        user_id=USER_ID,
        title="Renew passport",
        priority=TaskPriority.high,
        status=TaskStatus.not_started,
        due_date=datetime(2024, 2, 1, 12, 0),
        category_id=sample_category.id,
        created_at=datetime(2024, 1, 1, 9, 0),
        updated_at=datetime(2024, 1, 1, 9, 0),
    )
    db_session.add(task)
    db_session.commit()
    db_session.refresh(task)
    return task


@pytest.fixture
def recurring_task(db_session, sample_category, sample_tag):
    """Create a task that repeats monthly from Jan 10, due two days after creation."""
    task = TodoTask(
        id=str(uuid.uuid4()),
        user_id=USER_ID,
        title="Water the plants",
        description="All of them",
        priority=TaskPriority.medium,
        status=TaskStatus.in_progress,
        due_date=datetime(2024, 1, 3, 9, 0),
        category_id=sample_category.id,
        is_recurring=True,
        created_at=datetime(2024, 1, 1, 9, 0),
        updated_at=datetime(2024, 1, 1, 9, 0),
    )
    task.tags = [sample_tag]
    task.recurrence = Recurrence(
        id=str(uuid.uuid4()),
        recurrence_type=RecurrenceType.monthly,
        interval=1,
        start_date=datetime(2024, 1, 10),
    )
    db_session.add(task)
    db_session.commit()
    db_session.refresh(task)
    return task


@pytest.fixture
def recurring_expense(db_session, sample_category):
    """Create an expense that repeats monthly from Jan 10."""
    expense = Expense(
        id=str(uuid.uuid4()),
        user_id=USER_ID,
        amount=Decimal("15.99"),
        description="Streaming subscription",
        date=date(2024, 1, 10),
        expense_type=ExpenseType.regular,
        category_id=sample_category.id,
        payment_method="card",
        is_recurring=True,
        created_at=datetime(2024, 1, 10, 8, 0),
        updated_at=datetime(2024, 1, 10, 8, 0),
    )
    expense.recurrence = Recurrence(
        id=str(uuid.uuid4()),
        recurrence_type=RecurrenceType.monthly,
        interval=1,
        start_date=datetime(2024, 1, 10),
    )
    db_session.add(expense)
    db_session.commit()
    db_session.refresh(expense)
    return expense
