"""
Recurrence scheduling engine.
"""

from app.recurrence.base import JobBackend, Clock, SystemClock, CronEvaluator, Notifier
from app.recurrence.errors import (
    RecurrenceError,
    BackendUnavailable,
    ConfigurationError,
    StaleTemplate,
    DuplicateFiring,
)
from app.recurrence.calculator import next_occurrence, days_in_month
from app.recurrence.materializer import materialize
from app.recurrence.scheduler import RecurrenceScheduler
from app.recurrence.reminders import ReminderScheduler

__all__ = [
    "JobBackend",
    "Clock",
    "SystemClock",
    "CronEvaluator",
    "Notifier",
    "RecurrenceError",
    "BackendUnavailable",
    "ConfigurationError",
    "StaleTemplate",
    "DuplicateFiring",
    "next_occurrence",
    "days_in_month",
    "materialize",
    "RecurrenceScheduler",
    "ReminderScheduler",
]
