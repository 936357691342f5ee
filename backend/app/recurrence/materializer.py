"""
Spawning concrete occurrences from recurring templates.
"""

import logging
import uuid
from datetime import datetime
from typing import Optional, Tuple, Union

from app.models.expense import Expense
from app.models.recurrence import Recurrence
from app.models.task import TodoTask, TaskStatus
from app.recurrence.base import CronEvaluator
from app.recurrence.calculator import as_date, next_occurrence
from app.recurrence.errors import StaleTemplate, DuplicateFiring

logger = logging.getLogger(__name__)

Template = Union[TodoTask, Expense]


def check_template(template: Template, now: datetime) -> Recurrence:
    """Return the template's recurrence, raising StaleTemplate if it should no longer fire."""
    if not template.is_recurring:
        raise StaleTemplate(template.id, "not recurring anymore")

    recurrence = template.recurrence
    if recurrence is None:
        raise StaleTemplate(template.id, "recurrence info missing")

    if recurrence.end_date is not None and as_date(recurrence.end_date) < now.date():
        raise StaleTemplate(template.id, "end date reached")

    return recurrence


def copy_task(template: TodoTask, now: datetime) -> TodoTask:
    """New, non-recurring task with the template's business fields and a fresh status."""
    task = TodoTask(
        id=str(uuid.uuid4()),
        user_id=template.user_id,
        title=template.title,
        description=template.description,
        priority=template.priority,
        status=TaskStatus.not_started,
        category_id=template.category_id,
        is_recurring=False,
        recurring_parent_id=template.id,
        created_at=now,
        updated_at=now,
    )

    # Keep the template's lead time between creation and due date
    if template.due_date is not None:
        task.due_date = now + (template.due_date - (template.created_at or now))

    task.tags = list(template.tags)
    return task


def copy_expense(template: Expense, now: datetime) -> Expense:
    """New, non-recurring expense dated today."""
    expense = Expense(
        id=str(uuid.uuid4()),
        user_id=template.user_id,
        amount=template.amount,
        description=template.description,
        date=now.date(),
        expense_type=template.expense_type,
        category_id=template.category_id,
        payment_method=template.payment_method,
        receipt_url=template.receipt_url,
        is_recurring=False,
        recurring_parent_id=template.id,
        created_at=now,
        updated_at=now,
    )
    expense.tags = list(template.tags)
    return expense


def materialize(
    template: Template,
    now: datetime,
    scheduled_for: Optional[datetime] = None,
    cron_evaluator: Optional[CronEvaluator] = None,
) -> Tuple[Template, Recurrence]:
    """
    Create the next occurrence of a recurring template and advance its recurrence.

    The new instance is returned unsaved; the caller adds it to the session.
    `scheduled_for` is the commitment the firing was armed for. A firing whose
    commitment was already processed raises DuplicateFiring.
    """
    recurrence = check_template(template, now)

    if (
        scheduled_for is not None
        and recurrence.last_processed_at is not None
        and recurrence.last_processed_at >= scheduled_for
    ):
        raise DuplicateFiring(template.id, scheduled_for)

    if isinstance(template, TodoTask):
        instance = copy_task(template, now)
    elif isinstance(template, Expense):
        instance = copy_expense(template, now)
    else:
        raise TypeError(f"Cannot materialize {type(template).__name__}")

    recurrence.last_processed_at = now
    recurrence.next_processing_at = next_occurrence(recurrence, now, cron_evaluator)

    logger.info(f"Created instance {instance.id} of recurring {type(template).__name__} {template.id}")
    return instance, recurrence
