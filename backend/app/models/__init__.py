"""
Database models package.
"""

from app.models.category import Category
from app.models.tag import Tag, task_tags, expense_tags
from app.models.task import TodoTask, TaskPriority, TaskStatus
from app.models.expense import Expense, ExpenseType
from app.models.recurrence import Recurrence, RecurrenceType
from app.models.reminder import TaskReminder, ReminderStatus

__all__ = [
    "Category",
    "Tag",
    "task_tags",
    "expense_tags",
    "TodoTask",
    "TaskPriority",
    "TaskStatus",
    "Expense",
    "ExpenseType",
    "Recurrence",
    "RecurrenceType",
    "TaskReminder",
    "ReminderStatus",
]
