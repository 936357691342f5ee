"""
Pydantic schemas package.
"""

from app.schemas.category import (
    CategoryCreate,
    CategoryUpdate,
    CategoryResponse,
    CategoryList,
)
from app.schemas.tag import TagResponse
from app.schemas.recurrence import (
    RecurrenceBase,
    RecurrenceCreate,
    RecurrenceUpdate,
    RecurrenceResponse,
)
from app.schemas.reminder import ReminderCreate, ReminderResponse
from app.schemas.task import (
    TaskBase,
    TaskCreate,
    TaskUpdate,
    TaskResponse,
    TaskListResponse,
)
from app.schemas.expense import (
    ExpenseBase,
    ExpenseCreate,
    ExpenseUpdate,
    ExpenseResponse,
    ExpenseListResponse,
)

__all__ = [
    "CategoryCreate",
    "CategoryUpdate",
    "CategoryResponse",
    "CategoryList",
    "TagResponse",
    "RecurrenceBase",
    "RecurrenceCreate",
    "RecurrenceUpdate",
    "RecurrenceResponse",
    "ReminderCreate",
    "ReminderResponse",
    "TaskBase",
    "TaskCreate",
    "TaskUpdate",
    "TaskResponse",
    "TaskListResponse",
    "ExpenseBase",
    "ExpenseCreate",
    "ExpenseUpdate",
    "ExpenseResponse",
    "ExpenseListResponse",
]
