"""
Task schemas.
"""

from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

from app.models.task import TaskPriority, TaskStatus
from app.schemas.recurrence import RecurrenceCreate, RecurrenceUpdate, RecurrenceResponse
from app.schemas.reminder import ReminderResponse
from app.schemas.tag import TagResponse


class TaskBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    priority: TaskPriority = TaskPriority.medium
    due_date: Optional[datetime] = None
    category_id: Optional[str] = None


class TaskCreate(TaskBase):
    status: TaskStatus = TaskStatus.not_started
    tags: List[str] = []
    recurrence: Optional[RecurrenceCreate] = None
    reminders: List[datetime] = []


class TaskUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    priority: Optional[TaskPriority] = None
    status: Optional[TaskStatus] = None
    due_date: Optional[datetime] = None
    category_id: Optional[str] = None
    tags: Optional[List[str]] = None
    is_recurring: Optional[bool] = None  # False stops the recurrence
    recurrence: Optional[RecurrenceUpdate] = None


class TaskResponse(TaskBase):
    id: str
    user_id: str
    status: TaskStatus
    completed_at: Optional[datetime] = None
    is_recurring: bool
    recurring_parent_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    tags: List[TagResponse] = []
    recurrence: Optional[RecurrenceResponse] = None
    reminders: List[ReminderResponse] = []

    class Config:
        from_attributes = True


class TaskListResponse(BaseModel):
    items: list[TaskResponse]
    total: int
    page: int
    pages: int
