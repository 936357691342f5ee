"""
Task reminder schemas.
"""

from pydantic import BaseModel
from typing import Optional
from datetime import datetime

from app.models.reminder import ReminderStatus


class ReminderCreate(BaseModel):
    remind_at: datetime


class ReminderResponse(BaseModel):
    id: str
    task_id: str
    remind_at: datetime
    is_sent: bool
    sent_at: Optional[datetime] = None
    status: ReminderStatus

    class Config:
        from_attributes = True
