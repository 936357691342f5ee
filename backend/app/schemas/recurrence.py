"""
Recurrence schemas.
"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from app.models.recurrence import RecurrenceType


class RecurrenceBase(BaseModel):
    recurrence_type: RecurrenceType
    interval: int = Field(1, ge=1, le=1000)
    start_date: Optional[datetime] = None  # Defaults to creation time
    end_date: Optional[datetime] = None
    day_of_month: Optional[int] = Field(None, ge=1, le=31)
    day_of_week: Optional[int] = Field(None, ge=0, le=6)  # 0=Monday
    custom_expression: Optional[str] = Field(None, max_length=100)


class RecurrenceCreate(RecurrenceBase):
    pass


class RecurrenceUpdate(BaseModel):
    recurrence_type: Optional[RecurrenceType] = None
    interval: Optional[int] = Field(None, ge=1, le=1000)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    day_of_month: Optional[int] = Field(None, ge=1, le=31)
    day_of_week: Optional[int] = Field(None, ge=0, le=6)
    custom_expression: Optional[str] = Field(None, max_length=100)


class RecurrenceResponse(RecurrenceBase):
    id: str
    start_date: datetime
    last_processed_at: Optional[datetime] = None
    next_processing_at: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True
