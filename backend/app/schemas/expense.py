"""
Expense schemas.
"""

from pydantic import BaseModel, Field
from typing import List, Optional
import datetime as dt
from decimal import Decimal

from app.models.expense import ExpenseType
from app.schemas.recurrence import RecurrenceCreate, RecurrenceUpdate, RecurrenceResponse
from app.schemas.tag import TagResponse


class ExpenseBase(BaseModel):
    amount: Decimal = Field(..., max_digits=12, decimal_places=2)
    description: Optional[str] = None
    date: dt.date
    expense_type: ExpenseType = ExpenseType.regular
    category_id: Optional[str] = None
    payment_method: Optional[str] = Field(None, max_length=100)
    receipt_url: Optional[str] = Field(None, max_length=500)


class ExpenseCreate(ExpenseBase):
    tags: List[str] = []
    recurrence: Optional[RecurrenceCreate] = None


class ExpenseUpdate(BaseModel):
    amount: Optional[Decimal] = Field(None, max_digits=12, decimal_places=2)
    description: Optional[str] = None
    date: Optional[dt.date] = None
    expense_type: Optional[ExpenseType] = None
    category_id: Optional[str] = None
    payment_method: Optional[str] = Field(None, max_length=100)
    receipt_url: Optional[str] = Field(None, max_length=500)
    tags: Optional[List[str]] = None
    is_recurring: Optional[bool] = None  # False stops the recurrence
    recurrence: Optional[RecurrenceUpdate] = None


class ExpenseResponse(ExpenseBase):
    id: str
    user_id: str
    is_recurring: bool
    recurring_parent_id: Optional[str] = None
    created_at: dt.datetime
    updated_at: dt.datetime
    tags: List[TagResponse] = []
    recurrence: Optional[RecurrenceResponse] = None

    class Config:
        from_attributes = True


class ExpenseListResponse(BaseModel):
    items: list[ExpenseResponse]
    total: int
    page: int
    pages: int
