"""
Recurrence database model.
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Integer, DateTime, Enum, Text, ForeignKey
from sqlalchemy.orm import relationship
import enum
from app.database import Base


class RecurrenceType(str, enum.Enum):
    """Recurrence type enumeration."""
    none = "none"
    daily = "daily"
    weekly = "weekly"
    monthly = "monthly"
    quarterly = "quarterly"
    yearly = "yearly"
    custom = "custom"


class Recurrence(Base):
    """
    How often a recurring task or expense spawns a new occurrence.

    Owned by exactly one template: either `task_id` or `expense_id` is set.
    `next_processing_at` is the commitment registered with the job backend;
    null means nothing is currently scheduled.
    """

    __tablename__ = "recurrences"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    task_id = Column(String(36), ForeignKey("tasks.id", ondelete="CASCADE"), nullable=True, unique=True)
    expense_id = Column(String(36), ForeignKey("expenses.id", ondelete="CASCADE"), nullable=True, unique=True)
    recurrence_type = Column(Enum(RecurrenceType), default=RecurrenceType.none, nullable=False)
    interval = Column(Integer, default=1, nullable=False)  # Every N days/weeks/months/years
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=True)
    day_of_month = Column(Integer, nullable=True)  # 1-31, monthly and quarterly
    day_of_week = Column(Integer, nullable=True)  # 0=Monday .. 6=Sunday, weekly
    custom_expression = Column(Text, nullable=True)  # Crontab, custom only
    last_processed_at = Column(DateTime, nullable=True)
    next_processing_at = Column(DateTime, nullable=True, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    task = relationship("TodoTask", back_populates="recurrence")
    expense = relationship("Expense", back_populates="recurrence")
