"""
Expense database model.
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, Date, Numeric, Enum, Text, ForeignKey, Index
from sqlalchemy.orm import relationship
import enum
from app.database import Base
from app.models.tag import expense_tags


class ExpenseType(str, enum.Enum):
    """Expense type enumeration."""
    regular = "regular"
    income = "income"
    transfer = "transfer"
    adjustment = "adjustment"


class Expense(Base):
    """Expense model. A recurring expense is the template its occurrences are copied from."""

    __tablename__ = "expenses"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(64), nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False)
    description = Column(Text, nullable=True)
    date = Column(Date, nullable=False, index=True)
    expense_type = Column(Enum(ExpenseType), default=ExpenseType.regular, nullable=False)
    category_id = Column(String(36), ForeignKey("categories.id"), nullable=True)
    payment_method = Column(String(100), nullable=True)
    receipt_url = Column(String(500), nullable=True)
    is_recurring = Column(Boolean, default=False, nullable=False)
    recurring_parent_id = Column(String(36), ForeignKey("expenses.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    category = relationship("Category", back_populates="expenses")
    tags = relationship("Tag", secondary=expense_tags)
    recurrence = relationship(
        "Recurrence",
        back_populates="expense",
        uselist=False,
        cascade="all, delete-orphan",
    )

    # Indexes for common queries
    __table_args__ = (
        Index("idx_expense_user_date", "user_id", "date"),
        Index("idx_expense_parent", "recurring_parent_id"),
    )
