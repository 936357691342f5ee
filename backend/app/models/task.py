"""
Task database model.
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, Enum, Text, ForeignKey, Index
from sqlalchemy.orm import relationship
import enum
from app.database import Base
from app.models.tag import task_tags


class TaskPriority(str, enum.Enum):
    """Task priority enumeration."""
    low = "low"
    medium = "medium"
    high = "high"
    urgent = "urgent"


class TaskStatus(str, enum.Enum):
    """Task status enumeration."""
    not_started = "not_started"
    in_progress = "in_progress"
    completed = "completed"
    archived = "archived"


class TodoTask(Base):
    """Task model. A recurring task is the template its occurrences are copied from."""

    __tablename__ = "tasks"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(64), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    priority = Column(Enum(TaskPriority), default=TaskPriority.medium, nullable=False)
    status = Column(Enum(TaskStatus), default=TaskStatus.not_started, nullable=False)
    due_date = Column(DateTime, nullable=True)
    completed_at = Column(DateTime, nullable=True)
    category_id = Column(String(36), ForeignKey("categories.id"), nullable=True)
    is_recurring = Column(Boolean, default=False, nullable=False)
    recurring_parent_id = Column(String(36), ForeignKey("tasks.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    category = relationship("Category", back_populates="tasks")
    tags = relationship("Tag", secondary=task_tags)
    recurrence = relationship(
        "Recurrence",
        back_populates="task",
        uselist=False,
        cascade="all, delete-orphan",
    )
    reminders = relationship(
        "TaskReminder",
        back_populates="task",
        cascade="all, delete-orphan",
        order_by="TaskReminder.remind_at",
    )

    __table_args__ = (
        Index("idx_task_user_status", "user_id", "status"),
        Index("idx_task_parent", "recurring_parent_id"),
    )
