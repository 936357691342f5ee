"""
Task reminder database model.
"""

import uuid
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
import enum
from app.database import Base


class ReminderStatus(str, enum.Enum):
    """Reminder status. Sent is terminal."""
    pending = "pending"
    sent = "sent"


class TaskReminder(Base):
    """One-shot notification for a task at a fixed time."""

    __tablename__ = "task_reminders"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    task_id = Column(String(36), ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True)
    remind_at = Column(DateTime, nullable=False, index=True)
    is_sent = Column(Boolean, default=False, nullable=False)
    sent_at = Column(DateTime, nullable=True)

    # Relationships
    task = relationship("TodoTask", back_populates="reminders")

    @property
    def status(self) -> ReminderStatus:
        return ReminderStatus.sent if self.is_sent else ReminderStatus.pending
