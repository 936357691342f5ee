"""
Base classes for the collaborators the recurrence engine talks to.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, Optional


class JobBackend(ABC):
    """Durable, at-least-once delivery of callbacks at a target time."""

    @abstractmethod
    def enqueue(self, key: str, run_at: datetime, payload: Dict[str, Any]) -> None:
        """
        Register a one-shot job under `key`.
        Re-enqueuing an existing key replaces the pending job.
        """
        pass

    @abstractmethod
    def remove_if_exists(self, key: str) -> None:
        """Remove the job under `key`. Missing jobs are not an error."""
        pass


class Clock(ABC):
    """Source of the reference time."""

    @abstractmethod
    def now(self) -> datetime:
        pass


class SystemClock(Clock):
    """Naive UTC wall clock."""

    def now(self) -> datetime:
        return datetime.utcnow()


class CronEvaluator(ABC):
    """Resolves custom recurrence expressions."""

    @abstractmethod
    def next_from_expression(self, expression: str, after: datetime) -> Optional[datetime]:
        """
        Return the first fire time strictly after `after`.
        Raises ValueError when the expression cannot be parsed.
        """
        pass


class Notifier(ABC):
    """Fire-and-forget user notifications."""

    @abstractmethod
    def notify(self, user_id: str, subject: str, body: str) -> None:
        pass
