"""
Binding recurrences to the job backend.

Each recurring template has at most one live job, always stored under the
same key. Every firing materializes one occurrence and arms the next one,
so irregular intervals never need a native "repeat forever" job.
"""

import logging
from datetime import datetime
from typing import Optional, Union

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.models.expense import Expense
from app.models.recurrence import Recurrence
from app.models.task import TodoTask
from app.recurrence.base import Clock, CronEvaluator, JobBackend, SystemClock
from app.recurrence.calculator import next_occurrence
from app.recurrence.errors import BackendUnavailable, DuplicateFiring, StaleTemplate
from app.recurrence.materializer import materialize

logger = logging.getLogger(__name__)

TEMPLATE_MODELS = {
    "task": TodoTask,
    "expense": Expense,
}


def template_kind(template: Union[TodoTask, Expense]) -> str:
    """Short name used in job payloads."""
    for kind, model in TEMPLATE_MODELS.items():
        if isinstance(template, model):
            return kind
    raise TypeError(f"Not a recurring template: {type(template).__name__}")


class RecurrenceScheduler:
    """Schedule, update and cancel the next occurrence of recurring templates."""

    def __init__(
        self,
        db: Session,
        backend: JobBackend,
        clock: Optional[Clock] = None,
        cron_evaluator: Optional[CronEvaluator] = None,
    ):
        self.db = db
        self.backend = backend
        self.clock = clock or SystemClock()
        self.cron_evaluator = cron_evaluator

    @staticmethod
    def job_key(template_id: str) -> str:
        return f"recurring:{template_id}"

    def schedule(self, template: Union[TodoTask, Expense]) -> Optional[datetime]:
        """
        Arm the next occurrence of a template and commit the new commitment.
        Returns the committed time, or None when nothing is scheduled.
        """
        next_at = self._arm(template)
        self.db.commit()
        return next_at

    def update(self, template: Union[TodoTask, Expense]) -> Optional[datetime]:
        """
        Replace whatever is scheduled for a template with its current recurrence,
        committing the template's pending changes together with the new commitment.

        If the backend fails before the old job is removed, nothing is committed
        and the caller rolls back. If it fails afterwards, the pending changes are
        dropped and the stored commitment is cleared, since no job backs it anymore.
        """
        template_id = template.id
        self.backend.remove_if_exists(self.job_key(template_id))
        if template.recurrence is not None:
            template.recurrence.next_processing_at = None

        try:
            next_at = self._arm(template)
        except BackendUnavailable:
            self.db.rollback()
            self._clear_commitment(template_id)
            self.db.commit()
            raise

        self.db.commit()
        return next_at

    def cancel(self, template_id: str) -> None:
        """Remove the template's job and clear its commitment. Idempotent."""
        self.backend.remove_if_exists(self.job_key(template_id))
        self._clear_commitment(template_id)
        self.db.commit()
        logger.info(f"Cancelled recurring template {template_id}")

    def process_firing(
        self,
        kind: str,
        template_id: str,
        scheduled_for: Optional[datetime] = None,
    ) -> Optional[Union[TodoTask, Expense]]:
        """
        Job callback: materialize one occurrence and arm the next, atomically.
        Returns the new instance, or None when the firing was skipped.
        """
        model = TEMPLATE_MODELS.get(kind)
        if model is None:
            raise ValueError(f"Unknown template kind {kind!r}")

        template = self.db.query(model).filter(model.id == template_id).first()
        if template is None:
            logger.warning(f"Recurring {kind} {template_id} not found, cancelling")
            self.cancel(template_id)
            return None

        now = self.clock.now()
        try:
            instance, _ = materialize(template, now, scheduled_for, self.cron_evaluator)
            self.db.add(instance)
            self._arm(template)
            self.db.commit()
        except StaleTemplate as e:
            self.db.rollback()
            logger.warning(f"{e}, cancelling")
            self.cancel(template_id)
            return None
        except DuplicateFiring as e:
            self.db.rollback()
            logger.info(f"Skipping duplicate firing: {e}")
            # The duplicate may have replaced the live job under the same key
            self._arm(template)
            self.db.commit()
            return None
        except Exception:
            self.db.rollback()
            logger.exception(f"Error creating instance of recurring {kind} {template_id}")
            raise

        return instance

    def rearm_all(self) -> int:
        """Schedule every recurring template again. Returns how many are armed."""
        armed = 0
        for model in TEMPLATE_MODELS.values():
            templates = self.db.query(model).filter(model.is_recurring == True).all()
            for template in templates:
                try:
                    if self.schedule(template) is not None:
                        armed += 1
                except BackendUnavailable:
                    logger.exception(f"Could not re-arm recurring template {template.id}")

        logger.info(f"Re-armed {armed} recurring templates")
        return armed

    def _clear_commitment(self, template_id: str) -> None:
        recurrence = self.db.query(Recurrence).filter(
            or_(Recurrence.task_id == template_id, Recurrence.expense_id == template_id)
        ).first()
        if recurrence is not None and recurrence.next_processing_at is not None:
            recurrence.next_processing_at = None

    def _arm(self, template: Union[TodoTask, Expense]) -> Optional[datetime]:
        """Register the next occurrence with the backend, then record the commitment."""
        key = self.job_key(template.id)
        recurrence = template.recurrence

        if not template.is_recurring or recurrence is None:
            self.backend.remove_if_exists(key)
            return None

        now = self.clock.now()
        next_at = next_occurrence(recurrence, now, self.cron_evaluator)

        if next_at is None:
            self.backend.remove_if_exists(key)
            recurrence.next_processing_at = None
            logger.info(f"Recurring template {template.id} has no further occurrences")
            return None

        # An occurrence that is already due runs right away
        self.backend.enqueue(
            key,
            max(next_at, now),
            {
                "kind": template_kind(template),
                "template_id": template.id,
                "scheduled_for": next_at,
            },
        )
        recurrence.next_processing_at = next_at
        logger.info(f"Scheduled recurring template {template.id} for {next_at}")
        return next_at
