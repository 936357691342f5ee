"""
APScheduler implementations of the job backend and the cron evaluator.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from apscheduler.jobstores.base import JobLookupError
from apscheduler.jobstores.sqlalchemy import SQLAlchemyJobStore
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.date import DateTrigger
from sqlalchemy.exc import SQLAlchemyError

from app.recurrence.base import CronEvaluator, JobBackend, Notifier
from app.recurrence.errors import BackendUnavailable

logger = logging.getLogger(__name__)


def _to_utc(value: datetime) -> datetime:
    """Naive timestamps are UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class APSchedulerJobBackend(JobBackend):
    """
    Job backend on top of an APScheduler BackgroundScheduler.

    Keys look like "<prefix>:<id>"; `targets` maps each prefix to the textual
    reference of the callable that runs the job ("module:function"), which is
    what lets a SQLAlchemy job store persist jobs across restarts. The job
    payload is passed as keyword arguments.
    """

    def __init__(
        self,
        targets: Dict[str, str],
        jobstore_url: Optional[str] = None,
        misfire_grace_seconds: int = 3600,
        scheduler: Optional[BackgroundScheduler] = None,
    ):
        self.targets = dict(targets)
        self.misfire_grace_seconds = misfire_grace_seconds

        if scheduler is None:
            jobstores = {}
            if jobstore_url:
                jobstores["default"] = SQLAlchemyJobStore(url=jobstore_url)
            scheduler = BackgroundScheduler(jobstores=jobstores, timezone=timezone.utc)
        self._scheduler = scheduler

    @property
    def scheduler(self) -> BackgroundScheduler:
        return self._scheduler

    @property
    def running(self) -> bool:
        return self._scheduler.running

    def start(self, paused: bool = False) -> None:
        if self._scheduler.running:
            logger.info("Job scheduler already started; ignoring duplicate start.")
            return
        self._scheduler.start(paused=paused)
        logger.info("Job scheduler started")

    def shutdown(self) -> None:
        if not self._scheduler.running:
            return
        self._scheduler.shutdown(wait=False)
        logger.info("Job scheduler stopped")

    def enqueue(self, key: str, run_at: datetime, payload: Dict[str, Any]) -> None:
        prefix = key.split(":", 1)[0]
        target = self.targets.get(prefix)
        if target is None:
            raise ValueError(f"No job target registered for key {key!r}")

        try:
            self._scheduler.add_job(
                target,
                trigger=DateTrigger(run_date=_to_utc(run_at), timezone=timezone.utc),
                kwargs=payload,
                id=key,
                replace_existing=True,
                coalesce=True,
                max_instances=1,
                misfire_grace_time=self.misfire_grace_seconds,
            )
        except (SQLAlchemyError, OSError) as e:
            raise BackendUnavailable(f"Could not enqueue job {key}: {e}", key=key) from e

        logger.debug(f"Enqueued job {key} for {run_at}")

    def remove_if_exists(self, key: str) -> None:
        try:
            self._scheduler.remove_job(key)
        except JobLookupError:
            pass
        except (SQLAlchemyError, OSError) as e:
            raise BackendUnavailable(f"Could not remove job {key}: {e}", key=key) from e

    def schedule_cron(self, job_id: str, target: str, crontab: str) -> None:
        """Register a job that runs `target` on a five-field crontab schedule, in UTC."""
        try:
            self._scheduler.add_job(
                target,
                trigger=CronTrigger.from_crontab(crontab, timezone=timezone.utc),
                id=job_id,
                replace_existing=True,
                coalesce=True,
                max_instances=1,
                misfire_grace_time=self.misfire_grace_seconds,
            )
        except (SQLAlchemyError, OSError) as e:
            raise BackendUnavailable(f"Could not register periodic job {job_id}: {e}", key=job_id) from e


class CronTriggerEvaluator(CronEvaluator):
    """Evaluates five-field crontab expressions with APScheduler's CronTrigger."""

    def next_from_expression(self, expression: str, after: datetime) -> Optional[datetime]:
        trigger = CronTrigger.from_crontab(expression, timezone=timezone.utc)

        # get_next_fire_time may return `now` itself; fire times are whole seconds
        fire_at = trigger.get_next_fire_time(None, _to_utc(after) + timedelta(seconds=1))
        if fire_at is None:
            return None
        return fire_at.astimezone(timezone.utc).replace(tzinfo=None)


class LoggingNotifier(Notifier):
    """Writes notifications to the log. Stands in until a delivery channel is configured."""

    def notify(self, user_id: str, subject: str, body: str) -> None:
        logger.info(f"Notification for user {user_id}: {subject} - {body}")
