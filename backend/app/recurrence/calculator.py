"""
Next-occurrence calculation for recurring tasks and expenses.

Everything here is pure: the only notion of "now" is the `reference_now`
argument, so the same recurrence and reference time always give the same
answer. Edge cases resolve to a date or to None, never to an exception.
"""

import calendar
import logging
from datetime import date, datetime, timedelta
from typing import Optional, Union

from app.models.recurrence import RecurrenceType
from app.recurrence.base import CronEvaluator
from app.recurrence.errors import ConfigurationError

logger = logging.getLogger(__name__)


def days_in_month(year: int, month: int) -> int:
    """Number of days in the given month, leap years included."""
    return calendar.monthrange(year, month)[1]


def add_months(value: date, months: int, day: Optional[int] = None) -> date:
    """
    Shift a date by whole months.
    The day (or `day` when given) is clamped to the length of the target month.
    """
    total = value.year * 12 + value.month - 1 + months
    year, month = divmod(total, 12)
    month += 1
    target_day = day if day is not None else value.day
    return date(year, month, max(1, min(target_day, days_in_month(year, month))))


def same_day_in_year(value: date, year: int) -> date:
    """Same month and day in another year; Feb 29 becomes Feb 28 outside leap years."""
    return date(year, value.month, min(value.day, days_in_month(year, value.month)))


def as_date(value: Union[date, datetime]) -> date:
    """Calendar date of a date or datetime."""
    if isinstance(value, datetime):
        return value.date()
    return value


def _as_datetime(value: Union[date, datetime]) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime(value.year, value.month, value.day)


def _at_midnight(value: date) -> datetime:
    return datetime(value.year, value.month, value.day)


def resolve_custom(
    expression: Optional[str],
    after: datetime,
    cron_evaluator: Optional[CronEvaluator]
) -> Optional[datetime]:
    """
    Resolve a custom expression to its next fire time after `after`.
    Raises ConfigurationError when the expression is missing or unusable.
    """
    expression = (expression or "").strip()
    if not expression:
        raise ConfigurationError("Custom recurrence has no expression")
    if cron_evaluator is None:
        raise ConfigurationError("No evaluator configured for custom expressions")

    try:
        return cron_evaluator.next_from_expression(expression, after)
    except ValueError as e:
        raise ConfigurationError(f"Invalid custom expression {expression!r}: {e}") from e


def next_daily(base_date: date, interval: int, today: date, processed: bool) -> date:
    """First date `base + k*interval` days on or after today (k >= 1 once processed)."""
    elapsed = (today - base_date).days
    steps = max(0, -(-elapsed // interval))
    if processed and steps == 0:
        steps = 1
    return base_date + timedelta(days=steps * interval)


def next_weekly(base_date: date, interval: int, today: date, weekday: int) -> date:
    """
    First date strictly after today that falls on `weekday` and in a week
    congruent with the base date's week modulo `interval`.
    """
    week_start = base_date - timedelta(days=base_date.weekday())
    anchor = week_start + timedelta(days=weekday % 7)

    period = 7 * interval
    elapsed = (today - anchor).days
    steps = 0 if elapsed < 0 else elapsed // period + 1
    return anchor + timedelta(days=steps * period)


def next_monthly(base_date: date, month_step: int, today: date, target_day: int) -> date:
    """First date strictly after today every `month_step` months from the base month."""
    month_gap = (today.year - base_date.year) * 12 + today.month - base_date.month
    steps = max(0, month_gap // month_step)

    candidate = add_months(base_date, steps * month_step, target_day)
    while candidate <= today:
        steps += 1
        candidate = add_months(base_date, steps * month_step, target_day)
    return candidate


def next_yearly(base_date: date, interval: int, today: date, anniversary: date) -> date:
    """
    First anniversary strictly after today, every `interval` years counted
    from the base year.
    """
    steps = max(0, (today.year - base_date.year) // interval)

    candidate = same_day_in_year(anniversary, base_date.year + steps * interval)
    while candidate <= today:
        steps += 1
        candidate = same_day_in_year(anniversary, base_date.year + steps * interval)
    return candidate


def next_occurrence(
    recurrence,
    reference_now: datetime,
    cron_evaluator: Optional[CronEvaluator] = None
) -> Optional[datetime]:
    """
    Calculate when a recurrence fires next, or None when it never fires again.

    `recurrence` is anything shaped like `app.models.Recurrence`.
    """
    today = as_date(reference_now)

    if recurrence.end_date is not None and as_date(recurrence.end_date) < today:
        return None

    try:
        recurrence_type = RecurrenceType(recurrence.recurrence_type)
    except ValueError:
        logger.warning(f"Unknown recurrence type {recurrence.recurrence_type!r}")
        return None

    if recurrence_type == RecurrenceType.none:
        return None

    base = recurrence.last_processed_at or recurrence.start_date
    if base is None:
        return None
    base = _as_datetime(base)

    # Recurrence has not started yet
    if base > reference_now:
        return _within_end(recurrence, base)

    interval = recurrence.interval if recurrence.interval and recurrence.interval > 0 else 1
    base_date = base.date()
    processed = recurrence.last_processed_at is not None

    # Unset days come from the start date so late firings do not shift them
    anchor = as_date(recurrence.start_date or base)
    weekday = recurrence.day_of_week if recurrence.day_of_week is not None else anchor.weekday()
    month_day = recurrence.day_of_month or anchor.day

    if recurrence_type == RecurrenceType.daily:
        result = next_daily(base_date, interval, today, processed)
    elif recurrence_type == RecurrenceType.weekly:
        result = next_weekly(base_date, interval, today, weekday)
    elif recurrence_type == RecurrenceType.monthly:
        result = next_monthly(base_date, interval, today, month_day)
    elif recurrence_type == RecurrenceType.quarterly:
        result = next_monthly(base_date, interval * 3, today, month_day)
    elif recurrence_type == RecurrenceType.yearly:
        result = next_yearly(base_date, interval, today, anchor)
    else:
        try:
            fire_at = resolve_custom(recurrence.custom_expression, reference_now, cron_evaluator)
        except ConfigurationError as e:
            logger.warning(f"Recurrence {recurrence.id} paused: {e}")
            return None
        return _within_end(recurrence, fire_at) if fire_at else None

    return _within_end(recurrence, _at_midnight(result))


def _within_end(recurrence, candidate: datetime) -> Optional[datetime]:
    """Drop occurrences that fall after the end date."""
    if recurrence.end_date is not None and candidate.date() > as_date(recurrence.end_date):
        return None
    return candidate
