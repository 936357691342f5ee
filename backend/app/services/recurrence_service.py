"""Service for the recurrence settings shared by recurring tasks and expenses."""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from app.models.recurrence import Recurrence, RecurrenceType
from app.recurrence.base import CronEvaluator
from app.recurrence.calculator import resolve_custom
from app.recurrence.errors import ConfigurationError
from app.schemas.recurrence import RecurrenceCreate

# Columns that cannot be cleared through a partial update
REQUIRED_FIELDS = ("recurrence_type", "interval", "start_date")


def naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Timestamps are stored as naive UTC."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def validate_recurrence(
    recurrence: Recurrence,
    now: datetime,
    cron_evaluator: Optional[CronEvaluator]
) -> None:
    """Reject settings that could never produce an occurrence. Raises ValueError."""
    if recurrence.end_date is not None and recurrence.end_date < recurrence.start_date:
        raise ValueError("end_date must not be before start_date")

    if recurrence.recurrence_type == RecurrenceType.custom:
        try:
            resolve_custom(recurrence.custom_expression, now, cron_evaluator)
        except ConfigurationError as e:
            raise ValueError(str(e)) from e


def build_recurrence(data: RecurrenceCreate, now: datetime) -> Recurrence:
    fields = data.model_dump()
    fields["start_date"] = naive_utc(fields["start_date"]) or now
    fields["end_date"] = naive_utc(fields["end_date"])
    return Recurrence(**fields)


def set_recurrence(
    template,
    data: Optional[Dict[str, Any]],
    now: datetime,
    cron_evaluator: Optional[CronEvaluator] = None
) -> Recurrence:
    """
    Create or update the recurrence of a task or expense and mark it recurring.
    `data` holds the (possibly partial) recurrence fields of the request.
    """
    data = dict(data or {})
    for name in ("start_date", "end_date"):
        if name in data:
            data[name] = naive_utc(data[name])

    if template.recurrence is None:
        if not data.get("recurrence_type"):
            raise ValueError("recurrence_type is required to make this recurring")
        template.recurrence = build_recurrence(RecurrenceCreate(**data), now)
    else:
        for field, value in data.items():
            if value is None and field in REQUIRED_FIELDS:
                continue
            setattr(template.recurrence, field, value)

    template.is_recurring = True
    validate_recurrence(template.recurrence, now, cron_evaluator)
    return template.recurrence


def stops_recurring(is_recurring: Optional[bool], data: Optional[Dict[str, Any]]) -> bool:
    """Whether an update turns recurrence off."""
    if is_recurring is False:
        return True
    return bool(data) and data.get("recurrence_type") == RecurrenceType.none


def clear_recurrence(template) -> bool:
    """Turn recurrence off; the recurrence row is deleted with the relationship. Returns True if anything changed."""
    changed = template.is_recurring or template.recurrence is not None
    template.recurrence = None
    template.is_recurring = False
    return changed
