"""
Errors raised by the recurrence scheduling engine.
"""


class RecurrenceError(Exception):
    """Base class for recurrence engine errors."""


class BackendUnavailable(RecurrenceError):
    """The job backend could not be reached. Retryable; the commitment is unchanged."""

    def __init__(self, message: str, key: str = None):
        super().__init__(message)
        self.key = key


class ConfigurationError(RecurrenceError):
    """A custom recurrence has a missing or unparseable expression."""


class StaleTemplate(RecurrenceError):
    """A firing arrived for a template that no longer recurs."""

    def __init__(self, template_id: str, reason: str):
        super().__init__(f"Template {template_id} is stale: {reason}")
        self.template_id = template_id
        self.reason = reason


class DuplicateFiring(RecurrenceError):
    """A firing that was already materialized was delivered again."""

    def __init__(self, template_id: str, scheduled_for):
        super().__init__(f"Firing for {template_id} at {scheduled_for} was already processed")
        self.template_id = template_id
        self.scheduled_for = scheduled_for
