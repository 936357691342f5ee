"""Tests for spawning occurrences from recurring templates."""

import pytest
from datetime import date, datetime
from decimal import Decimal

from app.models.task import TaskStatus
from app.recurrence.errors import DuplicateFiring, StaleTemplate
from app.recurrence.materializer import materialize

NOW = datetime(2024, 1, 15, 9, 0)


class TestMaterializeTask:
    """Test copying recurring tasks."""

    def test_copies_business_fields(self, recurring_task, sample_tag):
        instance, _ = materialize(recurring_task, NOW)

        assert instance.id != recurring_task.id
        assert instance.user_id == recurring_task.user_id
        assert instance.title == "Water the plants"
        assert instance.description == "All of them"
        assert instance.priority == recurring_task.priority
        assert instance.category_id == recurring_task.category_id
        assert [t.id for t in instance.tags] == [sample_tag.id]

    def test_resets_state(self, recurring_task):
        instance, _ = materialize(recurring_task, NOW)

        assert instance.status == TaskStatus.not_started
        assert instance.completed_at is None
        assert instance.is_recurring is False
        assert instance.recurring_parent_id == recurring_task.id
        assert instance.created_at == NOW

    def test_keeps_lead_time_to_due_date(self, recurring_task):
        """Template is due two days after creation, so is the copy."""
        instance, _ = materialize(recurring_task, NOW)
        assert instance.due_date == datetime(2024, 1, 17, 9, 0)

    def test_no_due_date(self, recurring_task):
        recurring_task.due_date = None
        instance, _ = materialize(recurring_task, NOW)
        assert instance.due_date is None

    def test_advances_recurrence(self, recurring_task):
        _, recurrence = materialize(recurring_task, NOW)

        assert recurrence.last_processed_at == NOW
        assert recurrence.next_processing_at == datetime(2024, 2, 10)

    def test_instance_is_not_added_to_session(self, db_session, recurring_task):
        instance, _ = materialize(recurring_task, NOW)
        assert instance not in db_session


class TestMaterializeExpense:
    """Test copying recurring expenses."""

    def test_copies_fields_dated_today(self, recurring_expense):
        instance, _ = materialize(recurring_expense, NOW)

        assert instance.amount == Decimal("15.99")
        assert instance.description == "Streaming subscription"
        assert instance.payment_method == "card"
        assert instance.expense_type == recurring_expense.expense_type
        assert instance.date == date(2024, 1, 15)
        assert instance.is_recurring is False
        assert instance.recurring_parent_id == recurring_expense.id


class TestStaleAndDuplicate:
    """Test firings that must not produce an occurrence."""

    def test_not_recurring(self, recurring_task):
        recurring_task.is_recurring = False
        with pytest.raises(StaleTemplate):
            materialize(recurring_task, NOW)

    def test_missing_recurrence(self, sample_task):
        sample_task.is_recurring = True
        with pytest.raises(StaleTemplate):
            materialize(sample_task, NOW)

    def test_end_date_passed(self, recurring_task):
        recurring_task.recurrence.end_date = datetime(2024, 1, 14)
        with pytest.raises(StaleTemplate):
            materialize(recurring_task, NOW)

    def test_already_processed_firing(self, recurring_task):
        recurring_task.recurrence.last_processed_at = datetime(2024, 1, 10, 0, 0, 5)
        with pytest.raises(DuplicateFiring):
            materialize(recurring_task, NOW, scheduled_for=datetime(2024, 1, 10))

    def test_newer_firing_is_not_a_duplicate(self, recurring_task):
        recurring_task.recurrence.last_processed_at = datetime(2024, 1, 10, 0, 0, 5)
        instance, _ = materialize(recurring_task, NOW, scheduled_for=datetime(2024, 1, 15))
        assert instance.recurring_parent_id == recurring_task.id
