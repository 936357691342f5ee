"""Service for expense management, including recurring expense templates."""

import logging
from datetime import date
from typing import List, Optional, Tuple
from sqlalchemy.orm import Session
from sqlalchemy import or_
import uuid

from app.models.expense import Expense, ExpenseType
from app.models.recurrence import RecurrenceType
from app.recurrence.errors import BackendUnavailable
from app.recurrence.scheduler import RecurrenceScheduler
from app.schemas.expense import ExpenseCreate, ExpenseUpdate
from app.services import category_service, recurrence_service, tag_service

logger = logging.getLogger(__name__)


def get_expense(db: Session, user_id: str, expense_id: str) -> Optional[Expense]:
    """Get an expense owned by the user."""
    return db.query(Expense).filter(
        Expense.id == expense_id,
        Expense.user_id == user_id
    ).first()


def list_expenses(
    db: Session,
    user_id: str,
    page: int = 1,
    per_page: int = 50,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    category_id: Optional[str] = None,
    expense_type: Optional[ExpenseType] = None,
    is_recurring: Optional[bool] = None,
    search: Optional[str] = None,
) -> Tuple[List[Expense], int]:
    """List the user's expenses with filtering and pagination. Returns (expenses, total)."""
    query = db.query(Expense).filter(Expense.user_id == user_id)

    if start_date:
        query = query.filter(Expense.date >= start_date)
    if end_date:
        query = query.filter(Expense.date <= end_date)
    if category_id:
        query = query.filter(Expense.category_id == category_id)
    if expense_type:
        query = query.filter(Expense.expense_type == expense_type)
    if is_recurring is not None:
        query = query.filter(Expense.is_recurring == is_recurring)
    if search:
        search_term = f"%{search}%"
        query = query.filter(
            or_(
                Expense.description.ilike(search_term),
                Expense.payment_method.ilike(search_term)
            )
        )

    total = query.count()

    query = query.order_by(Expense.date.desc(), Expense.created_at.desc())
    expenses = query.offset((page - 1) * per_page).limit(per_page).all()
    return expenses, total


def list_occurrences(db: Session, expense: Expense) -> List[Expense]:
    """Expenses materialized from a recurring expense, newest first."""
    return db.query(Expense).filter(
        Expense.recurring_parent_id == expense.id
    ).order_by(Expense.date.desc(), Expense.created_at.desc()).all()


def create_expense(
    db: Session,
    user_id: str,
    data: ExpenseCreate,
    scheduler: RecurrenceScheduler,
) -> Expense:
    """
    Create an expense, then schedule its recurrence.
    Raises ValueError for invalid references or recurrence settings.
    """
    now = scheduler.clock.now()
    category_service.require_category(db, user_id, data.category_id)

    expense = Expense(
        id=str(uuid.uuid4()),
        user_id=user_id,
        amount=data.amount,
        description=data.description,
        date=data.date,
        expense_type=data.expense_type,
        category_id=data.category_id,
        payment_method=data.payment_method,
        receipt_url=data.receipt_url,
        created_at=now,
        updated_at=now,
    )
    expense.tags = tag_service.get_or_create_tags(db, user_id, data.tags)

    if data.recurrence is not None and data.recurrence.recurrence_type != RecurrenceType.none:
        recurrence_service.set_recurrence(expense, data.recurrence.model_dump(), now, scheduler.cron_evaluator)

    db.add(expense)
    db.commit()
    db.refresh(expense)
    logger.info(f"Created expense {expense.id} for user {user_id}")

    if expense.is_recurring:
        scheduler.schedule(expense)
        db.refresh(expense)

    return expense


def update_expense(
    db: Session,
    expense: Expense,
    data: ExpenseUpdate,
    scheduler: RecurrenceScheduler,
) -> Expense:
    """
    Apply a partial update. Recurrence changes re-arm the expense; turning
    recurrence off cancels it.
    """
    now = scheduler.clock.now()
    update_data = data.model_dump(exclude_unset=True)
    tag_names = update_data.pop("tags", None)
    is_recurring = update_data.pop("is_recurring", None)
    recurrence_data = update_data.pop("recurrence", None)

    if update_data.get("category_id"):
        category_service.require_category(db, expense.user_id, update_data["category_id"])

    for field, value in update_data.items():
        if value is None and field in ("amount", "date", "expense_type"):
            continue
        setattr(expense, field, value)

    if tag_names is not None:
        expense.tags = tag_service.get_or_create_tags(db, expense.user_id, tag_names)

    recurrence_changed = False
    if recurrence_service.stops_recurring(is_recurring, recurrence_data):
        recurrence_changed = recurrence_service.clear_recurrence(expense)
    elif recurrence_data or is_recurring:
        recurrence_service.set_recurrence(expense, recurrence_data, now, scheduler.cron_evaluator)
        recurrence_changed = True

    expense.updated_at = now
    if recurrence_changed:
        # The scheduler commits the pending changes once the job backend agrees
        db.flush()
        try:
            if expense.is_recurring:
                scheduler.update(expense)
            else:
                scheduler.cancel(expense.id)
        except BackendUnavailable:
            db.rollback()
            raise
    else:
        db.commit()

    db.refresh(expense)
    return expense


def delete_expense(db: Session, expense: Expense, scheduler: RecurrenceScheduler) -> None:
    """Cancel the expense's recurrence, then delete it."""
    expense_id = expense.id
    scheduler.cancel(expense_id)
    db.delete(expense)
    db.commit()
    logger.info(f"Deleted expense {expense_id}")
