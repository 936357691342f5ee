"""
Expense API endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date

from app.dependencies import get_db, get_current_user_id, get_recurrence_scheduler
from app.models.expense import ExpenseType
from app.recurrence.scheduler import RecurrenceScheduler
from app.schemas.expense import ExpenseCreate, ExpenseUpdate, ExpenseResponse, ExpenseListResponse
from app.services import expense_service

router = APIRouter(prefix="/expenses", tags=["expenses"])


@router.get("", response_model=ExpenseListResponse)
def list_expenses(
    page: int = Query(1, ge=1),
    per_page: int = Query(50, ge=1, le=100),
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    category_id: Optional[str] = None,
    expense_type: Optional[ExpenseType] = None,
    is_recurring: Optional[bool] = None,
    search: Optional[str] = None,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """List expenses with filtering and pagination"""
    expenses, total = expense_service.list_expenses(
        db,
        user_id,
        page=page,
        per_page=per_page,
        start_date=start_date,
        end_date=end_date,
        category_id=category_id,
        expense_type=expense_type,
        is_recurring=is_recurring,
        search=search,
    )
    pages = (total + per_page - 1) // per_page

    return ExpenseListResponse(
        items=[ExpenseResponse.model_validate(e) for e in expenses],
        total=total,
        page=page,
        pages=pages
    )


@router.post("", response_model=ExpenseResponse, status_code=201)
def create_expense(
    data: ExpenseCreate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    scheduler: RecurrenceScheduler = Depends(get_recurrence_scheduler),
):
    """Create an expense. Recurring expenses are scheduled right away."""
    try:
        expense = expense_service.create_expense(db, user_id, data, scheduler)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return ExpenseResponse.model_validate(expense)


@router.get("/{expense_id}", response_model=ExpenseResponse)
def get_expense(
    expense_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Get a single expense"""
    expense = expense_service.get_expense(db, user_id, expense_id)
    if not expense:
        raise HTTPException(status_code=404, detail="Expense not found")
    return ExpenseResponse.model_validate(expense)


@router.patch("/{expense_id}", response_model=ExpenseResponse)
def update_expense(
    expense_id: str,
    update: ExpenseUpdate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    scheduler: RecurrenceScheduler = Depends(get_recurrence_scheduler),
):
    """Update an expense. Changing its recurrence reschedules it."""
    expense = expense_service.get_expense(db, user_id, expense_id)
    if not expense:
        raise HTTPException(status_code=404, detail="Expense not found")

    try:
        expense = expense_service.update_expense(db, expense, update, scheduler)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return ExpenseResponse.model_validate(expense)


@router.delete("/{expense_id}", status_code=204)
def delete_expense(
    expense_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    scheduler: RecurrenceScheduler = Depends(get_recurrence_scheduler),
):
    """Delete an expense and cancel its recurrence."""
    expense = expense_service.get_expense(db, user_id, expense_id)
    if not expense:
        raise HTTPException(status_code=404, detail="Expense not found")

    expense_service.delete_expense(db, expense, scheduler)
    return None


@router.get("/{expense_id}/occurrences", response_model=List[ExpenseResponse])
def list_expense_occurrences(
    expense_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Expenses created from a recurring expense."""
    expense = expense_service.get_expense(db, user_id, expense_id)
    if not expense:
        raise HTTPException(status_code=404, detail="Expense not found")

    return [ExpenseResponse.model_validate(e) for e in expense_service.list_occurrences(db, expense)]
