"""
Category API endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func
from sqlalchemy.orm import Session
from typing import Dict, List, Tuple
import uuid

from app.dependencies import get_db, get_current_user_id
from app.models import Category, Expense, TodoTask
from app.schemas.category import (
    CategoryCreate,
    CategoryUpdate,
    CategoryResponse,
    CategoryList,
)
from app.services.category_service import get_category as find_category

router = APIRouter()


def count_usage(db: Session, user_id: str) -> Tuple[Dict[str, int], Dict[str, int]]:
    """Number of the user's tasks and expenses per category id."""
    task_counts = dict(
        db.query(TodoTask.category_id, func.count(TodoTask.id))
        .filter(TodoTask.user_id == user_id, TodoTask.category_id.isnot(None))
        .group_by(TodoTask.category_id)
        .all()
    )
    expense_counts = dict(
        db.query(Expense.category_id, func.count(Expense.id))
        .filter(Expense.user_id == user_id, Expense.category_id.isnot(None))
        .group_by(Expense.category_id)
        .all()
    )
    return task_counts, expense_counts


def to_response(category: Category, usage: Tuple[Dict[str, int], Dict[str, int]]) -> CategoryResponse:
    task_counts, expense_counts = usage
    response = CategoryResponse.model_validate(category)
    response.children = []
    response.task_count = task_counts.get(category.id, 0)
    response.expense_count = expense_counts.get(category.id, 0)
    return response


def build_category_tree(
    categories: List[Category],
    usage: Tuple[Dict[str, int], Dict[str, int]]
) -> List[CategoryResponse]:
    """Build a hierarchical tree structure from flat category list."""
    category_map = {}
    for cat in categories:
        category_map[cat.id] = to_response(cat, usage)

    root_categories = []
    for cat in category_map.values():
        if cat.parent_id is None:
            root_categories.append(cat)
        else:
            parent = category_map.get(cat.parent_id)
            if parent:
                parent.children.append(cat)

    return root_categories


@router.get("", response_model=CategoryList)
def list_categories(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """List the user's categories with tree structure."""
    categories = db.query(Category).filter(Category.user_id == user_id).all()
    tree = build_category_tree(categories, count_usage(db, user_id))

    return CategoryList(
        items=tree,
        total=len(categories)
    )


@router.post("", response_model=CategoryResponse, status_code=201)
def create_category(
    category: CategoryCreate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Create a new category."""
    if category.parent_id and not find_category(db, user_id, category.parent_id):
        raise HTTPException(status_code=404, detail="Parent category not found")

    db_category = Category(
        id=str(uuid.uuid4()),
        user_id=user_id,
        name=category.name,
        parent_id=category.parent_id,
        color=category.color,
        icon=category.icon,
    )
    db.add(db_category)
    db.commit()
    db.refresh(db_category)
    return to_response(db_category, ({}, {}))


@router.get("/{category_id}", response_model=CategoryResponse)
def get_category(
    category_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Get a specific category."""
    category = find_category(db, user_id, category_id)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    return to_response(category, count_usage(db, user_id))


@router.patch("/{category_id}", response_model=CategoryResponse)
def update_category(
    category_id: str,
    category_update: CategoryUpdate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Update a category."""
    category = find_category(db, user_id, category_id)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")

    if category_update.parent_id is not None:
        if category_update.parent_id == category_id:
            raise HTTPException(status_code=400, detail="A category cannot be its own parent")
        if not find_category(db, user_id, category_update.parent_id):
            raise HTTPException(status_code=404, detail="Parent category not found")

    update_data = category_update.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        if value is None and field == "name":
            continue
        setattr(category, field, value)

    db.commit()
    db.refresh(category)
    return to_response(category, count_usage(db, user_id))


@router.delete("/{category_id}", status_code=204)
def delete_category(
    category_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Delete a category. Tasks and expenses keep existing without one."""
    category = find_category(db, user_id, category_id)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")

    db.query(TodoTask).filter(
        TodoTask.category_id == category_id
    ).update({"category_id": None}, synchronize_session=False)
    db.query(Expense).filter(
        Expense.category_id == category_id
    ).update({"category_id": None}, synchronize_session=False)
    db.query(Category).filter(
        Category.parent_id == category_id
    ).update({"parent_id": None}, synchronize_session=False)

    db.delete(category)
    db.commit()
    return None
