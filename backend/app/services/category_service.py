"""Service for category lookups scoped to a user."""

from typing import Optional
from sqlalchemy.orm import Session

from app.models.category import Category


def get_category(db: Session, user_id: str, category_id: str) -> Optional[Category]:
    """Get a category owned by the user."""
    return db.query(Category).filter(
        Category.id == category_id,
        Category.user_id == user_id
    ).first()


def require_category(db: Session, user_id: str, category_id: Optional[str]) -> None:
    """Raise ValueError when a category reference does not belong to the user."""
    if category_id and get_category(db, user_id, category_id) is None:
        raise ValueError("Category not found")
