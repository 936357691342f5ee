"""
Schemas for the categories a user files tasks and expenses under.
"""

from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import List, Optional

HEX_COLOR = r"^#[0-9A-Fa-f]{6}$"


def _clean_name(v):
    if v is None:
        return v
    v = v.strip()
    if not v:
        raise ValueError("name must not be blank")
    return v


class CategoryCreate(BaseModel):
    name: str = Field(..., max_length=100)
    parent_id: Optional[str] = None
    color: Optional[str] = Field(None, pattern=HEX_COLOR)
    icon: Optional[str] = Field(None, max_length=50)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v):
        return _clean_name(v)

    @field_validator("color")
    @classmethod
    def lowercase_color(cls, v):
        return v.lower() if v else v


class CategoryUpdate(CategoryCreate):
    """Partial update; only the fields sent are applied."""
    name: Optional[str] = Field(None, max_length=100)


class CategoryResponse(BaseModel):
    """A category with the number of tasks and expenses filed under it."""
    id: str
    user_id: str
    name: str
    parent_id: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None
    task_count: int = 0
    expense_count: int = 0
    created_at: datetime
    children: List["CategoryResponse"] = []

    model_config = {"from_attributes": True}


CategoryResponse.model_rebuild()


class CategoryList(BaseModel):
    items: List[CategoryResponse]
    total: int
