"""Service for user tags."""

from typing import List
from sqlalchemy.orm import Session
import uuid

from app.models.tag import Tag


def get_or_create_tags(db: Session, user_id: str, names: List[str]) -> List[Tag]:
    """Resolve tag names to the user's tags, creating the missing ones."""
    tags = []
    seen = set()

    for name in names:
        name = name.strip()
        if not name or name.lower() in seen:
            continue
        seen.add(name.lower())

        tag = db.query(Tag).filter(Tag.user_id == user_id, Tag.name == name).first()
        if not tag:
            tag = Tag(id=str(uuid.uuid4()), user_id=user_id, name=name)
            db.add(tag)
        tags.append(tag)

    return tags
