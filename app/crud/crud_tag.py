# app/crud/crud_tag.py
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from app.models.tag import Tag
from app.utils.text import LIKE_ESCAPE, contains_pattern, normalize_tag

logger = logging.getLogger(__name__)

def get_tag_by_normalized_name(db: Session, normalized_name: str) -> Optional[Tag]:
    return db.query(Tag).filter(Tag.normalized_name == normalized_name).first()

def create_tag(db: Session, name: str, normalized_name: str) -> Tag:
    logger.info(f"Creating new tag: {name}")
    db_tag = Tag(name=name, normalized_name=normalized_name)
    db.add(db_tag)
    db.flush()
    return db_tag

def search_tag_names(db: Session, text: str, limit: int) -> List[str]:
    pattern = contains_pattern(normalize_tag(text))
    rows = db.query(Tag.name)\
             .filter(Tag.normalized_name.ilike(pattern, escape=LIKE_ESCAPE))\
             .order_by(Tag.name.asc())\
             .limit(limit)\
             .all()
    return [name for (name,) in rows]
