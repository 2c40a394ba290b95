# app/crud/crud_bookmark.py
from typing import List, Optional

from sqlalchemy.orm import Session

from app.models.bookmark import Bookmark


def get_bookmark(db: Session, user_id: int, post_id: int) -> Optional[Bookmark]:
    return db.query(Bookmark).filter(
        Bookmark.post_id == post_id,
        Bookmark.user_id == user_id
    ).first()

def create_bookmark(db: Session, user_id: int, post_id: int) -> Bookmark:
    db_bookmark = Bookmark(post_id=post_id, user_id=user_id)
    db.add(db_bookmark)
    db.flush()
    return db_bookmark

def delete_bookmark(db: Session, bookmark: Bookmark) -> None:
    db.delete(bookmark)
    db.flush()

def get_bookmarked_post_ids(db: Session, user_id: int) -> List[int]:
    rows = db.query(Bookmark.post_id)\
             .filter(Bookmark.user_id == user_id)\
             .order_by(Bookmark.created_at.desc())\
             .all()
    return [row.post_id for row in rows]
