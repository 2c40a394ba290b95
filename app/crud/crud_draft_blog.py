# app/crud/crud_draft_blog.py
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.draft_blog import DraftBlog


def get_draft(db: Session, draft_id: int) -> Optional[DraftBlog]:
    return db.query(DraftBlog).filter(DraftBlog.id == draft_id).first()

def get_user_drafts(db: Session, author_id: int) -> List[DraftBlog]:
    return db.query(DraftBlog)\
             .filter(DraftBlog.author_id == author_id)\
             .order_by(func.coalesce(DraftBlog.updated_at, DraftBlog.created_at).desc(), DraftBlog.id.desc())\
             .all()

def create_draft(db: Session, author_id: int, **fields) -> DraftBlog:
    db_draft = DraftBlog(author_id=author_id, **fields)
    db.add(db_draft)
    db.flush()
    return db_draft

def delete_draft(db: Session, draft: DraftBlog) -> None:
    db.delete(draft)
    db.flush()
