# app/crud/crud_comment.py
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session, selectinload

from app.models.comment import Comment


def get_comment(db: Session, comment_id: int) -> Optional[Comment]:
    return db.query(Comment).filter(Comment.id == comment_id).first()

def create_comment(db: Session, user_id: int, post_id: int, content: str,
                   parent_comment_id: Optional[int] = None) -> Comment:
    db_comment = Comment(
        user_id=user_id,
        post_id=post_id,
        content=content,
        parent_comment_id=parent_comment_id,
    )
    db.add(db_comment)
    db.flush()
    return db_comment

def delete_comment(db: Session, comment: Comment) -> None:
    # Collect the whole reply subtree, then delete it with its root
    comment_ids = [comment.id]
    frontier = [comment.id]
    while frontier:
        children = db.query(Comment.id).filter(Comment.parent_comment_id.in_(frontier)).all()
        frontier = [row.id for row in children]
        comment_ids.extend(frontier)
    db.query(Comment).filter(Comment.id.in_(comment_ids)).delete(synchronize_session="fetch")
    db.flush()

def get_top_level_comments(db: Session, post_id: int, skip: int, limit: int) -> Tuple[List[Comment], int]:
    query = db.query(Comment)\
              .options(selectinload(Comment.user))\
              .filter(Comment.post_id == post_id, Comment.parent_comment_id.is_(None))
    total = query.count()
    comments = query.order_by(Comment.created_at.desc(), Comment.id.desc()).offset(skip).limit(limit).all()
    return comments, total

def get_post_replies(db: Session, post_id: int) -> List[Comment]:
    return db.query(Comment)\
             .options(selectinload(Comment.user))\
             .filter(Comment.post_id == post_id, Comment.parent_comment_id.isnot(None))\
             .order_by(Comment.created_at.asc(), Comment.id.asc())\
             .all()
