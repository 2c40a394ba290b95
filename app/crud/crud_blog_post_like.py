# app/crud/crud_blog_post_like.py
from sqlalchemy.orm import Session
from typing import Optional
import logging
from app.models.blog_post_like import BlogPostLike

logger = logging.getLogger(__name__)

def get_blog_post_like(db: Session, user_id: int, post_id: int) -> Optional[BlogPostLike]:
    return db.query(BlogPostLike).filter(
        BlogPostLike.post_id == post_id,
        BlogPostLike.user_id == user_id
    ).first()

def create_blog_post_like(db: Session, user_id: int, post_id: int) -> BlogPostLike:
    db_like = BlogPostLike(post_id=post_id, user_id=user_id)
    db.add(db_like)
    db.flush()
    return db_like

def delete_blog_post_like(db: Session, like: BlogPostLike) -> None:
    db.delete(like)
    db.flush()
