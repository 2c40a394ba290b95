# app/crud/crud_follow.py
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from app.models.follow import Follow
from app.models.user import User


def get_follow(db: Session, follower_id: int, following_id: int) -> Optional[Follow]:
    return db.query(Follow).filter(
        Follow.follower_id == follower_id,
        Follow.following_id == following_id
    ).first()

def create_follow(db: Session, follower_id: int, following_id: int) -> Follow:
    db_follow = Follow(follower_id=follower_id, following_id=following_id)
    db.add(db_follow)
    db.flush()
    return db_follow

def delete_follow(db: Session, follow: Follow) -> None:
    db.delete(follow)
    db.flush()

def get_following_ids(db: Session, user_id: int) -> List[int]:
    rows = db.query(Follow.following_id).filter(Follow.follower_id == user_id).all()
    return [row.following_id for row in rows]

def count_followers(db: Session, user_id: int, since: Optional[datetime] = None) -> int:
    query = db.query(Follow).filter(Follow.following_id == user_id)
    if since is not None:
        query = query.filter(Follow.created_at >= since)
    return query.count()

def count_following(db: Session, user_id: int) -> int:
    return db.query(Follow).filter(Follow.follower_id == user_id).count()

def get_followers(db: Session, user_id: int, skip: int, limit: int) -> Tuple[List[User], int]:
    query = db.query(User)\
              .join(Follow, Follow.follower_id == User.id)\
              .filter(Follow.following_id == user_id)
    total = query.count()
    users = query.order_by(Follow.created_at.desc(), Follow.id.desc()).offset(skip).limit(limit).all()
    return users, total

def get_following(db: Session, user_id: int, skip: int, limit: int) -> Tuple[List[User], int]:
    query = db.query(User)\
              .join(Follow, Follow.following_id == User.id)\
              .filter(Follow.follower_id == user_id)
    total = query.count()
    users = query.order_by(Follow.created_at.desc(), Follow.id.desc()).offset(skip).limit(limit).all()
    return users, total
