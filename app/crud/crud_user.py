# app/crud/crud_user.py
import logging
from typing import List, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from app.core.security import get_password_hash
from app.models.follow import Follow
from app.models.user import User, UserRole
from app.schemas.user import UserCreate
from app.utils.text import LIKE_ESCAPE, contains_pattern

logger = logging.getLogger(__name__)

def get_user(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()

def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email).first()

def get_user_by_username(db: Session, username: str) -> Optional[User]:
    return db.query(User).filter(User.username == username).first()

def create_user(db: Session, user: UserCreate, role: UserRole = UserRole.USER) -> User:
    hashed_password = get_password_hash(user.password)
    db_user = User(
        username=user.username,
        email=user.email,
        hashed_password=hashed_password,
        display_name=user.display_name,
        role=role,
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    logger.info(f"User created successfully. ID: {db_user.id}")
    return db_user

def get_most_followed_users(db: Session, exclude_ids: List[int], limit: int) -> List[User]:
    follower_count = func.count(Follow.id)
    return db.query(User)\
             .outerjoin(Follow, Follow.following_id == User.id)\
             .filter(User.is_active.is_(True), User.id.notin_(exclude_ids))\
             .group_by(User.id)\
             .order_by(follower_count.desc(), User.id.asc())\
             .limit(limit)\
             .all()

def search_active_users(db: Session, text: str, limit: int) -> List[User]:
    pattern = contains_pattern(text)
    return db.query(User)\
             .filter(
                 User.is_active.is_(True),
                 or_(
                     User.username.ilike(pattern, escape=LIKE_ESCAPE),
                     User.display_name.ilike(pattern, escape=LIKE_ESCAPE),
                 ),
             )\
             .order_by(User.id.asc())\
             .limit(limit)\
             .all()
