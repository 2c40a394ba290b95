# app/crud/crud_notification.py
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session, selectinload

from app.models.notification import Notification, NotificationType


def create_notification(db: Session, user_id: int, actor_id: int, notification_type: NotificationType,
                        message: str, reference_id: Optional[int] = None) -> Notification:
    db_notification = Notification(
        user_id=user_id,
        actor_id=actor_id,
        type=notification_type,
        message=message,
        reference_id=reference_id,
    )
    db.add(db_notification)
    db.flush()
    return db_notification

def get_notification(db: Session, notification_id: int) -> Optional[Notification]:
    return db.query(Notification).filter(Notification.id == notification_id).first()

def get_user_notifications(db: Session, user_id: int, skip: int, limit: int) -> Tuple[List[Notification], int]:
    query = db.query(Notification)\
              .options(selectinload(Notification.actor))\
              .filter(Notification.user_id == user_id)
    total = query.count()
    notifications = query.order_by(Notification.created_at.desc(), Notification.id.desc())\
                         .offset(skip)\
                         .limit(limit)\
                         .all()
    return notifications, total

def get_unread_notifications(db: Session, user_id: int) -> List[Notification]:
    return db.query(Notification)\
             .filter(Notification.user_id == user_id, Notification.is_read.is_(False))\
             .all()

def count_unread(db: Session, user_id: int) -> int:
    return db.query(Notification)\
             .filter(Notification.user_id == user_id, Notification.is_read.is_(False))\
             .count()
