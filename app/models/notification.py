# app/models/notification.py

import enum

from sqlalchemy import Boolean, Column, DateTime, Enum, ForeignKey, Index, Integer, String
from sqlalchemy.orm import relationship

from app.db.base_class import Base, enum_values, utcnow


class NotificationType(str, enum.Enum):
    FOLLOW = "Follow"
    REACTION = "Reaction"
    COMMENT = "Comment"
    POST_PUBLISHED = "PostPublished"


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)  # recipient
    actor_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    type = Column(Enum(NotificationType, native_enum=False, length=30, values_callable=enum_values), nullable=False)
    message = Column(String(500), nullable=False)
    reference_id = Column(Integer, nullable=True)  # post, comment, ...
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=True, onupdate=utcnow)

    actor = relationship("User", foreign_keys=[actor_id])

    __table_args__ = (
        Index("ix_notifications_user_read_created", "user_id", "is_read", "created_at"),
    )
