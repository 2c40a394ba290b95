# app/models/reaction.py

import enum

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship

from app.db.base_class import Base, enum_values, utcnow


class ReactionType(str, enum.Enum):
    LIKE = "Like"
    LOVE = "Love"
    FIRE = "Fire"
    CLAP = "Clap"


class Reaction(Base):
    """Emoji reaction on a post; at most one per user per post"""
    __tablename__ = "reactions"

    id = Column(Integer, primary_key=True, index=True)
    type = Column(Enum(ReactionType, native_enum=False, length=20, values_callable=enum_values), nullable=False)
    post_id = Column(Integer, ForeignKey("blog_posts.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=True, onupdate=utcnow)

    post = relationship("BlogPost", back_populates="reactions")

    __table_args__ = (
        UniqueConstraint('user_id', 'post_id', 'type', name='reactions_user_post_type_unique'),
        UniqueConstraint('user_id', 'post_id', name='reactions_user_post_unique'),
    )
