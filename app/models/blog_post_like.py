# app/models/blog_post_like.py

from sqlalchemy import Column, DateTime, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship

from app.db.base_class import Base, utcnow


class BlogPostLike(Base):
    """Model for blog post likes (kept alongside reactions)"""
    __tablename__ = "blog_post_likes"

    id = Column(Integer, primary_key=True, index=True)
    post_id = Column(Integer, ForeignKey("blog_posts.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    post = relationship("BlogPost", back_populates="likes")

    __table_args__ = (UniqueConstraint('user_id', 'post_id', name='blog_post_likes_unique'),)
