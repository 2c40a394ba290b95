# app/models/draft_blog.py

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text

from app.db.base_class import Base, utcnow


class DraftBlog(Base):
    """Auto-saved drafts, kept apart from published posts"""
    __tablename__ = "draft_blogs"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False, default="")
    content = Column(Text, nullable=False, default="")
    summary = Column(String(500), nullable=True)
    category = Column(String(100), nullable=True)
    tags = Column(String(500), nullable=True)  # comma separated
    # Set when the draft edits an already published post
    post_id = Column(Integer, ForeignKey("blog_posts.id", ondelete="SET NULL"), nullable=True)
    author_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=True, onupdate=utcnow)
