# app/models/blog_post.py

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from app.db.base_class import Base, utcnow
from app.models.tag import blog_post_tags


class BlogPost(Base):
    """Model for blog posts"""
    __tablename__ = "blog_posts"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False, index=True)
    content = Column(Text, nullable=False)
    summary = Column(String(500), nullable=True)
    slug = Column(String(300), nullable=False, unique=True, index=True)
    is_published = Column(Boolean, nullable=False, default=True)
    is_draft = Column(Boolean, nullable=False, default=False)
    view_count = Column(Integer, nullable=False, default=0)
    reading_time_minutes = Column(Integer, nullable=False, default=1)
    category = Column(String(100), nullable=True)
    featured_image_url = Column(String(512), nullable=True)

    author_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    created_at = Column(DateTime, nullable=False, default=utcnow, index=True)
    updated_at = Column(DateTime, nullable=True, onupdate=utcnow)

    author = relationship("User", back_populates="posts")
    images = relationship(
        "PostImage",
        back_populates="post",
        cascade="all, delete-orphan",
        order_by="PostImage.sort_order",
    )
    # Reply rows cascade in the database; the ORM never walks the reply tree
    comments = relationship("Comment", back_populates="post", cascade="all, delete-orphan", passive_deletes=True)
    likes = relationship("BlogPostLike", back_populates="post", cascade="all, delete-orphan")
    reactions = relationship("Reaction", back_populates="post", cascade="all, delete-orphan")
    bookmarks = relationship("Bookmark", back_populates="post", cascade="all, delete-orphan")
    tags = relationship("Tag", secondary=blog_post_tags, back_populates="posts")


class PostImage(Base):
    """Ordered images attached to a post; only the storage URL is kept"""
    __tablename__ = "post_images"

    id = Column(Integer, primary_key=True, index=True)
    image_url = Column(String(512), nullable=False)
    alt_text = Column(String(255), nullable=True)
    sort_order = Column(Integer, nullable=False, default=0)
    post_id = Column(Integer, ForeignKey("blog_posts.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    post = relationship("BlogPost", back_populates="images")
