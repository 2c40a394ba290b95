# app/models/tag.py

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Table
from sqlalchemy.orm import relationship

from app.db.base_class import Base, utcnow

blog_post_tags = Table('blog_post_tags', Base.metadata,
    Column('post_id', Integer, ForeignKey('blog_posts.id', ondelete="CASCADE"), primary_key=True),
    Column('tag_id', Integer, ForeignKey('tags.id', ondelete="CASCADE"), primary_key=True)
)


class Tag(Base):
    __tablename__ = "tags"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), nullable=False)
    normalized_name = Column(String(50), nullable=False, unique=True, index=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    posts = relationship("BlogPost", secondary=blog_post_tags, back_populates="tags")
