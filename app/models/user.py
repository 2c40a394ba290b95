# app/models/user.py

import enum

from sqlalchemy import JSON, Boolean, Column, DateTime, Enum, Integer, String, Text
from sqlalchemy.orm import relationship

from app.db.base_class import Base, enum_values, utcnow


class UserRole(str, enum.Enum):
    USER = "User"
    ADMIN = "Admin"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(50), unique=True, index=True, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    role = Column(Enum(UserRole, native_enum=False, length=20, values_callable=enum_values), nullable=False, default=UserRole.USER)
    is_active = Column(Boolean, nullable=False, default=True)

    display_name = Column(String(100), nullable=True)
    bio = Column(Text, nullable=True)
    profile_picture_url = Column(String(512), nullable=True)
    cover_photo_url = Column(String(512), nullable=True)
    website = Column(String(200), nullable=True)
    location = Column(String(100), nullable=True)
    # {"github": "...", "twitter": "..."}
    social_links = Column(JSON, nullable=True)
    skills = Column(String(500), nullable=True)  # comma separated

    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=True, onupdate=utcnow)

    posts = relationship("BlogPost", back_populates="author")
    # People who follow this user
    followers = relationship(
        "Follow",
        foreign_keys="Follow.following_id",
        back_populates="following",
        cascade="all, delete-orphan",
    )
    # People this user follows
    following = relationship(
        "Follow",
        foreign_keys="Follow.follower_id",
        back_populates="follower",
        cascade="all, delete-orphan",
    )

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
