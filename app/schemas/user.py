# app/schemas/user.py

import enum
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator


class UserBase(BaseModel):
    username: str = Field(..., min_length=3, max_length=50)
    email: EmailStr


class UserCreate(UserBase):
    password: str = Field(..., min_length=6)
    display_name: Optional[str] = None


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class User(UserBase):
    id: int
    role: str
    is_active: bool

    @field_validator("role", mode="before")
    @classmethod
    def role_value(cls, v):
        return v.value if isinstance(v, enum.Enum) else v

    class Config:
        from_attributes = True


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: User


class UserProfile(BaseModel):
    id: int
    username: str
    display_name: Optional[str] = None
    bio: Optional[str] = None
    profile_picture_url: Optional[str] = None
    cover_photo_url: Optional[str] = None
    website: Optional[str] = None
    location: Optional[str] = None
    social_links: Dict[str, str] = {}
    skills: List[str] = []
    joined_at: datetime
    followers_count: int = 0
    following_count: int = 0
    posts_count: int = 0
    is_followed_by_current_user: bool = False


class TopPost(BaseModel):
    id: int
    title: str
    slug: str
    view_count: int
    reaction_count: int
    comment_count: int
    created_at: datetime


class CreatorAnalytics(BaseModel):
    total_views: int = 0
    total_reactions: int = 0
    total_comments: int = 0
    total_followers: int = 0
    followers_growth_last_30_days: int = 0
    top_posts: List[TopPost] = []


class ProfileUpdate(BaseModel):
    """Fields left as None keep their current value"""
    display_name: Optional[str] = Field(default=None, max_length=100)
    bio: Optional[str] = Field(default=None, max_length=2000)
    profile_picture_url: Optional[str] = Field(default=None, max_length=512)
    website: Optional[str] = Field(default=None, max_length=200)
    location: Optional[str] = Field(default=None, max_length=100)
    social_links: Optional[Dict[str, str]] = None
    skills: Optional[List[str]] = None


class ProfileImageUpdate(BaseModel):
    """URL returned by file storage for an uploaded avatar or cover photo"""
    image_url: str = Field(..., min_length=1, max_length=512)
