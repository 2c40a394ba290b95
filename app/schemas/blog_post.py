# app/schemas/blog_post.py

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class BlogPostBase(BaseModel):
    """Base schema for blog posts"""
    title: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1)
    summary: Optional[str] = Field(default=None, max_length=500)
    category: Optional[str] = Field(default=None, max_length=100)
    is_draft: bool = False
    tags: List[str] = []


class BlogPostCreate(BlogPostBase):
    """Schema for creating blog posts"""
    pass


class BlogPostUpdate(BlogPostBase):
    """Schema for updating blog posts; the slug is never regenerated"""
    pass


class PostImageCreate(BaseModel):
    image_url: str = Field(..., min_length=1, max_length=512)
    alt_text: Optional[str] = Field(default=None, max_length=255)


class PostImage(BaseModel):
    id: int
    image_url: str
    alt_text: Optional[str] = None
    sort_order: int

    class Config:
        from_attributes = True


class BlogPost(BaseModel):
    """Schema for a post as seen by one caller"""
    id: int
    title: str
    content: str
    summary: Optional[str] = None
    slug: str
    is_published: bool
    is_draft: bool
    view_count: int = 0
    reading_time_minutes: int = 1
    category: Optional[str] = None
    featured_image_url: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    author_id: int
    author_username: str
    author_display_name: Optional[str] = None
    author_profile_picture_url: Optional[str] = None

    like_count: int = 0
    comment_count: int = 0
    is_liked_by_current_user: bool = False
    is_bookmarked_by_current_user: bool = False
    reaction_counts: Dict[str, int] = {}
    current_user_reaction: Optional[str] = None

    tags: List[str] = []
    images: List[PostImage] = []


class UserSearchResult(BaseModel):
    id: int
    username: str
    display_name: Optional[str] = None
    profile_picture_url: Optional[str] = None
    followers_count: int = 0


class SearchResult(BaseModel):
    """Posts, people and tag names matching one query"""
    posts: List[BlogPost] = []
    users: List[UserSearchResult] = []
    tags: List[str] = []
    total_results: int = 0
