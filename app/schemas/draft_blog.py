# app/schemas/draft_blog.py

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class DraftSave(BaseModel):
    """Create a draft when id is empty, otherwise overwrite the caller's draft"""
    id: Optional[int] = None
    title: str = Field(default="", max_length=255)
    content: str = ""
    summary: Optional[str] = Field(default=None, max_length=500)
    category: Optional[str] = Field(default=None, max_length=100)
    tags: Optional[str] = Field(default=None, max_length=500)
    post_id: Optional[int] = None


class DraftBlog(BaseModel):
    id: int
    title: str
    content: str
    summary: Optional[str] = None
    category: Optional[str] = None
    tags: Optional[str] = None
    post_id: Optional[int] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
