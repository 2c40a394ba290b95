# app/schemas/comment.py

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class CommentCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=5000)
    parent_comment_id: Optional[int] = None


class Comment(BaseModel):
    id: int
    content: str
    is_edited: bool = False
    created_at: datetime
    user_id: int
    username: str
    user_display_name: Optional[str] = None
    user_profile_picture_url: Optional[str] = None
    parent_comment_id: Optional[int] = None
    replies: List["Comment"] = []


Comment.model_rebuild()
