# app/schemas/notification.py

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class Notification(BaseModel):
    id: int
    type: str
    message: str
    reference_id: Optional[int] = None
    is_read: bool
    created_at: datetime
    actor_id: int
    actor_username: Optional[str] = None
    actor_display_name: Optional[str] = None
    actor_profile_picture_url: Optional[str] = None


class UnreadCount(BaseModel):
    count: int
