# app/schemas/reaction.py

from typing import Dict, Optional

from pydantic import BaseModel


class ReactionToggle(BaseModel):
    # Free text from the client; parsed into ReactionType by the service
    type: str


class ReactionSummary(BaseModel):
    counts: Dict[str, int] = {}
    total_count: int = 0
    current_user_reaction: Optional[str] = None


class ToggleResult(BaseModel):
    """Outcome of a presence toggle (like, bookmark, follow)"""
    active: bool
