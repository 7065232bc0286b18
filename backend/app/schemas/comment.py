"""Pydantic schemas for comment thread request/response contracts."""

from pydantic import AliasChoices, BaseModel, Field
from typing import Optional
from datetime import datetime


class CommentCreate(BaseModel):
    entry_id: int
    parent_id: Optional[int] = None  # 0 or absent = top level
    context: str
    type: str = Field(validation_alias=AliasChoices("type", "classification"))


class CommentOut(BaseModel):
    id: int
    entry_id: int
    user_id: int
    parent_id: Optional[int] = None
    context: str
    type: str
    username: Optional[str] = None
    num_of_replies: int = 0
    upvotes: int = 0
    downvotes: int = 0
    user_interaction: str = ""
    created_at: Optional[datetime] = None
