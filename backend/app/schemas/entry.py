"""Pydantic schemas for entry request/response contracts."""

from pydantic import AliasChoices, BaseModel, Field
from typing import List, Optional
from datetime import datetime

from app.schemas.tag import TagBase, TagOut


class EntryCreate(BaseModel):
    title: str
    address: str = Field(validation_alias=AliasChoices("address", "location"))
    longitude: float
    latitude: float
    description: str
    tags: List[TagBase] = []


class EntryUpdate(BaseModel):
    title: str
    content: str
    tags: List[TagBase] = []


class EntryCreated(BaseModel):
    entry_id: int
    revision_id: int
    revision_number: int


class RevisionOut(BaseModel):
    id: int
    entry_id: int
    title: str
    content: str
    revision_number: int
    creator_id: int
    username: Optional[str] = None
    date_created: Optional[datetime] = None
    tags: List[TagOut] = []


class EntrySummaryOut(BaseModel):
    id: int
    title: str
    address: str
    content: str
    views: int
    date_created: Optional[datetime] = None
    username: str
    first_name: str
    last_name: str
    longitude: float
    latitude: float
    upvotes: int = 0
    downvotes: int = 0
    number_of_comments: int = 0


class EntryOut(EntrySummaryOut):
    revision_id: int
    revision_number: int
    tags: List[TagOut] = []
    user_interaction: str = ""


class BoundsQuery(BaseModel):
    north: float = Field(ge=-90, le=90)
    south: float = Field(ge=-90, le=90)
    east: float = Field(ge=-180, le=180)
    west: float = Field(ge=-180, le=180)
