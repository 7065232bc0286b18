"""Pydantic schemas for the tag registry."""

from pydantic import BaseModel


class TagBase(BaseModel):
    name: str
    classification: str = ""


class TagOut(TagBase):
    model_config = {"from_attributes": True}
