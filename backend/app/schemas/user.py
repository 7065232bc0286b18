"""Pydantic schemas for user request/response contracts."""

from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class UserBase(BaseModel):
    username: str
    first_name: str = ""
    last_name: str = ""
    email: Optional[str] = None


class UserCreate(UserBase):
    pass


class UserOut(UserBase):
    user_id: int
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class LoginRequest(BaseModel):
    username: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserOut
