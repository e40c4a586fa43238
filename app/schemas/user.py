from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, ConfigDict

from app.schemas.token import Token


class UserBase(BaseModel):
    username: str = Field(..., min_length=1, max_length=64, description="Unique channel handle")
    full_name: str = Field(..., min_length=1, max_length=128)
    avatar: Optional[str] = Field(default=None, description="Avatar image URL")
    cover_image: Optional[str] = Field(default=None, description="Cover image URL")


class UserCreate(UserBase):
    pass


class UserResponse(UserBase):
    id: UUID
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class RegisteredUser(BaseModel):
    user: UserResponse
    token: Token


class ChannelProfile(BaseModel):
    id: UUID
    username: str
    full_name: str
    avatar: Optional[str] = None
    cover_image: Optional[str] = None
    subscribers_count: int
    channels_subscribed_to_count: int
    is_subscribed: bool
