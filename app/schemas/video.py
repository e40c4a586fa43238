from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class UploadResult(BaseModel):
    """What the external media-storage collaborator returns for one file."""

    url: Optional[str] = None
    duration: Optional[float] = Field(default=None, ge=0)


class VideoCreate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    video_file: Optional[UploadResult] = None
    thumbnail: Optional[UploadResult] = None


class VideoUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    thumbnail: Optional[UploadResult] = None


class VideoResponse(BaseModel):
    id: UUID
    owner_id: UUID
    video_file: str
    thumbnail: str
    title: str
    description: str
    duration: float
    views: int
    is_published: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PublishStatus(BaseModel):
    is_published: bool
