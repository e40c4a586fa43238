from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class CommentPayload(BaseModel):
    content: Optional[str] = None


class CommentResponse(BaseModel):
    id: UUID
    content: str
    video_id: UUID
    owner_id: UUID
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
