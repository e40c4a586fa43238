from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class TweetPayload(BaseModel):
    content: Optional[str] = None


class TweetResponse(BaseModel):
    id: UUID
    content: str
    owner_id: UUID
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
