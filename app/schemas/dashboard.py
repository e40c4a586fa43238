from pydantic import BaseModel, Field


class ChannelStats(BaseModel):
    total_videos: int = Field(default=0, ge=0)
    total_views: int = Field(default=0, ge=0)
    total_subscribers: int = Field(default=0, ge=0)
    total_likes: int = Field(default=0, ge=0)


class ChannelLookup(BaseModel):
    username: str = Field(default="")
