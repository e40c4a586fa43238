from pydantic import BaseModel


class LikeStatus(BaseModel):
    is_liked: bool


class SubscriptionStatus(BaseModel):
    is_subscribed: bool
