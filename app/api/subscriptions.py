from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import Pagination, pagination_params
from app.db.database import get_db
from app.schemas.relation import SubscriptionStatus
from app.schemas.response import ApiResponse
from app.services.subscription_service import SubscriptionService
from app.services.toggle_service import ToggleOutcome
from app.utils.security import get_current_user_id

subscriptions_router = APIRouter()


@subscriptions_router.post("/c/{channel_id}", response_model=ApiResponse)
async def toggle_subscription(
    channel_id: str,
    db: AsyncSession = Depends(get_db),
    caller_id: UUID = Depends(get_current_user_id),
):
    outcome = await SubscriptionService(db).toggle_subscription(channel_id, caller_id)
    subscribed = outcome is ToggleOutcome.CREATED
    message = "Subscribed successfully" if subscribed else "Unsubscribed successfully"
    return ApiResponse.ok(SubscriptionStatus(is_subscribed=subscribed), message)


@subscriptions_router.get("/c/{channel_id}", response_model=ApiResponse)
async def list_channel_subscribers(
    channel_id: str,
    pagination: Pagination = Depends(pagination_params),
    db: AsyncSession = Depends(get_db),
):
    page = await SubscriptionService(db).list_channel_subscribers(channel_id, pagination.page, pagination.page_size)
    return ApiResponse.ok(page, "Subscribers for this channel fetched successfully")


@subscriptions_router.get("/u/{subscriber_id}", response_model=ApiResponse)
async def list_subscribed_channels(
    subscriber_id: str,
    pagination: Pagination = Depends(pagination_params),
    db: AsyncSession = Depends(get_db),
):
    page = await SubscriptionService(db).list_subscribed_channels(subscriber_id, pagination.page, pagination.page_size)
    return ApiResponse.ok(page, "Channels fetched successfully")
