from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import Pagination, pagination_params
from app.db.database import get_db
from app.schemas.response import ApiResponse
from app.schemas.tweet import TweetPayload, TweetResponse
from app.services.tweet_service import TweetService
from app.utils.security import get_current_user_id

tweets_router = APIRouter()


@tweets_router.post("", response_model=ApiResponse, status_code=status.HTTP_201_CREATED)
async def create_tweet(
    payload: TweetPayload,
    db: AsyncSession = Depends(get_db),
    caller_id: UUID = Depends(get_current_user_id),
):
    tweet = await TweetService(db).create_tweet(caller_id, payload.content)
    return ApiResponse.ok(TweetResponse.model_validate(tweet), "Tweet created successfully", status.HTTP_201_CREATED)


@tweets_router.get("/user/{user_id}", response_model=ApiResponse)
async def list_user_tweets(
    user_id: str,
    pagination: Pagination = Depends(pagination_params),
    db: AsyncSession = Depends(get_db),
):
    page = await TweetService(db).list_user_tweets(user_id, pagination.page, pagination.page_size)
    return ApiResponse.ok(page, "All tweets by user found successfully")


@tweets_router.patch("/{tweet_id}", response_model=ApiResponse)
async def update_tweet(
    tweet_id: str,
    payload: TweetPayload,
    db: AsyncSession = Depends(get_db),
    caller_id: UUID = Depends(get_current_user_id),
):
    tweet = await TweetService(db).update_tweet(tweet_id, caller_id, payload.content)
    return ApiResponse.ok(TweetResponse.model_validate(tweet), "Tweet has been updated successfully")


@tweets_router.delete("/{tweet_id}", response_model=ApiResponse)
async def delete_tweet(
    tweet_id: str,
    db: AsyncSession = Depends(get_db),
    caller_id: UUID = Depends(get_current_user_id),
):
    await TweetService(db).delete_tweet(tweet_id, caller_id)
    return ApiResponse.ok({}, "Tweet deleted successfully")
