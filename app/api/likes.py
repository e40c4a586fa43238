from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import Pagination, pagination_params
from app.db.database import get_db
from app.schemas.relation import LikeStatus
from app.schemas.response import ApiResponse
from app.services.like_service import LikeService
from app.services.toggle_service import ToggleOutcome
from app.utils.security import get_current_user_id

likes_router = APIRouter()


def _like_response(outcome: ToggleOutcome, subject: str) -> ApiResponse:
    liked = outcome is ToggleOutcome.CREATED
    verb = "liked" if liked else "unliked"
    return ApiResponse.ok(LikeStatus(is_liked=liked), f"{subject} {verb} successfully")


@likes_router.post("/toggle/v/{video_id}", response_model=ApiResponse)
async def toggle_video_like(
    video_id: str,
    db: AsyncSession = Depends(get_db),
    caller_id: UUID = Depends(get_current_user_id),
):
    return _like_response(await LikeService(db).toggle_video_like(video_id, caller_id), "Video")


@likes_router.post("/toggle/c/{comment_id}", response_model=ApiResponse)
async def toggle_comment_like(
    comment_id: str,
    db: AsyncSession = Depends(get_db),
    caller_id: UUID = Depends(get_current_user_id),
):
    return _like_response(await LikeService(db).toggle_comment_like(comment_id, caller_id), "Comment")


@likes_router.post("/toggle/t/{tweet_id}", response_model=ApiResponse)
async def toggle_tweet_like(
    tweet_id: str,
    db: AsyncSession = Depends(get_db),
    caller_id: UUID = Depends(get_current_user_id),
):
    return _like_response(await LikeService(db).toggle_tweet_like(tweet_id, caller_id), "Tweet")


@likes_router.get("/videos", response_model=ApiResponse)
async def list_liked_videos(
    pagination: Pagination = Depends(pagination_params),
    db: AsyncSession = Depends(get_db),
    caller_id: UUID = Depends(get_current_user_id),
):
    page = await LikeService(db).list_liked_videos(caller_id, pagination.page, pagination.page_size)
    return ApiResponse.ok(page, "Liked videos fetched successfully")
