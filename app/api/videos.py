from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import Pagination, pagination_params
from app.core.errors import StorageUnavailable
from app.db.database import get_db
from app.schemas.response import ApiResponse
from app.schemas.video import PublishStatus, VideoCreate, VideoResponse, VideoUpdate
from app.services.video_service import VideoService
from app.tasks.cleanup_task import schedule_video_cleanup
from app.utils.security import get_current_user_id, get_optional_user_id

videos_router = APIRouter()


@videos_router.get("", response_model=ApiResponse)
async def list_videos(
    query: Optional[str] = Query(None, description="Case-insensitive title search"),
    sort_by: str = Query("created_at"),
    sort_type: str = Query("desc"),
    user_id: Optional[str] = Query(None, description="Only videos published by this user"),
    pagination: Pagination = Depends(pagination_params),
    db: AsyncSession = Depends(get_db),
):
    page = await VideoService(db).list_videos(
        page=pagination.page,
        page_size=pagination.page_size,
        query=query,
        sort_by=sort_by,
        sort_type=sort_type,
        owner_id=user_id,
    )
    return ApiResponse.ok(page, "Videos fetched successfully")


@videos_router.post("", response_model=ApiResponse, status_code=status.HTTP_201_CREATED)
async def publish_video(
    payload: VideoCreate,
    db: AsyncSession = Depends(get_db),
    caller_id: UUID = Depends(get_current_user_id),
):
    video = await VideoService(db).publish_video(
        caller_id,
        title=payload.title,
        description=payload.description,
        video_file=payload.video_file,
        thumbnail=payload.thumbnail,
    )
    return ApiResponse.ok(VideoResponse.model_validate(video), "Video published successfully", status.HTTP_201_CREATED)


@videos_router.get("/{video_id}", response_model=ApiResponse)
async def get_video(
    video_id: str,
    db: AsyncSession = Depends(get_db),
    caller_id: Optional[UUID] = Depends(get_optional_user_id),
):
    video = await VideoService(db).get_video(video_id, caller_id)
    return ApiResponse.ok(VideoResponse.model_validate(video), "Video fetched successfully")


@videos_router.patch("/{video_id}", response_model=ApiResponse)
async def update_video(
    video_id: str,
    payload: VideoUpdate,
    db: AsyncSession = Depends(get_db),
    caller_id: UUID = Depends(get_current_user_id),
):
    video = await VideoService(db).update_video(
        video_id,
        caller_id,
        title=payload.title,
        description=payload.description,
        thumbnail=payload.thumbnail,
    )
    return ApiResponse.ok(VideoResponse.model_validate(video), "Video updated successfully")


@videos_router.delete("/{video_id}", response_model=ApiResponse)
async def delete_video(
    video_id: str,
    db: AsyncSession = Depends(get_db),
    caller_id: UUID = Depends(get_current_user_id),
):
    try:
        removed = await VideoService(db).delete_video(video_id, caller_id)
    except StorageUnavailable as e:
        if e.pending_cleanup is not None:
            await schedule_video_cleanup(e.pending_cleanup)
        raise
    return ApiResponse.ok(removed, "Video and related data deleted successfully")


@videos_router.patch("/{video_id}/publish", response_model=ApiResponse)
async def toggle_publish_status(
    video_id: str,
    db: AsyncSession = Depends(get_db),
    caller_id: UUID = Depends(get_current_user_id),
):
    video = await VideoService(db).toggle_publish_status(video_id, caller_id)
    message = "Video published successfully" if video.is_published else "Video unpublished successfully"
    return ApiResponse.ok(PublishStatus(is_published=video.is_published), message)
