from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import Pagination, pagination_params
from app.db.database import get_db
from app.schemas.comment import CommentPayload, CommentResponse
from app.schemas.response import ApiResponse
from app.services.comment_service import CommentService
from app.utils.security import get_current_user_id

comments_router = APIRouter()


@comments_router.get("/{video_id}", response_model=ApiResponse)
async def list_video_comments(
    video_id: str,
    pagination: Pagination = Depends(pagination_params),
    db: AsyncSession = Depends(get_db),
):
    page = await CommentService(db).list_video_comments(video_id, pagination.page, pagination.page_size)
    return ApiResponse.ok(page, "Comments fetched successfully")


@comments_router.post("/{video_id}", response_model=ApiResponse, status_code=status.HTTP_201_CREATED)
async def add_comment(
    video_id: str,
    payload: CommentPayload,
    db: AsyncSession = Depends(get_db),
    caller_id: UUID = Depends(get_current_user_id),
):
    comment = await CommentService(db).add_comment(video_id, caller_id, payload.content)
    return ApiResponse.ok(CommentResponse.model_validate(comment), "Comment added successfully", status.HTTP_201_CREATED)


@comments_router.patch("/c/{comment_id}", response_model=ApiResponse)
async def update_comment(
    comment_id: str,
    payload: CommentPayload,
    db: AsyncSession = Depends(get_db),
    caller_id: UUID = Depends(get_current_user_id),
):
    comment = await CommentService(db).update_comment(comment_id, caller_id, payload.content)
    return ApiResponse.ok(CommentResponse.model_validate(comment), "Comment updated successfully")


@comments_router.delete("/c/{comment_id}", response_model=ApiResponse)
async def delete_comment(
    comment_id: str,
    db: AsyncSession = Depends(get_db),
    caller_id: UUID = Depends(get_current_user_id),
):
    await CommentService(db).delete_comment(comment_id, caller_id)
    return ApiResponse.ok({}, "Comment deleted successfully")
