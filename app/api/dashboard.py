from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import Pagination, pagination_params
from app.db.database import get_db
from app.schemas.dashboard import ChannelLookup
from app.schemas.response import ApiResponse
from app.services.dashboard_service import DashboardService
from app.utils.security import get_current_user_id

dashboard_router = APIRouter()


@dashboard_router.get("/stats", response_model=ApiResponse)
async def get_channel_stats(
    db: AsyncSession = Depends(get_db),
    caller_id: UUID = Depends(get_current_user_id),
):
    stats = await DashboardService(db).get_channel_stats(caller_id)
    return ApiResponse.ok(stats, "Channel statistics fetched successfully")


@dashboard_router.post("/videos", response_model=ApiResponse)
async def get_channel_videos(
    payload: ChannelLookup,
    pagination: Pagination = Depends(pagination_params),
    db: AsyncSession = Depends(get_db),
    caller_id: UUID = Depends(get_current_user_id),
):
    page = await DashboardService(db).get_channel_videos(
        payload.username, caller_id, pagination.page, pagination.page_size
    )
    return ApiResponse.ok(page, "Videos created by this channel fetched successfully")
