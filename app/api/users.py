from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.database import get_db
from app.models.users import Users
from app.schemas.response import ApiResponse
from app.schemas.user import UserResponse
from app.services.user_service import UserService
from app.utils.security import get_current_user, get_optional_user_id

users_router = APIRouter()


@users_router.get("/me", response_model=ApiResponse)
async def read_current_user(user: Users = Depends(get_current_user)):
    return ApiResponse.ok(UserResponse.model_validate(user), "Current user fetched successfully")


@users_router.get("/channel/{username}", response_model=ApiResponse)
async def read_channel_profile(
    username: str,
    db: AsyncSession = Depends(get_db),
    caller_id: Optional[UUID] = Depends(get_optional_user_id),
):
    profile = await UserService(db).get_channel_profile(username, caller_id)
    return ApiResponse.ok(profile, "Channel profile fetched successfully")
