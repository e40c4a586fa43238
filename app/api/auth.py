from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.database import get_db
from app.schemas.response import ApiResponse
from app.schemas.token import Token
from app.schemas.user import RegisteredUser, UserCreate, UserResponse
from app.services.user_service import UserService
from app.utils.security import create_access_token

auth_router = APIRouter()


@auth_router.post("/register", response_model=ApiResponse, status_code=status.HTTP_201_CREATED)
async def register_user(
    payload: UserCreate,
    db: AsyncSession = Depends(get_db),
):
    user = await UserService(db).register_user(payload)
    token = Token(access_token=create_access_token({"id": str(user.id)}))

    return ApiResponse.ok(
        RegisteredUser(user=UserResponse.model_validate(user), token=token),
        "User registered successfully",
        status.HTTP_201_CREATED,
    )
