from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import APIKeyHeader
import jwt
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.core.config import JWTSettings
from app.db.database import get_db
from app.models.users import Users

auth_scheme = APIKeyHeader(name="Authorization", scheme_name="Bearer", auto_error=False)

_jwt_settings: Optional[JWTSettings] = None


def get_jwt_settings() -> JWTSettings:
    global _jwt_settings
    if _jwt_settings is None:
        _jwt_settings = JWTSettings()
    return _jwt_settings


def create_access_token(to_encode: dict) -> str:
    jwt_settings = get_jwt_settings()
    expire = datetime.now(timezone.utc) + timedelta(
        minutes=jwt_settings.access_token_expire_minutes
    )
    payload = dict(to_encode)
    payload.update({"exp": expire, "type": "access"})
    return jwt.encode(payload, jwt_settings.secret_key, algorithm=jwt_settings.algorithm)


def verify_token(token: str, secret_key: str, algorithm: str) -> dict:
    try:
        return jwt.decode(token, secret_key, algorithms=[algorithm])
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token has expired")
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Could not validate credentials")


def _caller_from_token(token: Optional[str]) -> UUID:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if not token:
        raise credentials_exception

    if token.startswith("Bearer "):
        token = token[7:]

    jwt_settings = get_jwt_settings()
    payload = verify_token(token, jwt_settings.secret_key, jwt_settings.algorithm)
    if payload.get("type") != "access" or payload.get("id") is None:
        raise credentials_exception

    try:
        return UUID(str(payload["id"]))
    except (ValueError, TypeError):
        raise credentials_exception


async def get_current_user(token: str = Depends(auth_scheme), db: AsyncSession = Depends(get_db)) -> Users:
    user_id = _caller_from_token(token)

    result = await db.execute(select(Users).where(Users.id == user_id))
    user = result.scalar_one_or_none()

    if user is None:
        logger.warning(f"Token for unknown user {user_id}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return user


async def get_current_user_id(user: Users = Depends(get_current_user)) -> UUID:
    return user.id


async def get_optional_user_id(token: Optional[str] = Depends(auth_scheme)) -> Optional[UUID]:
    """Caller id for endpoints that also serve anonymous readers."""
    if not token:
        return None
    try:
        return _caller_from_token(token)
    except HTTPException:
        return None
