from typing import Optional, Tuple
from uuid import UUID

from loguru import logger
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import Conflict, NotFound
from app.models.subscriptions import Subscription
from app.models.users import Users
from app.schemas.user import ChannelProfile, UserCreate
from app.utils.identifiers import require_text


class UserService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user_by_username(self, username: str) -> Optional[Users]:
        result = await self.db.execute(
            select(Users).where(Users.username == username.strip().lower())
        )
        return result.scalar_one_or_none()

    async def register_user(self, payload: UserCreate) -> Users:
        username = require_text(payload.username, "username").lower()
        full_name = require_text(payload.full_name, "full_name")

        if await self.get_user_by_username(username):
            raise Conflict("User with this username already exists")

        user = Users(
            username=username,
            full_name=full_name,
            avatar=payload.avatar,
            cover_image=payload.cover_image,
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise Conflict("User with this username already exists")
        await self.db.refresh(user)

        logger.info(f"Registered user {user.id} ({user.username})")
        return user

    async def get_channel_profile(self, username: str, caller_id: Optional[UUID] = None) -> ChannelProfile:
        user = await self.get_user_by_username(require_text(username, "username"))
        if user is None:
            raise NotFound("Channel")

        subscribers, subscribed_to = await self._subscription_counts(user.id)

        is_subscribed = False
        if caller_id is not None:
            result = await self.db.execute(
                select(Subscription.id).where(
                    Subscription.subscriber_id == caller_id,
                    Subscription.channel_id == user.id,
                )
            )
            is_subscribed = result.first() is not None

        return ChannelProfile(
            id=user.id,
            username=user.username,
            full_name=user.full_name,
            avatar=user.avatar,
            cover_image=user.cover_image,
            subscribers_count=subscribers,
            channels_subscribed_to_count=subscribed_to,
            is_subscribed=is_subscribed,
        )

    async def _subscription_counts(self, user_id: UUID) -> Tuple[int, int]:
        subscribers = (await self.db.execute(
            select(func.count(Subscription.id)).where(Subscription.channel_id == user_id)
        )).scalar_one()
        subscribed_to = (await self.db.execute(
            select(func.count(Subscription.id)).where(Subscription.subscriber_id == user_id)
        )).scalar_one()
        return int(subscribers), int(subscribed_to)
