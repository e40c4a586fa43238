from typing import Optional
from uuid import UUID

from loguru import logger
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import NotFound
from app.models.likes import Like, LikeTargetType
from app.models.subscriptions import Subscription
from app.models.users import Users
from app.models.videos import Video
from app.schemas.dashboard import ChannelStats
from app.schemas.pagination import Page
from app.services.query_builder import AggregationQuery
from app.utils.identifiers import require_text


class DashboardService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_channel_stats(self, channel_id: UUID) -> ChannelStats:
        total_videos = (await self.db.execute(
            select(func.count(Video.id)).where(Video.owner_id == channel_id)
        )).scalar_one()

        total_views = (await self.db.execute(
            select(func.coalesce(func.sum(Video.views), 0)).where(Video.owner_id == channel_id)
        )).scalar_one()

        total_subscribers = (await self.db.execute(
            select(func.count(Subscription.id)).where(Subscription.channel_id == channel_id)
        )).scalar_one()

        owned_videos = select(Video.id).where(Video.owner_id == channel_id)
        total_likes = (await self.db.execute(
            select(func.count(Like.id)).where(
                Like.target_type == LikeTargetType.VIDEO,
                Like.target_id.in_(owned_videos),
            )
        )).scalar_one()

        stats = ChannelStats(
            total_videos=int(total_videos or 0),
            total_views=int(total_views or 0),
            total_subscribers=int(total_subscribers or 0),
            total_likes=int(total_likes or 0),
        )
        logger.debug(f"Channel stats for {channel_id}: {stats}")
        return stats

    async def get_channel_videos(
        self,
        username: str,
        caller_id: Optional[UUID] = None,
        page: int = 1,
        page_size: int = 10,
    ) -> Page:
        """Videos of the named channel, newest first; drafts only for the channel itself."""
        username = require_text(username, "username").lower()

        result = await self.db.execute(select(Users.id).where(Users.username == username))
        channel_id = result.scalar_one_or_none()
        if channel_id is None:
            raise NotFound("Channel", "Cannot find channel with that username")

        pipeline = AggregationQuery(Video).match(owner_id=channel_id)
        if caller_id != channel_id:
            pipeline.match(is_published=True)

        return await (
            pipeline
            .sort_by("created_at", "desc")
            .paginate(self.db, page, page_size)
        )
