from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.subscriptions import Subscription
from app.models.users import Users
from app.schemas.pagination import Page
from app.services.query_builder import AggregationQuery, JoinSpec
from app.services.toggle_service import ToggleOutcome, ToggleRelationManager, subscription_edge
from app.utils.identifiers import parse_identifier

USER_SUMMARY_FIELDS = ("id", "username", "full_name", "avatar")


class SubscriptionService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.relations = ToggleRelationManager(db)

    async def toggle_subscription(self, channel_id: str, caller_id: UUID) -> ToggleOutcome:
        channel = parse_identifier(channel_id, "channel_id")
        return await self.relations.toggle(subscription_edge(caller_id, channel))

    async def is_subscribed(self, caller_id: UUID, channel_id: UUID) -> bool:
        return await self.relations.exists(subscription_edge(caller_id, channel_id))

    async def list_channel_subscribers(self, channel_id: str, page: int = 1, page_size: int = 10) -> Page:
        channel = parse_identifier(channel_id, "channel_id")
        return await (
            AggregationQuery(Subscription)
            .match(channel_id=channel)
            .join(JoinSpec(Users, "subscriber_id", "id", alias="subscriber", fields=USER_SUMMARY_FIELDS))
            .project("created_at")
            .sort_by("created_at", "desc")
            .paginate(self.db, page, page_size)
        )

    async def list_subscribed_channels(self, subscriber_id: str, page: int = 1, page_size: int = 10) -> Page:
        subscriber = parse_identifier(subscriber_id, "subscriber_id")
        return await (
            AggregationQuery(Subscription)
            .match(subscriber_id=subscriber)
            .join(JoinSpec(Users, "channel_id", "id", alias="channel", fields=USER_SUMMARY_FIELDS, flatten=True))
            .project()
            .sort_by("created_at", "desc")
            .paginate(self.db, page, page_size)
        )
