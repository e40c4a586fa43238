from typing import Optional
from uuid import UUID

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.tweets import Tweet
from app.schemas.pagination import Page
from app.services.ownership import load_owned
from app.services.query_builder import AggregationQuery
from app.utils.identifiers import parse_identifier, require_text


class TweetService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_tweet(self, caller_id: UUID, content: Optional[str]) -> Tweet:
        tweet = Tweet(content=require_text(content, "content"), owner_id=caller_id)
        self.db.add(tweet)
        await self.db.commit()
        await self.db.refresh(tweet)

        logger.info(f"User {caller_id} created tweet {tweet.id}")
        return tweet

    async def list_user_tweets(self, user_id: str, page: int = 1, page_size: int = 10) -> Page:
        owner = parse_identifier(user_id, "user_id")
        return await (
            AggregationQuery(Tweet)
            .match(owner_id=owner)
            .project("id", "content", "created_at", "updated_at")
            .sort_by("created_at", "desc")
            .paginate(self.db, page, page_size)
        )

    async def update_tweet(self, tweet_id: str, caller_id: UUID, content: Optional[str]) -> Tweet:
        tweet_uuid = parse_identifier(tweet_id, "tweet_id")
        content = require_text(content, "content")

        tweet = await load_owned(self.db, Tweet, tweet_uuid, caller_id, "Tweet", "edit")
        tweet.content = content
        await self.db.commit()
        await self.db.refresh(tweet)
        return tweet

    async def delete_tweet(self, tweet_id: str, caller_id: UUID) -> None:
        tweet_uuid = parse_identifier(tweet_id, "tweet_id")
        tweet = await load_owned(self.db, Tweet, tweet_uuid, caller_id, "Tweet", "delete")

        await self.db.delete(tweet)
        await self.db.commit()
        logger.info(f"User {caller_id} deleted tweet {tweet_uuid}")
