from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, ClassVar, Dict, Optional, Type
from uuid import UUID

from loguru import logger
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import SelfReferenceNotAllowed, TargetNotFound
from app.models.comments import Comment
from app.models.likes import Like, LikeTargetType
from app.models.subscriptions import Subscription
from app.models.tweets import Tweet
from app.models.users import Users
from app.models.videos import Video


class ToggleOutcome(str, Enum):
    CREATED = "created"
    REMOVED = "removed"


@dataclass(frozen=True)
class LikeTarget:
    target_type: ClassVar[LikeTargetType]
    model: ClassVar[type]
    resource: ClassVar[str]

    id: UUID

    def visible_to(self, record: Any, caller_id: UUID) -> bool:
        return True


@dataclass(frozen=True)
class VideoTarget(LikeTarget):
    target_type = LikeTargetType.VIDEO
    model = Video
    resource = "Video"

    def visible_to(self, record: Video, caller_id: UUID) -> bool:
        # drafts exist only for their owner
        return record.is_published or record.owner_id == caller_id


@dataclass(frozen=True)
class CommentTarget(LikeTarget):
    target_type = LikeTargetType.COMMENT
    model = Comment
    resource = "Comment"


@dataclass(frozen=True)
class TweetTarget(LikeTarget):
    target_type = LikeTargetType.TWEET
    model = Tweet
    resource = "Tweet"


@dataclass(frozen=True)
class Edge:
    """A relation record identified by its natural key.

    ``key`` maps column names of ``model`` to values and is exactly the
    column set covered by the model's unique constraint.
    """

    model: Type[Any]
    key: Dict[str, Any]
    subject_id: UUID
    target_model: Type[Any]
    target_id: UUID
    resource: str
    allow_self: bool = field(default=True)
    visible: Optional[Callable[[Any, UUID], bool]] = None


def like_edge(subject_id: UUID, target: LikeTarget) -> Edge:
    return Edge(
        model=Like,
        key={"liked_by_id": subject_id, "target_type": target.target_type, "target_id": target.id},
        subject_id=subject_id,
        target_model=target.model,
        target_id=target.id,
        resource=target.resource,
        visible=target.visible_to,
    )


def subscription_edge(subscriber_id: UUID, channel_id: UUID) -> Edge:
    return Edge(
        model=Subscription,
        key={"subscriber_id": subscriber_id, "channel_id": channel_id},
        subject_id=subscriber_id,
        target_model=Users,
        target_id=channel_id,
        resource="Channel",
        allow_self=False,
    )


class ToggleRelationManager:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def toggle(self, edge: Edge) -> ToggleOutcome:
        target = await self.db.get(edge.target_model, edge.target_id)
        if target is None or (edge.visible is not None and not edge.visible(target, edge.subject_id)):
            raise TargetNotFound(edge.resource)

        if not edge.allow_self and edge.subject_id == edge.target_id:
            raise SelfReferenceNotAllowed()

        result = await self.db.execute(select(edge.model).filter_by(**edge.key))
        existing = result.scalar_one_or_none()

        if existing is not None:
            await self.db.delete(existing)
            await self.db.commit()
            logger.info(f"Removed {edge.model.__tablename__} edge {edge.subject_id} -> {edge.target_id}")
            return ToggleOutcome.REMOVED

        self.db.add(edge.model(**edge.key))
        try:
            await self.db.commit()
        except IntegrityError:
            # a concurrent toggle created the edge between our lookup and insert;
            # this call is the second of the pair, so it removes the edge
            await self.db.rollback()
            logger.info(
                f"Concurrent create on {edge.model.__tablename__} edge {edge.subject_id} -> {edge.target_id}, removing"
            )
            await self._delete_by_key(edge)
            return ToggleOutcome.REMOVED

        logger.info(f"Created {edge.model.__tablename__} edge {edge.subject_id} -> {edge.target_id}")
        return ToggleOutcome.CREATED

    async def exists(self, edge: Edge) -> bool:
        result = await self.db.execute(select(edge.model.id).filter_by(**edge.key))
        return result.first() is not None

    async def _delete_by_key(self, edge: Edge) -> None:
        await self.db.execute(delete(edge.model).filter_by(**edge.key))
        await self.db.commit()
