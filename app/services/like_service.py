from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.likes import Like, LikeTargetType
from app.models.videos import Video
from app.schemas.pagination import Page
from app.services.query_builder import AggregationQuery, JoinSpec
from app.services.toggle_service import (
    CommentTarget,
    LikeTarget,
    ToggleOutcome,
    ToggleRelationManager,
    TweetTarget,
    VideoTarget,
    like_edge,
)
from app.utils.identifiers import parse_identifier

LIKED_VIDEO_FIELDS = ("id", "video_file", "thumbnail", "title", "duration", "views", "owner_id")


class LikeService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.relations = ToggleRelationManager(db)

    async def _toggle(self, caller_id: UUID, target: LikeTarget) -> ToggleOutcome:
        return await self.relations.toggle(like_edge(caller_id, target))

    async def toggle_video_like(self, video_id: str, caller_id: UUID) -> ToggleOutcome:
        return await self._toggle(caller_id, VideoTarget(parse_identifier(video_id, "video_id")))

    async def toggle_comment_like(self, comment_id: str, caller_id: UUID) -> ToggleOutcome:
        return await self._toggle(caller_id, CommentTarget(parse_identifier(comment_id, "comment_id")))

    async def toggle_tweet_like(self, tweet_id: str, caller_id: UUID) -> ToggleOutcome:
        return await self._toggle(caller_id, TweetTarget(parse_identifier(tweet_id, "tweet_id")))

    async def is_liked(self, caller_id: UUID, target: LikeTarget) -> bool:
        return await self.relations.exists(like_edge(caller_id, target))

    async def list_liked_videos(self, caller_id: UUID, page: int = 1, page_size: int = 10) -> Page:
        return await (
            AggregationQuery(Like)
            .match(liked_by_id=caller_id, target_type=LikeTargetType.VIDEO)
            .join(JoinSpec(
                Video, "target_id", "id", alias="video",
                fields=LIKED_VIDEO_FIELDS, flatten=True, match={"is_published": True},
            ))
            .project()
            .sort_by("created_at", "desc")
            .paginate(self.db, page, page_size)
        )
