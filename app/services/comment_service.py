from typing import Optional
from uuid import UUID

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import NotFound
from app.models.comments import Comment
from app.models.users import Users
from app.models.videos import Video
from app.schemas.pagination import Page
from app.services.ownership import load_owned
from app.services.query_builder import AggregationQuery, JoinSpec
from app.utils.identifiers import parse_identifier, require_text

COMMENTER_FIELDS = ("id", "username", "full_name", "avatar")


class CommentService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_video_comments(self, video_id: str, page: int = 1, page_size: int = 10) -> Page:
        video_uuid = parse_identifier(video_id, "video_id")
        return await (
            AggregationQuery(Comment)
            .match(video_id=video_uuid)
            .join(JoinSpec(Users, "owner_id", "id", alias="owner", fields=COMMENTER_FIELDS))
            .project("id", "content", "video_id", "created_at")
            .sort_by("created_at", "desc")
            .paginate(self.db, page, page_size)
        )

    async def add_comment(self, video_id: str, caller_id: UUID, content: Optional[str]) -> Comment:
        video_uuid = parse_identifier(video_id, "video_id")
        content = require_text(content, "content")

        if await self.db.get(Video, video_uuid) is None:
            raise NotFound("Video")

        comment = Comment(content=content, video_id=video_uuid, owner_id=caller_id)
        self.db.add(comment)
        await self.db.commit()
        await self.db.refresh(comment)

        logger.info(f"User {caller_id} commented {comment.id} on video {video_uuid}")
        return comment

    async def update_comment(self, comment_id: str, caller_id: UUID, content: Optional[str]) -> Comment:
        comment_uuid = parse_identifier(comment_id, "comment_id")
        content = require_text(content, "content")

        comment = await load_owned(self.db, Comment, comment_uuid, caller_id, "Comment", "update")
        comment.content = content
        await self.db.commit()
        await self.db.refresh(comment)
        return comment

    async def delete_comment(self, comment_id: str, caller_id: UUID) -> None:
        comment_uuid = parse_identifier(comment_id, "comment_id")
        comment = await load_owned(self.db, Comment, comment_uuid, caller_id, "Comment", "delete")

        # likes on the comment are intentionally left behind
        await self.db.delete(comment)
        await self.db.commit()
        logger.info(f"User {caller_id} deleted comment {comment_uuid}")
