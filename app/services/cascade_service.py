from typing import Dict
from uuid import UUID

from loguru import logger
from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import StorageUnavailable
from app.models.comments import Comment
from app.models.likes import Like, LikeTargetType


class CascadingDeleteCoordinator:
    """Removes records that depend on a deleted parent.

    Only video deletion cascades: its comments and the likes on the video go.
    Likes on those comments and playlist entries pointing at the video are
    left in place. Every step is a plain delete-by-key, so re-running it
    after a partial failure is harmless.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def on_video_deleted(self, video_id: UUID) -> Dict[str, int]:
        try:
            likes = await self.db.execute(
                delete(Like).where(
                    Like.target_type == LikeTargetType.VIDEO,
                    Like.target_id == video_id,
                )
            )
            comments = await self.db.execute(
                delete(Comment).where(Comment.video_id == video_id)
            )
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.exception(f"Cleanup after deleting video {video_id} failed: {e}")
            raise StorageUnavailable(
                "Video deleted but its comments and likes could not be removed yet",
                pending_cleanup=video_id,
            )

        removed = {"likes": likes.rowcount or 0, "comments": comments.rowcount or 0}
        logger.info(f"Cleaned up after video {video_id}: {removed['comments']} comments, {removed['likes']} likes")
        return removed
