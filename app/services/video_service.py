from typing import Optional
from uuid import UUID

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import NotFound, UploadFailed
from app.models.users import Users
from app.models.videos import Video
from app.schemas.pagination import Page
from app.schemas.video import UploadResult
from app.services.cascade_service import CascadingDeleteCoordinator
from app.services.ownership import load_owned
from app.services.query_builder import AggregationQuery, JoinSpec
from app.utils.identifiers import parse_identifier, parse_optional_identifier, require_text

VIDEO_LIST_FIELDS = ("id", "video_file", "thumbnail", "title", "description", "duration", "views", "created_at")
OWNER_SUMMARY_FIELDS = ("id", "username", "avatar")


def _require_upload(result: Optional[UploadResult], field: str) -> UploadResult:
    if result is None or not result.url:
        raise UploadFailed(f"Error uploading {field}")
    return result


class VideoService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_videos(
        self,
        page: int = 1,
        page_size: int = 10,
        query: Optional[str] = None,
        sort_by: str = "created_at",
        sort_type: str = "desc",
        owner_id: Optional[str] = None,
    ) -> Page:
        publisher = parse_optional_identifier(owner_id, "user_id")

        pipeline = AggregationQuery(Video).match(is_published=True).match_text("title", query)
        if publisher is not None:
            pipeline.match(owner_id=publisher)

        return await (
            pipeline
            .join(JoinSpec(Users, "owner_id", "id", alias="owner", fields=OWNER_SUMMARY_FIELDS))
            .project(*VIDEO_LIST_FIELDS)
            .sort_by(sort_by, sort_type)
            .paginate(self.db, page, page_size)
        )

    async def get_video(self, video_id: str, caller_id: Optional[UUID] = None) -> Video:
        video = await self.db.get(Video, parse_identifier(video_id, "video_id"))
        # unpublished videos exist only for their owner
        if video is None or (not video.is_published and video.owner_id != caller_id):
            raise NotFound("Video")
        return video

    async def publish_video(
        self,
        caller_id: UUID,
        title: Optional[str],
        description: Optional[str],
        video_file: Optional[UploadResult],
        thumbnail: Optional[UploadResult],
    ) -> Video:
        title = require_text(title, "title")
        description = require_text(description, "description")
        video_file = _require_upload(video_file, "video file")
        thumbnail = _require_upload(thumbnail, "thumbnail")

        video = Video(
            video_file=video_file.url,
            thumbnail=thumbnail.url,
            title=title,
            description=description,
            duration=video_file.duration or 0,
            owner_id=caller_id,
        )
        self.db.add(video)
        await self.db.commit()
        await self.db.refresh(video)

        logger.info(f"User {caller_id} published video {video.id}")
        return video

    async def update_video(
        self,
        video_id: str,
        caller_id: UUID,
        title: Optional[str],
        description: Optional[str],
        thumbnail: Optional[UploadResult] = None,
    ) -> Video:
        video_uuid = parse_identifier(video_id, "video_id")
        title = require_text(title, "title")
        description = require_text(description, "description")
        if thumbnail is not None:
            thumbnail = _require_upload(thumbnail, "thumbnail")

        video = await load_owned(self.db, Video, video_uuid, caller_id, "Video", "edit")
        if thumbnail is not None:
            video.thumbnail = thumbnail.url

        video.title = title
        video.description = description
        await self.db.commit()
        await self.db.refresh(video)

        logger.info(f"User {caller_id} updated video {video.id}")
        return video

    async def delete_video(self, video_id: str, caller_id: UUID) -> dict:
        video_uuid = parse_identifier(video_id, "video_id")
        video = await load_owned(self.db, Video, video_uuid, caller_id, "Video", "delete")

        await self.db.delete(video)
        await self.db.commit()
        logger.info(f"User {caller_id} deleted video {video_uuid}")

        return await CascadingDeleteCoordinator(self.db).on_video_deleted(video_uuid)

    async def toggle_publish_status(self, video_id: str, caller_id: UUID) -> Video:
        video_uuid = parse_identifier(video_id, "video_id")
        video = await load_owned(self.db, Video, video_uuid, caller_id, "Video", "update")

        video.is_published = not video.is_published
        await self.db.commit()
        await self.db.refresh(video)

        logger.info(f"Video {video.id} is_published -> {video.is_published}")
        return video
