from typing import Optional
from uuid import UUID

from loguru import logger
from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import Conflict, NotFound
from app.db.database import utcnow
from app.models.playlists import Playlist, PlaylistVideo
from app.models.videos import Video
from app.schemas.pagination import Page
from app.schemas.playlist import PlaylistDetail
from app.services.ownership import load_owned
from app.services.query_builder import AggregationQuery, JoinSpec
from app.utils.identifiers import parse_identifier, require_text

PLAYLIST_FIELDS = ("id", "name", "description", "owner_id", "created_at", "updated_at")
PLAYLIST_VIDEO_FIELDS = ("id", "title", "thumbnail", "duration")


def _video_ids_pipeline() -> AggregationQuery:
    # same membership view as _video_summaries_pipeline: deleted videos drop out
    return (
        AggregationQuery(PlaylistVideo)
        .join(JoinSpec(Video, "video_id", "id", alias="video", flatten=True))
        .project("video_id")
        .sort_by("position", "asc")
    )


def _video_summaries_pipeline() -> AggregationQuery:
    # entries whose video has been deleted drop out here
    return (
        AggregationQuery(PlaylistVideo)
        .join(JoinSpec(Video, "video_id", "id", alias="video", fields=PLAYLIST_VIDEO_FIELDS, flatten=True))
        .project()
        .sort_by("position", "asc")
    )


class PlaylistService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_playlist(self, caller_id: UUID, name: Optional[str], description: Optional[str]) -> Playlist:
        playlist = Playlist(
            name=require_text(name, "name"),
            description=require_text(description, "description"),
            owner_id=caller_id,
        )
        self.db.add(playlist)
        await self.db.commit()
        await self.db.refresh(playlist)

        logger.info(f"User {caller_id} created playlist {playlist.id}")
        return playlist

    async def list_user_playlists(self, user_id: str, page: int = 1, page_size: int = 10) -> Page:
        owner = parse_identifier(user_id, "user_id")
        return await (
            AggregationQuery(Playlist)
            .match(owner_id=owner)
            .join(JoinSpec(_video_ids_pipeline(), "id", "playlist_id", alias="videos", many=True))
            .project(*PLAYLIST_FIELDS)
            .sort_by("created_at", "desc")
            .paginate(self.db, page, page_size)
        )

    async def get_playlist(self, playlist_id: str) -> PlaylistDetail:
        playlist_uuid = parse_identifier(playlist_id, "playlist_id")
        row = await (
            AggregationQuery(Playlist)
            .match(id=playlist_uuid)
            .join(JoinSpec(_video_summaries_pipeline(), "id", "playlist_id", alias="videos", many=True))
            .project(*PLAYLIST_FIELDS)
            .first(self.db)
        )
        if row is None:
            raise NotFound("Playlist")
        return PlaylistDetail(**row)

    async def add_video(self, playlist_id: str, video_id: str, caller_id: UUID) -> PlaylistDetail:
        playlist_uuid = parse_identifier(playlist_id, "playlist_id")
        video_uuid = parse_identifier(video_id, "video_id")

        playlist = await load_owned(self.db, Playlist, playlist_uuid, caller_id, "Playlist", "modify")
        if await self.db.get(Video, video_uuid) is None:
            raise NotFound("Video")
        if await self._contains(playlist.id, video_uuid):
            raise Conflict("Video already exists in the playlist")

        position = (await self.db.execute(
            select(func.coalesce(func.max(PlaylistVideo.position), 0)).where(PlaylistVideo.playlist_id == playlist.id)
        )).scalar_one()
        self.db.add(PlaylistVideo(playlist_id=playlist.id, video_id=video_uuid, position=position + 1))
        playlist.updated_at = utcnow()
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise Conflict("Video already exists in the playlist")

        logger.info(f"Added video {video_uuid} to playlist {playlist.id}")
        return await self.get_playlist(str(playlist.id))

    async def remove_video(self, playlist_id: str, video_id: str, caller_id: UUID) -> PlaylistDetail:
        playlist_uuid = parse_identifier(playlist_id, "playlist_id")
        video_uuid = parse_identifier(video_id, "video_id")

        playlist = await load_owned(self.db, Playlist, playlist_uuid, caller_id, "Playlist", "modify")
        if not await self._contains(playlist.id, video_uuid):
            raise Conflict("Video does not exist in the playlist")

        await self.db.execute(
            delete(PlaylistVideo).where(
                PlaylistVideo.playlist_id == playlist.id,
                PlaylistVideo.video_id == video_uuid,
            )
        )
        playlist.updated_at = utcnow()
        await self.db.commit()

        logger.info(f"Removed video {video_uuid} from playlist {playlist.id}")
        return await self.get_playlist(str(playlist.id))

    async def update_playlist(
        self,
        playlist_id: str,
        caller_id: UUID,
        name: Optional[str],
        description: Optional[str],
    ) -> Playlist:
        playlist_uuid = parse_identifier(playlist_id, "playlist_id")
        name = require_text(name, "name")
        description = require_text(description, "description")
        playlist = await load_owned(self.db, Playlist, playlist_uuid, caller_id, "Playlist", "update")

        playlist.name = name
        playlist.description = description
        await self.db.commit()
        await self.db.refresh(playlist)
        return playlist

    async def delete_playlist(self, playlist_id: str, caller_id: UUID) -> None:
        playlist_uuid = parse_identifier(playlist_id, "playlist_id")
        playlist = await load_owned(self.db, Playlist, playlist_uuid, caller_id, "Playlist", "delete")

        await self.db.execute(delete(PlaylistVideo).where(PlaylistVideo.playlist_id == playlist.id))
        await self.db.delete(playlist)
        await self.db.commit()
        logger.info(f"User {caller_id} deleted playlist {playlist_uuid}")

    async def _contains(self, playlist_id: UUID, video_id: UUID) -> bool:
        result = await self.db.execute(
            select(PlaylistVideo.video_id).where(
                PlaylistVideo.playlist_id == playlist_id,
                PlaylistVideo.video_id == video_id,
            )
        )
        return result.first() is not None
