from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import Pagination, pagination_params
from app.db.database import get_db
from app.schemas.playlist import PlaylistPayload, PlaylistResponse
from app.schemas.response import ApiResponse
from app.services.playlist_service import PlaylistService
from app.utils.security import get_current_user_id

playlists_router = APIRouter()


@playlists_router.post("", response_model=ApiResponse, status_code=status.HTTP_201_CREATED)
async def create_playlist(
    payload: PlaylistPayload,
    db: AsyncSession = Depends(get_db),
    caller_id: UUID = Depends(get_current_user_id),
):
    playlist = await PlaylistService(db).create_playlist(caller_id, payload.name, payload.description)
    return ApiResponse.ok(PlaylistResponse.model_validate(playlist), "Playlist created successfully", status.HTTP_201_CREATED)


@playlists_router.get("/user/{user_id}", response_model=ApiResponse)
async def list_user_playlists(
    user_id: str,
    pagination: Pagination = Depends(pagination_params),
    db: AsyncSession = Depends(get_db),
):
    page = await PlaylistService(db).list_user_playlists(user_id, pagination.page, pagination.page_size)
    return ApiResponse.ok(page, "Playlists fetched successfully")


@playlists_router.get("/{playlist_id}", response_model=ApiResponse)
async def get_playlist(
    playlist_id: str,
    db: AsyncSession = Depends(get_db),
):
    playlist = await PlaylistService(db).get_playlist(playlist_id)
    return ApiResponse.ok(playlist, "Playlist fetched successfully")


@playlists_router.patch("/add/{video_id}/{playlist_id}", response_model=ApiResponse)
async def add_video_to_playlist(
    video_id: str,
    playlist_id: str,
    db: AsyncSession = Depends(get_db),
    caller_id: UUID = Depends(get_current_user_id),
):
    playlist = await PlaylistService(db).add_video(playlist_id, video_id, caller_id)
    return ApiResponse.ok(playlist, "Video added to playlist successfully")


@playlists_router.patch("/remove/{video_id}/{playlist_id}", response_model=ApiResponse)
async def remove_video_from_playlist(
    video_id: str,
    playlist_id: str,
    db: AsyncSession = Depends(get_db),
    caller_id: UUID = Depends(get_current_user_id),
):
    playlist = await PlaylistService(db).remove_video(playlist_id, video_id, caller_id)
    return ApiResponse.ok(playlist, "Video removed from playlist successfully")


@playlists_router.patch("/{playlist_id}", response_model=ApiResponse)
async def update_playlist(
    playlist_id: str,
    payload: PlaylistPayload,
    db: AsyncSession = Depends(get_db),
    caller_id: UUID = Depends(get_current_user_id),
):
    playlist = await PlaylistService(db).update_playlist(playlist_id, caller_id, payload.name, payload.description)
    return ApiResponse.ok(PlaylistResponse.model_validate(playlist), "Playlist updated successfully")


@playlists_router.delete("/{playlist_id}", response_model=ApiResponse)
async def delete_playlist(
    playlist_id: str,
    db: AsyncSession = Depends(get_db),
    caller_id: UUID = Depends(get_current_user_id),
):
    await PlaylistService(db).delete_playlist(playlist_id, caller_id)
    return ApiResponse.ok({}, "Playlist deleted successfully")
