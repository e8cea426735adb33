from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.config import Settings, get_settings
from vidtube.core.database import get_db_session
from vidtube.dependencies import get_current_user
from vidtube.schemas.common_schema import ApiResponse
from vidtube.schemas.playlist_schema import (
    PlaylistCreateRequest, PlaylistDetailResponse, PlaylistResponse, PlaylistUpdateRequest
)
from vidtube.schemas.user_schema import Identity
from vidtube.services.playlist_service import PlaylistService

router = APIRouter(prefix="/playlists", tags=["Playlist"])


@router.post("", response_model=ApiResponse[PlaylistResponse], status_code=status.HTTP_201_CREATED)
async def create_playlist(
    req: PlaylistCreateRequest,
    current_user: Identity = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> ApiResponse[PlaylistResponse]:
    playlist = await PlaylistService(db, settings).create_playlist(current_user, req.name, req.description)
    return ApiResponse(status_code=201, data=playlist, message="playlist created successfully.")


@router.get("/user/{user_id}", response_model=ApiResponse[List[PlaylistDetailResponse]])
async def list_user_playlists(
    user_id: str,
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> ApiResponse[List[PlaylistDetailResponse]]:
    playlists = await PlaylistService(db, settings).list_user_playlists(user_id, page, limit)
    return ApiResponse(data=playlists, message="playlists fetched successfully.")


@router.get("/{playlist_id}", response_model=ApiResponse[PlaylistDetailResponse])
async def get_playlist(
    playlist_id: str,
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> ApiResponse[PlaylistDetailResponse]:
    playlist = await PlaylistService(db, settings).get_playlist(playlist_id)
    return ApiResponse(data=playlist, message="playlist fetched successfully.")


@router.patch("/{playlist_id}", response_model=ApiResponse[PlaylistResponse])
async def update_playlist(
    playlist_id: str,
    req: PlaylistUpdateRequest,
    current_user: Identity = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> ApiResponse[PlaylistResponse]:
    playlist = await PlaylistService(db, settings).update_playlist(
        current_user, playlist_id, req.name, req.description
    )
    return ApiResponse(data=playlist, message="playlist updated successfully.")


@router.delete("/{playlist_id}", response_model=ApiResponse[PlaylistResponse])
async def delete_playlist(
    playlist_id: str,
    current_user: Identity = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> ApiResponse[PlaylistResponse]:
    playlist = await PlaylistService(db, settings).delete_playlist(current_user, playlist_id)
    return ApiResponse(data=playlist, message="playlist deleted successfully.")


@router.patch("/{playlist_id}/add/{video_id}", response_model=ApiResponse[PlaylistResponse])
async def add_video_to_playlist(
    playlist_id: str,
    video_id: str,
    current_user: Identity = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> ApiResponse[PlaylistResponse]:
    playlist = await PlaylistService(db, settings).add_video(current_user, playlist_id, video_id)
    return ApiResponse(data=playlist, message="video added to playlist successfully.")


@router.patch("/{playlist_id}/remove/{video_id}", response_model=ApiResponse[PlaylistResponse])
async def remove_video_from_playlist(
    playlist_id: str,
    video_id: str,
    current_user: Identity = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> ApiResponse[PlaylistResponse]:
    playlist = await PlaylistService(db, settings).remove_video(current_user, playlist_id, video_id)
    return ApiResponse(data=playlist, message="video removed from the playlist successfully.")
