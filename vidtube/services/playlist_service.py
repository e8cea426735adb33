import logging
from collections import defaultdict
from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.config import Settings
from vidtube.models.playlist import Playlist
from vidtube.repositories.playlist_repository import PlaylistRepository
from vidtube.repositories.query_builder import Pagination
from vidtube.repositories.user_repository import UserRepository
from vidtube.repositories.video_repository import VideoRepository
from vidtube.schemas.playlist_schema import PlaylistDetailResponse, PlaylistResponse
from vidtube.schemas.user_schema import Identity
from vidtube.utils.exceptions import BadRequestError, ConflictError, ForbiddenError, NotFoundError
from vidtube.utils.validators import check_id, check_optional_text, check_text, clean_text, ensure

logger = logging.getLogger(__name__)


def to_playlist_response(playlist: Playlist) -> PlaylistResponse:
    """ORM 플레이리스트 → 응답 (영상은 position 순 ID 목록)"""
    return PlaylistResponse(
        id=playlist.id,
        name=playlist.name,
        description=playlist.description,
        owner_id=playlist.owner_id,
        videos=playlist.video_ids,
        created_at=playlist.created_at,
        updated_at=playlist.updated_at,
    )


class PlaylistService:
    """
    플레이리스트 서비스
    - 생성/수정 시 (name, description, owner) 중복 사전 검사
    - 수정/삭제/영상 추가·제거는 소유자만 가능
    """

    def __init__(self, db: AsyncSession, settings: Settings):
        self.db = db
        self.settings = settings
        self.playlist_repo = PlaylistRepository(db)
        self.video_repo = VideoRepository(db)
        self.user_repo = UserRepository(db)

    async def create_playlist(
        self,
        owner: Identity,
        name: Optional[str],
        description: Optional[str],
    ) -> PlaylistResponse:
        ensure(
            check_text(name, "name"),
            check_text(description, "description"),
        )
        name, description = clean_text(name), clean_text(description)

        if await self.playlist_repo.find_duplicate(name, description, owner.id):
            raise ConflictError("playlist with same name and description already exists!")

        playlist = Playlist(name=name, description=description, owner_id=owner.id, entries=[])
        self.playlist_repo.add_playlist(playlist)
        await self.playlist_repo.commit()

        logger.info("플레이리스트 생성: playlist_id=%s", playlist.id)
        return to_playlist_response(playlist)

    async def list_user_playlists(
        self,
        user_id: str,
        page: Optional[str],
        limit: Optional[str],
    ) -> List[PlaylistDetailResponse]:
        ensure(check_id(user_id, "userId"))
        if not await self.user_repo.find_by_id(user_id):
            raise NotFoundError("user not found!")

        pagination = Pagination.from_params(page, limit, self.settings.MAX_PAGE_LIMIT)
        rows = await self.playlist_repo.list_user_playlists(user_id, pagination)
        return await self._attach_videos(rows)

    async def get_playlist(self, playlist_id: str) -> PlaylistDetailResponse:
        ensure(check_id(playlist_id, "playlistId"))
        row = await self.playlist_repo.get_playlist_detail(playlist_id)
        if row is None:
            raise NotFoundError("playlist not found!")
        return (await self._attach_videos([row]))[0]

    async def update_playlist(
        self,
        owner: Identity,
        playlist_id: str,
        name: Optional[str],
        description: Optional[str],
    ) -> PlaylistResponse:
        """이름/설명 부분 수정 (최소 하나 필요)"""
        ensure(
            check_id(playlist_id, "playlistId"),
            check_optional_text(name, "name"),
            check_optional_text(description, "description"),
        )
        if name is None and description is None:
            raise BadRequestError("name or description is required!")

        playlist = await self._get_owned_playlist(playlist_id, owner)
        new_name = clean_text(name) if name is not None else playlist.name
        new_description = clean_text(description) if description is not None else playlist.description

        if await self.playlist_repo.find_duplicate(new_name, new_description, owner.id, exclude_id=playlist.id):
            raise ConflictError("playlist with same name and description already exists!")

        playlist.name = new_name
        playlist.description = new_description
        await self.playlist_repo.commit()

        logger.info("플레이리스트 수정: playlist_id=%s", playlist.id)
        return to_playlist_response(playlist)

    async def delete_playlist(self, owner: Identity, playlist_id: str) -> PlaylistResponse:
        ensure(check_id(playlist_id, "playlistId"))
        playlist = await self._get_owned_playlist(playlist_id, owner)
        snapshot = to_playlist_response(playlist)

        await self.playlist_repo.delete(playlist)
        await self.playlist_repo.commit()

        logger.info("플레이리스트 삭제: playlist_id=%s", snapshot.id)
        return snapshot

    async def add_video(self, owner: Identity, playlist_id: str, video_id: str) -> PlaylistResponse:
        """플레이리스트 끝에 영상 추가 (중복 허용)"""
        playlist = await self._prepare_entry_change(owner, playlist_id, video_id)
        await self.playlist_repo.append_video(playlist, video_id)
        await self.playlist_repo.commit()
        await self.playlist_repo.reload_entries(playlist)

        logger.info("플레이리스트 영상 추가: playlist_id=%s, video_id=%s", playlist.id, video_id)
        return to_playlist_response(playlist)

    async def remove_video(self, owner: Identity, playlist_id: str, video_id: str) -> PlaylistResponse:
        """플레이리스트에서 해당 영상 항목 모두 제거"""
        playlist = await self._prepare_entry_change(owner, playlist_id, video_id)
        removed = await self.playlist_repo.remove_video(playlist, video_id)
        await self.playlist_repo.commit()
        await self.playlist_repo.reload_entries(playlist)

        logger.info("플레이리스트 영상 제거: playlist_id=%s, video_id=%s, removed=%d", playlist.id, video_id, removed)
        return to_playlist_response(playlist)

    async def _prepare_entry_change(self, owner: Identity, playlist_id: str, video_id: str) -> Playlist:
        """ID 검증 → 플레이리스트/영상 존재 확인 → 소유자 확인"""
        ensure(
            check_id(playlist_id, "playlistId"),
            check_id(video_id, "videoId"),
        )
        playlist = await self.playlist_repo.find_by_id(playlist_id)
        if not playlist:
            raise NotFoundError("playlist not found!")
        if not await self.video_repo.find_by_id(video_id):
            raise NotFoundError("video not found!")
        if playlist.owner_id != owner.id:
            raise ForbiddenError("only the owner can modify this playlist!")
        return playlist

    async def _get_owned_playlist(self, playlist_id: str, owner: Identity) -> Playlist:
        playlist = await self.playlist_repo.find_by_id(playlist_id)
        if not playlist:
            raise NotFoundError("playlist not found!")
        if playlist.owner_id != owner.id:
            raise ForbiddenError("only the owner can modify this playlist!")
        return playlist

    async def _attach_videos(self, rows: List[Dict[str, Any]]) -> List[PlaylistDetailResponse]:
        """플레이리스트 행마다 position 순 영상 요약 목록 부착"""
        entries = await self.playlist_repo.list_entries([row["id"] for row in rows])
        videos_by_playlist = defaultdict(list)
        for entry in entries:
            videos_by_playlist[entry["playlist_id"]].append(entry)
        return [
            PlaylistDetailResponse.model_validate({**row, "videos": videos_by_playlist[row["id"]]})
            for row in rows
        ]
