import logging
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import delete, func, select

from vidtube.models.playlist import Playlist, PlaylistVideo
from vidtube.models.video import Video
from vidtube.repositories.base_repository import BaseRepository
from vidtube.repositories.like_repository import VIDEO_SUMMARY_FIELDS
from vidtube.repositories.query_builder import Pagination, ShapedQuery, SortSpec

logger = logging.getLogger(__name__)

PLAYLIST_SORT_COLUMNS = {
    "createdAt": Playlist.created_at,
    "updatedAt": Playlist.updated_at,
}

PLAYLIST_FIELDS = ("id", "name", "description", "created_at", "updated_at")


class PlaylistRepository(BaseRepository):
    """
    플레이리스트 데이터 액세스 객체
    - 항목(PlaylistVideo)은 position 순서 유지, 같은 영상 중복 허용
    """

    async def find_by_id(self, playlist_id: str) -> Optional[Playlist]:
        return await self.get(Playlist, playlist_id)

    async def find_duplicate(
            self,
            name: str,
            description: str,
            owner_id: str,
            exclude_id: Optional[str] = None,
    ) -> Optional[Playlist]:
        """같은 (name, description, owner) 조합의 다른 플레이리스트 조회"""
        query = select(Playlist).where(
            Playlist.name == name,
            Playlist.description == description,
            Playlist.owner_id == owner_id,
        )
        if exclude_id:
            query = query.where(Playlist.id != exclude_id)
        result = await self.execute(query, "playlist duplicate check")
        return result.scalars().first()

    @staticmethod
    def _detail_query() -> ShapedQuery:
        return (
            ShapedQuery(Playlist, fields=PLAYLIST_FIELDS)
            .join_owner(Playlist.owner_id)
            .count_related("total_videos", PlaylistVideo, PlaylistVideo.playlist_id)
        )

    async def list_user_playlists(self, owner_id: str, pagination: Pagination) -> List[Dict[str, Any]]:
        shaped = (
            self._detail_query()
            .match(Playlist.owner_id == owner_id)
            .sort(SortSpec(field="createdAt"), PLAYLIST_SORT_COLUMNS)
        )
        return await self.run(shaped, pagination)

    async def get_playlist_detail(self, playlist_id: str) -> Optional[Dict[str, Any]]:
        rows = await self.run(
            self._detail_query().match(Playlist.id == playlist_id),
            Pagination(page=1, limit=1),
        )
        return rows[0] if rows else None

    async def list_entries(self, playlist_ids: Sequence[str]) -> List[Dict[str, Any]]:
        """
        여러 플레이리스트의 영상 요약을 position 순으로 조회
        - 각 행에 playlist_id, position 포함
        """
        if not playlist_ids:
            return []
        shaped = (
            ShapedQuery(Video, fields=VIDEO_SUMMARY_FIELDS)
            .join(PlaylistVideo, PlaylistVideo.video_id == Video.id)
            .match(PlaylistVideo.playlist_id.in_(playlist_ids))
            .join_owner(Video.owner_id)
            .add_scalar("playlist_id", PlaylistVideo.playlist_id)
            .add_scalar("position", PlaylistVideo.position)
            .order_by(PlaylistVideo.playlist_id.asc(), PlaylistVideo.position.asc())
        )
        return await self.run(shaped)

    def add_playlist(self, playlist: Playlist) -> None:
        self.add(playlist)

    async def append_video(self, playlist: Playlist, video_id: str) -> PlaylistVideo:
        """플레이리스트 끝에 영상 항목 추가 (커밋은 호출 측)"""
        result = await self.execute(
            select(func.max(PlaylistVideo.position)).where(PlaylistVideo.playlist_id == playlist.id),
            "playlist position lookup",
        )
        last = result.scalar_one_or_none()
        entry = PlaylistVideo(
            playlist_id=playlist.id,
            video_id=video_id,
            position=0 if last is None else last + 1,
        )
        self.add(entry)
        await self.session.flush()
        return entry

    async def remove_video(self, playlist: Playlist, video_id: str) -> int:
        """플레이리스트에서 해당 영상 항목 전부 삭제 (커밋은 호출 측)"""
        result = await self.execute(
            delete(PlaylistVideo)
            .where(PlaylistVideo.playlist_id == playlist.id, PlaylistVideo.video_id == video_id)
            .execution_options(synchronize_session=False),
            "playlist entry removal",
        )
        removed = result.rowcount or 0
        logger.debug(f"플레이리스트 항목 삭제: playlist_id={playlist.id}, video_id={video_id}, removed={removed}")
        return removed

    async def reload_entries(self, playlist: Playlist) -> None:
        await self.refresh(playlist, attribute_names=["entries"])
