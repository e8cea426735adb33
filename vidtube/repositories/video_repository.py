import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import select, delete, or_

from vidtube.models.comment import Comment
from vidtube.models.like import Like
from vidtube.models.playlist import PlaylistVideo
from vidtube.models.video import Video
from vidtube.repositories.base_repository import BaseRepository
from vidtube.repositories.query_builder import Pagination, ShapedQuery, SortSpec, text_search

logger = logging.getLogger(__name__)

# 공개 정렬 필드 → 컬럼
VIDEO_SORT_COLUMNS = {
    "createdAt": Video.created_at,
    "updatedAt": Video.updated_at,
    "views": Video.views,
    "duration": Video.duration,
    "title": Video.title,
}

VIDEO_DETAIL_FIELDS = (
    "id", "video_file", "thumbnail", "title", "description",
    "duration", "views", "is_published", "created_at", "updated_at",
)


class VideoQueryBuilder:
    """Video 조회 파이프라인 빌더"""

    @staticmethod
    def detail_query() -> ShapedQuery:
        """소유자 + 좋아요/댓글 수가 붙은 기본 파이프라인"""
        return (
            ShapedQuery(Video, fields=VIDEO_DETAIL_FIELDS)
            .join_owner(Video.owner_id)
            .count_related("likes_count", Like, Like.video_id)
            .count_related("comments_count", Comment, Comment.video_id)
        )

    @staticmethod
    def search_query(query: Optional[str], owner_id: Optional[str], sort: SortSpec) -> ShapedQuery:
        """
        제목/설명 부분 문자열 검색과 소유자 필터를 OR로 결합
        - 둘 다 없으면 전체 영상
        """
        shaped = VideoQueryBuilder.detail_query()
        conditions = []
        if owner_id:
            conditions.append(Video.owner_id == owner_id)
        if query:
            conditions.append(text_search(query, Video.title, Video.description))
        if conditions:
            shaped.match(or_(*conditions))
        return shaped.sort(sort, VIDEO_SORT_COLUMNS)


class VideoRepository(BaseRepository):
    """
    영상 데이터 액세스 객체
    - 조회 파이프라인, 중복 검사, 연쇄 삭제
    """

    async def find_by_id(self, video_id: str) -> Optional[Video]:
        return await self.get(Video, video_id)

    async def find_published_duplicate(self, title: str, description: str) -> Optional[Video]:
        """같은 제목/설명으로 이미 공개된 영상 조회"""
        query = select(Video).where(
            Video.title == title,
            Video.description == description,
            Video.is_published.is_(True),
        )
        result = await self.execute(query, "video duplicate check")
        return result.scalars().first()

    async def list_videos(
            self,
            query: Optional[str],
            owner_id: Optional[str],
            sort: SortSpec,
            pagination: Pagination,
    ) -> List[Dict[str, Any]]:
        shaped = VideoQueryBuilder.search_query(query, owner_id, sort)
        return await self.run(shaped, pagination)

    async def get_video_detail(self, video_id: str) -> Optional[Dict[str, Any]]:
        shaped = VideoQueryBuilder.detail_query().match(Video.id == video_id)
        rows = await self.run(shaped, Pagination(page=1, limit=1))
        return rows[0] if rows else None

    async def list_channel_videos(
            self,
            owner_id: str,
            pagination: Pagination,
    ) -> List[Dict[str, Any]]:
        shaped = (
            VideoQueryBuilder.detail_query()
            .match(Video.owner_id == owner_id)
            .sort(SortSpec(field="createdAt", descending=True), VIDEO_SORT_COLUMNS)
        )
        return await self.run(shaped, pagination)

    def add_video(self, video: Video) -> None:
        self.add(video)

    async def delete_cascade(self, video: Video) -> Dict[str, int]:
        """
        영상과 종속 데이터를 같은 트랜잭션에서 삭제
        1) 영상 댓글에 달린 좋아요
        2) 영상 좋아요
        3) 댓글
        4) 플레이리스트 항목
        5) 영상
        커밋은 호출 측에서 수행
        """
        comment_ids = select(Comment.id).where(Comment.video_id == video.id)
        no_sync = {"synchronize_session": False}
        comment_likes = await self.execute(
            delete(Like).where(Like.comment_id.in_(comment_ids)).execution_options(**no_sync), "comment likes cascade"
        )
        video_likes = await self.execute(
            delete(Like).where(Like.video_id == video.id).execution_options(**no_sync), "video likes cascade"
        )
        comments = await self.execute(
            delete(Comment).where(Comment.video_id == video.id).execution_options(**no_sync), "comments cascade"
        )
        await self.execute(
            delete(PlaylistVideo).where(PlaylistVideo.video_id == video.id).execution_options(**no_sync), "playlist entries cascade"
        )
        await self.delete(video)
        await self.session.flush()

        counts = {
            "deleted_comments": comments.rowcount or 0,
            "deleted_likes": (video_likes.rowcount or 0) + (comment_likes.rowcount or 0),
        }
        logger.debug(f"영상 연쇄 삭제: video_id={video.id}, {counts}")
        return counts
