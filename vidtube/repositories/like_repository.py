from typing import Any, Dict, List, Optional

from sqlalchemy import select

from vidtube.models.like import Like
from vidtube.models.video import Video
from vidtube.repositories.base_repository import BaseRepository
from vidtube.repositories.query_builder import Pagination, ShapedQuery, SortSpec

VIDEO_SUMMARY_FIELDS = (
    "id", "video_file", "thumbnail", "title", "description",
    "duration", "views", "is_published", "created_at",
)


class LikeRepository(BaseRepository):
    """
    좋아요 데이터 액세스 객체
    - 대상 컬럼(video_id/comment_id/tweet_id)은 호출 측이 명시적으로 전달
    """

    async def find_like(self, target_column, target_id: str, user_id: str) -> Optional[Like]:
        query = select(Like).where(target_column == target_id, Like.liked_by_id == user_id)
        result = await self.execute(query, "like lookup")
        return result.scalars().first()

    async def create_like(self, like: Like) -> Like:
        """좋아요 저장 후 커밋 (유니크 제약 위반은 IntegrityError로 전달)"""
        self.add(like)
        await self.commit()
        return like

    async def remove_like(self, like: Like) -> None:
        await self.delete(like)
        await self.commit()

    async def list_liked_videos(self, user_id: str, pagination: Pagination) -> List[Dict[str, Any]]:
        """
        사용자가 좋아요한 영상 목록
        - 영상 소유자 요약 + 좋아요 시각(liked_at), 최근 좋아요 순
        """
        shaped = (
            ShapedQuery(Video, fields=VIDEO_SUMMARY_FIELDS)
            .join(Like, Like.video_id == Video.id)
            .match(Like.liked_by_id == user_id)
            .join_owner(Video.owner_id)
            .add_scalar("liked_at", Like.created_at)
            .sort(SortSpec(field="likedAt", descending=True), {"likedAt": Like.created_at})
        )
        return await self.run(shaped, pagination)
