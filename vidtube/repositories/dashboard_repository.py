from typing import Any, Dict, Optional

from sqlalchemy import func, select

from vidtube.models.like import Like
from vidtube.models.subscription import Subscription
from vidtube.models.user import User
from vidtube.models.video import Video
from vidtube.repositories.base_repository import BaseRepository
from vidtube.repositories.query_builder import Pagination, ShapedQuery

CHANNEL_FIELDS = ("id", "username", "fullname", "avatar", "cover_image")


class DashboardRepository(BaseRepository):
    """
    채널 통계 집계
    """

    async def get_channel_stats(self, user_id: str) -> Optional[Dict[str, Any]]:
        """
        사용자 기준 상관 서브쿼리로 통계 계산
        - total_videos, total_video_views, total_likes(영상 좋아요), total_subscribers
        """
        total_views = (
            select(func.coalesce(func.sum(Video.views), 0))
            .where(Video.owner_id == User.id)
            .scalar_subquery()
        )
        total_likes = (
            select(func.count(Like.id))
            .select_from(Like)
            .join(Video, Like.video_id == Video.id)
            .where(Video.owner_id == User.id)
            .scalar_subquery()
        )
        shaped = (
            ShapedQuery(User, fields=CHANNEL_FIELDS)
            .match(User.id == user_id)
            .count_related("total_videos", Video, Video.owner_id)
            .add_scalar("total_video_views", func.coalesce(total_views, 0))
            .add_scalar("total_likes", func.coalesce(total_likes, 0))
            .count_related("total_subscribers", Subscription, Subscription.channel_id)
        )
        rows = await self.run(shaped, Pagination(page=1, limit=1))
        return rows[0] if rows else None
