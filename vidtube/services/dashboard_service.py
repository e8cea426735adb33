from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.config import Settings
from vidtube.repositories.dashboard_repository import DashboardRepository
from vidtube.repositories.query_builder import Pagination
from vidtube.repositories.video_repository import VideoRepository
from vidtube.schemas.dashboard_schema import ChannelStatsResponse
from vidtube.schemas.user_schema import Identity
from vidtube.schemas.video_schema import VideoDetailResponse
from vidtube.utils.exceptions import NotFoundError


class DashboardService:
    """
    채널 대시보드 서비스
    - 채널 통계, 채널 영상 목록 (최신순)
    """

    def __init__(self, db: AsyncSession, settings: Settings):
        self.db = db
        self.settings = settings
        self.dashboard_repo = DashboardRepository(db)
        self.video_repo = VideoRepository(db)

    async def get_channel_stats(self, user: Identity) -> ChannelStatsResponse:
        row = await self.dashboard_repo.get_channel_stats(user.id)
        if row is None:
            raise NotFoundError("channel not found!")
        return ChannelStatsResponse.model_validate(row)

    async def list_channel_videos(
        self,
        user: Identity,
        page: Optional[str],
        limit: Optional[str],
    ) -> List[VideoDetailResponse]:
        pagination = Pagination.from_params(page, limit, self.settings.MAX_PAGE_LIMIT)
        rows = await self.video_repo.list_channel_videos(user.id, pagination)
        return [VideoDetailResponse.model_validate(row) for row in rows]
