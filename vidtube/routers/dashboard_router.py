from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.config import Settings, get_settings
from vidtube.core.database import get_db_session
from vidtube.dependencies import get_current_user
from vidtube.schemas.common_schema import ApiResponse
from vidtube.schemas.dashboard_schema import ChannelStatsResponse
from vidtube.schemas.user_schema import Identity
from vidtube.schemas.video_schema import VideoDetailResponse
from vidtube.services.dashboard_service import DashboardService

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("/stats", response_model=ApiResponse[ChannelStatsResponse])
async def channel_stats(
    current_user: Identity = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> ApiResponse[ChannelStatsResponse]:
    """
    현재 사용자 채널 통계 (영상 수, 총 조회수, 좋아요 수, 구독자 수)
    """
    stats = await DashboardService(db, settings).get_channel_stats(current_user)
    return ApiResponse(data=stats, message="channel stats fetched successfully.")


@router.get("/videos", response_model=ApiResponse[List[VideoDetailResponse]])
async def channel_videos(
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    current_user: Identity = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> ApiResponse[List[VideoDetailResponse]]:
    videos = await DashboardService(db, settings).list_channel_videos(current_user, page, limit)
    return ApiResponse(data=videos, message="channel videos fetched successfully.")
