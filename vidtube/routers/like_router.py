from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.config import Settings, get_settings
from vidtube.core.database import get_db_session
from vidtube.dependencies import get_current_user
from vidtube.schemas.common_schema import ApiResponse
from vidtube.schemas.like_schema import LikeToggleResponse
from vidtube.schemas.user_schema import Identity
from vidtube.schemas.video_schema import LikedVideoResponse
from vidtube.services.like_service import LikeService

router = APIRouter(prefix="/likes", tags=["Like"])


def _toggle_message(result: LikeToggleResponse, name: str) -> str:
    return f"{name} liked successfully." if result.liked else f"{name} disliked successfully."


@router.post("/toggle/v/{video_id}", response_model=ApiResponse[LikeToggleResponse])
async def toggle_video_like(
    video_id: str,
    current_user: Identity = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> ApiResponse[LikeToggleResponse]:
    result = await LikeService(db, settings).toggle_video_like(video_id, current_user)
    return ApiResponse(data=result, message=_toggle_message(result, "video"))


@router.post("/toggle/c/{comment_id}", response_model=ApiResponse[LikeToggleResponse])
async def toggle_comment_like(
    comment_id: str,
    current_user: Identity = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> ApiResponse[LikeToggleResponse]:
    result = await LikeService(db, settings).toggle_comment_like(comment_id, current_user)
    return ApiResponse(data=result, message=_toggle_message(result, "comment"))


@router.post("/toggle/t/{tweet_id}", response_model=ApiResponse[LikeToggleResponse])
async def toggle_tweet_like(
    tweet_id: str,
    current_user: Identity = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> ApiResponse[LikeToggleResponse]:
    result = await LikeService(db, settings).toggle_tweet_like(tweet_id, current_user)
    return ApiResponse(data=result, message=_toggle_message(result, "tweet"))


@router.get("/videos", response_model=ApiResponse[List[LikedVideoResponse]])
async def liked_videos(
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    current_user: Identity = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> ApiResponse[List[LikedVideoResponse]]:
    """
    현재 사용자가 좋아요한 영상 목록 (최근 좋아요 순)
    """
    videos = await LikeService(db, settings).list_liked_videos(current_user, page, limit)
    return ApiResponse(data=videos, message="liked videos fetched successfully.")
