import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.config import Settings, get_settings
from vidtube.core.database import get_db_session
from vidtube.dependencies import get_current_user
from vidtube.schemas.common_schema import ApiResponse
from vidtube.schemas.user_schema import Identity
from vidtube.schemas.video_schema import VideoDeleteResponse, VideoDetailResponse, VideoResponse
from vidtube.services.media_service import MediaService, get_media_service
from vidtube.services.video_service import VideoService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/videos", tags=["Video"])


@router.get("", response_model=ApiResponse[List[VideoDetailResponse]])
async def list_videos(
    query: Optional[str] = Query(None, description="제목/설명 부분 검색어"),
    sort_by: Optional[str] = Query(None, alias="sortBy", description="createdAt, updatedAt, views, duration, title"),
    sort_type: Optional[str] = Query(None, alias="sortType", description="1/asc 또는 -1/desc"),
    user_id: Optional[str] = Query(None, alias="userId", description="소유자 ID (검색어와 OR 결합)"),
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> ApiResponse[List[VideoDetailResponse]]:
    videos = await VideoService(db, settings).list_videos(query, sort_by, sort_type, user_id, page, limit)
    return ApiResponse(data=videos, message="videos fetched successfully.")


@router.post("", response_model=ApiResponse[VideoResponse], status_code=status.HTTP_201_CREATED)
async def publish_video(
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    duration: Optional[str] = Form(None),
    video_file: Optional[UploadFile] = File(None, alias="videoFile"),
    thumbnail: Optional[UploadFile] = File(None),
    current_user: Identity = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
    media: MediaService = Depends(get_media_service),
) -> ApiResponse[VideoResponse]:
    """
    영상 게시 (multipart: videoFile, thumbnail 필수)
    """
    video = await VideoService(db, settings, media).publish(
        current_user, title, description, video_file, thumbnail, duration
    )
    return ApiResponse(status_code=201, data=video, message="video published successfully.")


@router.get("/{video_id}", response_model=ApiResponse[VideoDetailResponse])
async def get_video(
    video_id: str,
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> ApiResponse[VideoDetailResponse]:
    video = await VideoService(db, settings).get_video(video_id)
    return ApiResponse(data=video, message="video fetched successfully.")


@router.patch("/{video_id}", response_model=ApiResponse[VideoResponse])
async def update_video(
    video_id: str,
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    thumbnail: Optional[UploadFile] = File(None),
    current_user: Identity = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
    media: MediaService = Depends(get_media_service),
) -> ApiResponse[VideoResponse]:
    """
    제목/설명/썸네일 수정 (소유자만)
    """
    video = await VideoService(db, settings, media).update(
        current_user, video_id, title, description, thumbnail
    )
    return ApiResponse(data=video, message="video updated successfully.")


@router.delete("/{video_id}", response_model=ApiResponse[VideoDeleteResponse])
async def delete_video(
    video_id: str,
    current_user: Identity = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
    media: MediaService = Depends(get_media_service),
) -> ApiResponse[VideoDeleteResponse]:
    """
    영상 삭제 (소유자만)
    - 댓글/좋아요/플레이리스트 항목 연쇄 삭제 후 미디어 정리
    """
    result = await VideoService(db, settings, media).delete(current_user, video_id)
    return ApiResponse(data=result, message="video deleted successfully.")


@router.patch("/{video_id}/toggle-publish", response_model=ApiResponse[VideoResponse])
async def toggle_publish(
    video_id: str,
    current_user: Identity = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> ApiResponse[VideoResponse]:
    video = await VideoService(db, settings).toggle_publish(current_user, video_id)
    return ApiResponse(data=video, message="video publish status updated.")
