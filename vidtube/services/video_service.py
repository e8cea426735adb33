import logging
from typing import List, Optional

from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.config import Settings
from vidtube.models.video import Video
from vidtube.repositories.query_builder import Pagination, SortSpec
from vidtube.repositories.video_repository import VIDEO_SORT_COLUMNS, VideoRepository
from vidtube.schemas.user_schema import Identity
from vidtube.schemas.video_schema import VideoDeleteResponse, VideoDetailResponse, VideoResponse
from vidtube.services.media_service import MediaService, ingest_upload, remove_media
from vidtube.utils.exceptions import BadRequestError, ConflictError, ForbiddenError, NotFoundError
from vidtube.utils.validators import (
    check_id, check_optional_text, check_present, check_text, clean_text, ensure
)

logger = logging.getLogger(__name__)


def _uploaded(upload: Optional[UploadFile]) -> Optional[UploadFile]:
    """파일명이 있는 업로드만 유효한 파일로 취급"""
    return upload if upload is not None and upload.filename else None


def parse_duration(value: Optional[str]) -> Optional[float]:
    """duration 폼 값 → 0 이상의 실수 (미입력 시 None)"""
    if value is None or not value.strip():
        return None
    try:
        duration = float(value)
    except ValueError:
        raise BadRequestError("invalid duration!")
    if duration < 0:
        raise BadRequestError("invalid duration!")
    return duration


class VideoService:
    """
    영상 서비스
    - 목록/상세 조회, 게시, 수정, 삭제(연쇄), 공개 여부 토글
    """

    def __init__(self, db: AsyncSession, settings: Settings, media: Optional[MediaService] = None):
        self.db = db
        self.settings = settings
        self.media = media
        self.video_repo = VideoRepository(db)

    async def list_videos(
        self,
        query: Optional[str],
        sort_by: Optional[str],
        sort_type: Optional[str],
        user_id: Optional[str],
        page: Optional[str],
        limit: Optional[str],
    ) -> List[VideoDetailResponse]:
        """
        검색어(제목/설명)와 userId를 OR로 결합한 영상 목록
        - 정렬 후 페이지 자르기, 결과가 없으면 빈 목록
        """
        if user_id:
            ensure(check_id(user_id, "userId"))
        sort = SortSpec.from_params(sort_by, sort_type, tuple(VIDEO_SORT_COLUMNS))
        pagination = Pagination.from_params(page, limit, self.settings.MAX_PAGE_LIMIT)

        rows = await self.video_repo.list_videos(clean_text(query) or None, user_id, sort, pagination)
        return [VideoDetailResponse.model_validate(row) for row in rows]

    async def get_video(self, video_id: str) -> VideoDetailResponse:
        ensure(check_id(video_id, "videoId"))
        row = await self.video_repo.get_video_detail(video_id)
        if row is None:
            raise NotFoundError("video not found!")
        return VideoDetailResponse.model_validate(row)

    async def publish(
        self,
        owner: Identity,
        title: Optional[str],
        description: Optional[str],
        video_file: Optional[UploadFile],
        thumbnail: Optional[UploadFile],
        duration: Optional[str] = None,
    ) -> VideoResponse:
        # 1) 입력 검증
        ensure(
            check_text(title, "title"),
            check_text(description, "description"),
            check_present(_uploaded(video_file), "videoFile"),
            check_present(_uploaded(thumbnail), "thumbnail"),
        )
        title, description = clean_text(title), clean_text(description)
        duration_override = parse_duration(duration)

        # 2) 같은 제목/설명으로 공개된 영상 중복 방지
        if await self.video_repo.find_published_duplicate(title, description):
            raise ConflictError("video with the same title and description is already published!")

        # 3) 미디어 업로드 (썸네일 실패 시 업로드된 영상 파일 정리)
        video_asset = await ingest_upload(self.media, video_file, self.settings.UPLOAD_TEMP_DIR)
        try:
            thumbnail_asset = await ingest_upload(self.media, thumbnail, self.settings.UPLOAD_TEMP_DIR)
        except Exception:
            await remove_media(self.media, video_asset.url)
            raise

        # 4) 저장
        video = Video(
            video_file=video_asset.url,
            thumbnail=thumbnail_asset.url,
            title=title,
            description=description,
            duration=duration_override if duration_override is not None else video_asset.duration,
            is_published=True,
            owner_id=owner.id,
        )
        self.video_repo.add_video(video)
        try:
            await self.video_repo.commit()
        except Exception:
            await remove_media(self.media, video_asset.url, thumbnail_asset.url)
            raise

        logger.info("영상 게시: video_id=%s, owner_id=%s", video.id, owner.id)
        return VideoResponse.model_validate(video)

    async def update(
        self,
        owner: Identity,
        video_id: str,
        title: Optional[str],
        description: Optional[str],
        thumbnail: Optional[UploadFile],
    ) -> VideoResponse:
        """
        제목/설명/썸네일 부분 수정 (최소 하나 필요)
        - 교체된 기존 썸네일은 best-effort로 저장소에서 삭제
        """
        thumbnail = _uploaded(thumbnail)
        ensure(
            check_optional_text(title, "title"),
            check_optional_text(description, "description"),
        )
        if title is None and description is None and thumbnail is None:
            raise BadRequestError("title, description or thumbnail is required!")

        video = await self._get_owned_video(video_id, owner)

        previous_thumbnail = new_thumbnail = None
        if thumbnail is not None:
            asset = await ingest_upload(self.media, thumbnail, self.settings.UPLOAD_TEMP_DIR)
            previous_thumbnail, new_thumbnail = video.thumbnail, asset.url
            video.thumbnail = asset.url
        if title is not None:
            video.title = clean_text(title)
        if description is not None:
            video.description = clean_text(description)
        try:
            await self.video_repo.commit()
        except Exception:
            if new_thumbnail:
                await remove_media(self.media, new_thumbnail)
            raise

        if previous_thumbnail:
            await remove_media(self.media, previous_thumbnail)

        logger.info("영상 수정: video_id=%s", video.id)
        return VideoResponse.model_validate(video)

    async def delete(self, owner: Identity, video_id: str) -> VideoDeleteResponse:
        """
        영상 삭제
        1) 댓글/좋아요/플레이리스트 항목과 함께 한 트랜잭션으로 삭제
        2) 커밋 후 영상 파일과 썸네일을 저장소에서 삭제 (실패는 응답에 보고)
        """
        video = await self._get_owned_video(video_id, owner)
        snapshot = VideoResponse.model_validate(video)

        counts = await self.video_repo.delete_cascade(video)
        await self.video_repo.commit()

        failed = await remove_media(self.media, snapshot.video_file, snapshot.thumbnail)
        if failed:
            logger.warning("영상 삭제 후 미디어 정리 실패: video_id=%s, public_ids=%s", snapshot.id, failed)

        logger.info("영상 삭제: video_id=%s, %s", snapshot.id, counts)
        return VideoDeleteResponse(
            video=snapshot,
            deleted_comments=counts["deleted_comments"],
            deleted_likes=counts["deleted_likes"],
            failed_media_removals=failed,
        )

    async def toggle_publish(self, owner: Identity, video_id: str) -> VideoResponse:
        video = await self._get_owned_video(video_id, owner)
        video.is_published = not video.is_published
        await self.video_repo.commit()

        logger.info("영상 공개 상태 변경: video_id=%s, is_published=%s", video.id, video.is_published)
        return VideoResponse.model_validate(video)

    async def _get_owned_video(self, video_id: str, owner: Identity) -> Video:
        """ID 검증 → 존재 확인 → 소유자 확인"""
        ensure(check_id(video_id, "videoId"))
        video = await self.video_repo.find_by_id(video_id)
        if not video:
            raise NotFoundError("video not found!")
        if video.owner_id != owner.id:
            raise ForbiddenError("only the owner can modify this video!")
        return video
