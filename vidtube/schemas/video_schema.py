from datetime import datetime
from typing import List, Optional

from pydantic import Field

from vidtube.schemas.common_schema import CamelModel, OwnerSummary

# ─── 영상 관련 응답 스키마 정의 ─────────────────────────────────────────

class VideoResponse(CamelModel):
    """
    영상 엔티티 원본 응답 모델 (생성/수정/공개 토글 결과)
    """
    id: str
    video_file: str
    thumbnail: str
    title: str
    description: str
    duration: float
    views: int
    is_published: bool
    owner_id: str
    created_at: datetime
    updated_at: datetime


class VideoDetailResponse(CamelModel):
    """
    소유자 정보와 집계(좋아요/댓글 수)가 조인된 영상 조회 모델
    """
    id: str
    video_file: str
    thumbnail: str
    title: str
    description: str
    duration: float
    views: int
    is_published: bool
    created_at: datetime
    updated_at: datetime
    owner: Optional[OwnerSummary] = Field(None, description="업로더 요약 (없으면 null)")
    likes_count: int = Field(0, description="좋아요 수")
    comments_count: int = Field(0, description="댓글 수")


class VideoSummary(CamelModel):
    """
    플레이리스트/좋아요 목록에 포함되는 영상 요약
    """
    id: str
    video_file: str
    thumbnail: str
    title: str
    description: str
    duration: float
    views: int
    is_published: bool
    created_at: datetime
    owner: Optional[OwnerSummary] = None


class LikedVideoResponse(VideoSummary):
    """
    좋아요한 영상 항목 (좋아요 누른 시각 포함)
    """
    liked_at: datetime


class VideoDeleteResponse(CamelModel):
    """
    영상 삭제 결과
    - 미디어 삭제 실패는 롤백하지 않고 public id 목록으로 보고
    """
    video: VideoResponse
    deleted_comments: int = 0
    deleted_likes: int = 0
    failed_media_removals: List[str] = Field(default_factory=list)
