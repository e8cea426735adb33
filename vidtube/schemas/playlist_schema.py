from datetime import datetime
from typing import List, Optional

from pydantic import ConfigDict, Field

from vidtube.schemas.common_schema import CamelModel, OwnerSummary
from vidtube.schemas.video_schema import VideoSummary

# ─── 플레이리스트 관련 요청/응답 스키마 정의 ─────────────────────────────

class PlaylistCreateRequest(CamelModel):
    """
    플레이리스트 생성 요청 모델
    """
    model_config = ConfigDict(
        json_schema_extra={
            "example": {"name": "Lo-fi", "description": "작업할 때 듣는 영상"}
        },
    )

    name: Optional[str] = Field(None, description="플레이리스트 이름")
    description: Optional[str] = Field(None, description="플레이리스트 설명")


class PlaylistUpdateRequest(CamelModel):
    """
    플레이리스트 수정 요청 모델 (부분 수정)
    """
    name: Optional[str] = Field(None, description="수정할 이름")
    description: Optional[str] = Field(None, description="수정할 설명")


class PlaylistResponse(CamelModel):
    """
    플레이리스트 원본 응답 (영상은 순서가 있는 ID 목록)
    """
    id: str
    name: str
    description: str
    owner_id: str
    videos: List[str] = Field(default_factory=list, description="position 순 영상 ID")
    created_at: datetime
    updated_at: datetime


class PlaylistDetailResponse(CamelModel):
    """
    소유자와 영상 요약이 조인된 플레이리스트
    """
    id: str
    name: str
    description: str
    created_at: datetime
    updated_at: datetime
    owner: Optional[OwnerSummary] = None
    videos: List[VideoSummary] = Field(default_factory=list)
    total_videos: int = 0
