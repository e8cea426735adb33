from datetime import datetime
from typing import Optional

from pydantic import ConfigDict, Field

from vidtube.schemas.common_schema import CamelModel, OwnerSummary

# ─── 트윗 관련 요청/응답 스키마 정의 ─────────────────────────────────────

class TweetContentRequest(CamelModel):
    """
    트윗 작성/수정 요청 모델
    """
    model_config = ConfigDict(
        json_schema_extra={"example": {"content": "새 영상 올렸어요!"}},
    )

    content: Optional[str] = Field(None, description="트윗 본문")


class TweetResponse(CamelModel):
    id: str
    content: str
    owner_id: str
    created_at: datetime
    updated_at: datetime


class TweetDetailResponse(CamelModel):
    """
    작성자 요약과 좋아요 수가 조인된 트윗
    """
    id: str
    content: str
    created_at: datetime
    updated_at: datetime
    owner: Optional[OwnerSummary] = None
    likes_count: int = 0
