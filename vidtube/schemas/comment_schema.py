from datetime import datetime
from typing import List, Optional

from pydantic import Field

from vidtube.schemas.common_schema import CamelModel, OwnerSummary

# ─── 댓글 관련 요청/응답 스키마 정의 ─────────────────────────────────────

class CommentContentRequest(CamelModel):
    """
    댓글 작성/수정 요청 모델
    - 공백 검증은 서비스 계층에서 수행
    """
    content: Optional[str] = Field(None, description="댓글 본문")


class CommentResponse(CamelModel):
    id: str
    content: str
    video_id: str
    owner_id: str
    created_at: datetime
    updated_at: datetime


class CommentDetailResponse(CamelModel):
    """
    작성자 요약과 좋아요 수가 조인된 댓글
    """
    id: str
    content: str
    video_id: str
    created_at: datetime
    updated_at: datetime
    commented_by: Optional[OwnerSummary] = None
    likes_count: int = 0


class CommentPageResponse(CamelModel):
    comments: List[CommentDetailResponse]
    total_comments: int
    page: int
    limit: int
