from datetime import datetime
from typing import Optional

from vidtube.schemas.common_schema import CamelModel

# ─── 좋아요 관련 응답 스키마 정의 ────────────────────────────────────────

class LikeResponse(CamelModel):
    id: str
    video_id: Optional[str] = None
    comment_id: Optional[str] = None
    tweet_id: Optional[str] = None
    liked_by_id: str
    created_at: datetime


class LikeToggleResponse(CamelModel):
    """
    토글 결과
    - liked=True: 새로 생성됨 / liked=False: 기존 좋아요가 삭제됨
    """
    liked: bool
    like: LikeResponse
