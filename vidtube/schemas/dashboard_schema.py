from vidtube.schemas.common_schema import CamelModel

# ─── 대시보드 응답 스키마 정의 ───────────────────────────────────────────

class ChannelStatsResponse(CamelModel):
    """
    채널 통계
    - 영상 수, 총 조회수, 영상에 달린 좋아요 수, 구독자 수
    """
    id: str
    username: str
    fullname: str
    avatar: str
    cover_image: str = ""
    total_videos: int = 0
    total_video_views: int = 0
    total_likes: int = 0
    total_subscribers: int = 0
