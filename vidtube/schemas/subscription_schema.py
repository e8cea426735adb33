from datetime import datetime
from typing import Optional

from vidtube.schemas.common_schema import CamelModel, OwnerSummary

# ─── 구독 관련 응답 스키마 정의 ──────────────────────────────────────────

class SubscriptionResponse(CamelModel):
    id: str
    subscriber_id: str
    channel_id: str
    created_at: datetime


class SubscriptionToggleResponse(CamelModel):
    """
    토글 결과
    - subscribed=True: 구독 생성 / subscribed=False: 구독 해지
    """
    subscribed: bool
    subscription: SubscriptionResponse


class SubscriberItem(CamelModel):
    """채널 구독자 목록 항목"""
    subscriber: Optional[OwnerSummary] = None
    subscribed_at: datetime


class SubscribedChannelItem(CamelModel):
    """사용자가 구독한 채널 목록 항목"""
    channel: Optional[OwnerSummary] = None
    subscribers_count: int = 0
    subscribed_at: datetime
