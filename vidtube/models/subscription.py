from sqlalchemy import Column, String, ForeignKey, UniqueConstraint
from vidtube.core.database import Base
from vidtube.models.mixins import IdMixin, TimestampMixin


class Subscription(IdMixin, TimestampMixin, Base):
    """
    구독(Subscription) 모델
    - subscriber가 channel(다른 User)을 구독한 기록
    - (subscriber, channel) 쌍마다 최대 1개
    """
    __tablename__ = "subscriptions"
    __table_args__ = (
        UniqueConstraint("subscriber_id", "channel_id", name="uq_subscriptions_subscriber_channel"),
    )

    subscriber_id: str = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        doc="구독자(User) ID"
    )
    channel_id: str = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        doc="구독 대상 채널(User) ID"
    )
