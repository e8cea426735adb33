from sqlalchemy import Column, String, ForeignKey, UniqueConstraint, CheckConstraint
from vidtube.core.database import Base
from vidtube.models.mixins import IdMixin, TimestampMixin


class Like(IdMixin, TimestampMixin, Base):
    """
    좋아요(Like) 모델
    - video / comment / tweet 중 정확히 하나만 설정됨
    - (대상, likedBy) 쌍마다 최대 1개 (유니크 제약)
    """
    __tablename__ = "likes"
    __table_args__ = (
        UniqueConstraint("video_id", "liked_by_id", name="uq_likes_video_liked_by"),
        UniqueConstraint("comment_id", "liked_by_id", name="uq_likes_comment_liked_by"),
        UniqueConstraint("tweet_id", "liked_by_id", name="uq_likes_tweet_liked_by"),
        CheckConstraint(
            "(video_id IS NOT NULL) + (comment_id IS NOT NULL) + (tweet_id IS NOT NULL) = 1",
            name="ck_likes_single_target",
        ),
    )

    video_id: str = Column(
        String(36),
        ForeignKey("videos.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
        doc="좋아요 대상 영상 ID"
    )
    comment_id: str = Column(
        String(36),
        ForeignKey("comments.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
        doc="좋아요 대상 댓글 ID"
    )
    tweet_id: str = Column(
        String(36),
        ForeignKey("tweets.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
        doc="좋아요 대상 트윗 ID"
    )
    liked_by_id: str = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        doc="좋아요를 누른 사용자(User) ID"
    )
