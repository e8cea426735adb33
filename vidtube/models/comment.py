from sqlalchemy import Column, String, Text, ForeignKey
from vidtube.core.database import Base
from vidtube.models.mixins import IdMixin, TimestampMixin


class Comment(IdMixin, TimestampMixin, Base):
    """
    영상 댓글(Comment) 모델
    """
    __tablename__ = "comments"

    content: str = Column(
        Text,
        nullable=False,
        doc="댓글 본문 (앞뒤 공백 제거됨)"
    )
    video_id: str = Column(
        String(36),
        ForeignKey("videos.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        doc="대상 영상(Video) ID"
    )
    owner_id: str = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        doc="작성자(User) ID"
    )
