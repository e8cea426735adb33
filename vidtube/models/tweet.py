from sqlalchemy import Column, String, Text, ForeignKey
from vidtube.core.database import Base
from vidtube.models.mixins import IdMixin, TimestampMixin


class Tweet(IdMixin, TimestampMixin, Base):
    """
    짧은 글(Tweet) 모델
    """
    __tablename__ = "tweets"

    content: str = Column(
        Text,
        nullable=False,
        doc="트윗 본문"
    )
    owner_id: str = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        doc="작성자(User) ID"
    )
