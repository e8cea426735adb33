from sqlalchemy import Column, Integer, String, Text, ForeignKey
from sqlalchemy.orm import relationship
from vidtube.core.database import Base
from vidtube.models.mixins import IdMixin, TimestampMixin, TIMESTAMP, utcnow


class Playlist(IdMixin, TimestampMixin, Base):
    """
    플레이리스트(Playlist) 모델
    - (name, description, owner) 조합은 생성 시 사전 검사로 중복 방지
    - 영상 목록은 PlaylistVideo의 position 순서를 따름 (중복 허용)
    """
    __tablename__ = "playlists"

    name: str = Column(
        String(255),
        nullable=False,
        doc="플레이리스트 이름"
    )
    description: str = Column(
        Text,
        nullable=False,
        doc="플레이리스트 설명"
    )
    owner_id: str = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        doc="소유자(User) ID"
    )

    # Playlist ↔ PlaylistVideo (1:N)
    entries = relationship(
        "PlaylistVideo",
        back_populates="playlist",
        order_by="PlaylistVideo.position",
        cascade="all, delete-orphan",  # 플레이리스트 삭제 시 항목도 삭제
        lazy="selectin",
        doc="순서가 있는 영상 항목 목록"
    )

    @property
    def video_ids(self) -> list:
        """position 순서의 영상 ID 목록"""
        return [entry.video_id for entry in self.entries]


class PlaylistVideo(Base):
    """
    플레이리스트 항목 모델
    - 같은 영상이 여러 번 들어갈 수 있으므로 별도 순번(position)으로 식별
    """
    __tablename__ = "playlist_videos"

    id: int = Column(
        Integer,
        primary_key=True,
        autoincrement=True,
        doc="항목 고유 ID"
    )
    playlist_id: str = Column(
        String(36),
        ForeignKey("playlists.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        doc="소속 플레이리스트 ID"
    )
    video_id: str = Column(
        String(36),
        ForeignKey("videos.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        doc="영상 ID"
    )
    position: int = Column(
        Integer,
        nullable=False,
        doc="플레이리스트 내 순번 (0부터, 끝에 추가)"
    )
    created_at = Column(
        TIMESTAMP,
        nullable=False,
        default=utcnow,
        doc="추가된 시각"
    )

    playlist = relationship(
        "Playlist",
        back_populates="entries",
        lazy="noload",
    )
