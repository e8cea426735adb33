from sqlalchemy import Column, String, Text, Float, Integer, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from vidtube.core.database import Base
from vidtube.models.mixins import IdMixin, TimestampMixin


class Video(IdMixin, TimestampMixin, Base):
    """
    영상(Video) 모델
    - 미디어 스토리지에 업로드된 영상/썸네일 URL과 메타데이터 저장
    - 삭제 시 댓글, 좋아요, 플레이리스트 항목이 함께 정리됨 (VideoRepository.delete_cascade)
    """
    __tablename__ = "videos"

    video_file: str = Column(
        String(1024),
        nullable=False,
        doc="영상 파일 URL"
    )
    thumbnail: str = Column(
        String(1024),
        nullable=False,
        doc="썸네일 이미지 URL"
    )
    title: str = Column(
        String(255),
        nullable=False,
        doc="영상 제목"
    )
    description: str = Column(
        Text,
        nullable=False,
        doc="영상 설명"
    )
    duration: float = Column(
        Float,
        nullable=False,
        default=0.0,
        doc="재생 시간(초)"
    )
    views: int = Column(
        Integer,
        nullable=False,
        default=0,
        doc="조회수"
    )
    is_published: bool = Column(
        Boolean,
        nullable=False,
        default=True,
        doc="공개 여부"
    )
    owner_id: str = Column(
        String(36),
        ForeignKey(
            "users.id",
            ondelete="CASCADE"  # 소유자 삭제 시 영상도 삭제
        ),
        nullable=False,
        index=True,
        doc="업로더(User) ID"
    )

    # User ↔ Video (N:1)
    owner = relationship(
        "User",
        back_populates="videos",
        lazy="noload",
        doc="업로더(User) 관계"
    )
