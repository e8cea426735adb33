from sqlalchemy import Column, String, Text
from sqlalchemy.orm import relationship
from vidtube.core.database import Base
from vidtube.models.mixins import IdMixin, TimestampMixin

class User(IdMixin, TimestampMixin, Base):
    """
    서비스 사용자(User) 모델
    - 채널 역할을 겸하며 영상, 트윗, 플레이리스트의 소유자
    - username/email은 각각 전역 유일
    """
    __tablename__ = "users"

    username: str = Column(
        String(120),
        unique=True,
        index=True,
        nullable=False,
        doc="소문자로 정규화된 사용자 이름"
    )
    email: str = Column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
        doc="사용자 이메일(로그인 ID)"
    )
    fullname: str = Column(
        String(255),
        nullable=False,
        doc="표시 이름"
    )
    avatar: str = Column(
        String(1024),
        nullable=False,
        doc="아바타 이미지 URL"
    )
    cover_image: str = Column(
        String(1024),
        nullable=False,
        default="",
        doc="커버 이미지 URL (없으면 빈 문자열)"
    )
    password: str = Column(
        String(255),
        nullable=False,
        doc="해시 처리된 비밀번호"
    )
    refresh_token: str = Column(
        Text,
        nullable=True,
        doc="현재 유효한 리프레시 토큰 (사용자당 1개)"
    )

    # User ↔ Video (1:N)
    videos = relationship(
        "Video",
        back_populates="owner",
        lazy="noload",
        doc="이 사용자가 업로드한 영상 목록"
    )
