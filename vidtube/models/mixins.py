import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, String
from sqlalchemy.dialects import mysql

# MySQL에서도 마이크로초까지 저장 (생성 순 정렬 안정화)
TIMESTAMP = DateTime(timezone=True).with_variant(mysql.DATETIME(fsp=6), "mysql")


def generate_id() -> str:
    """전역 고유 식별자(UUID4 문자열) 생성"""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class IdMixin:
    """UUID 문자열 기본키"""
    id = Column(
        String(36),
        primary_key=True,
        default=generate_id,
        doc="엔티티 고유 ID (UUID4)"
    )


class TimestampMixin:
    """생성/수정 시각 컬럼"""
    created_at = Column(
        TIMESTAMP,
        nullable=False,
        default=utcnow,
        index=True,
        doc="생성 시각(UTC)"
    )
    updated_at = Column(
        TIMESTAMP,
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
        doc="마지막 수정 시각(UTC)"
    )
