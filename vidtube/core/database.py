from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base

from vidtube.core.config import get_settings


def build_engine_options(url: str) -> dict:
    """
    드라이버별 엔진 옵션 구성
    - MySQL: utf8mb4 강제, 커넥션 재활용 및 pre-ping
    - 그 외(SQLite 등): 기본값 사용
    """
    if url.startswith("mysql"):
        return {
            "connect_args": {
                "charset": "utf8mb4",
                "init_command": "SET NAMES utf8mb4 COLLATE utf8mb4_unicode_ci",
            },
            "pool_recycle": 1800,
            "pool_pre_ping": True,
        }
    return {}


settings = get_settings()

# 비동기 엔진 및 세션 팩토리 생성
async_engine = create_async_engine(
    settings.SQLALCHEMY_DATABASE_URI,
    echo=settings.DB_ECHO,
    future=True,
    **build_engine_options(settings.SQLALCHEMY_DATABASE_URI),
)
async_session_factory = async_sessionmaker(
    bind=async_engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

class _DeclarativeBase:
    # `name: str = Column(...)` 형태의 레거시 타입 힌트 허용
    __allow_unmapped__ = True


# ORM 베이스
Base = declarative_base(cls=_DeclarativeBase)


def import_models() -> None:
    """
    모델 모듈을 import하여 Base 메타데이터에 테이블 등록
    """
    from vidtube.models import (  # noqa: F401
        user, video, comment, like, tweet, playlist, subscription
    )


async def init_db() -> None:
    """
    애플리케이션 시작 시 호출하여 메타데이터 기반 테이블을 생성
    """
    import_models()

    async with async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI 종속성: 요청마다 새로운 DB 세션을 생성 후 반환
    """
    async with async_session_factory() as session:
        yield session
