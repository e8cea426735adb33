from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator, model_validator
from pathlib import Path
from functools import lru_cache
from typing import List, Optional

# 패키지 루트 디렉토리 (vidtube/)
BASE_DIR = Path(__file__).resolve().parent.parent

def _resolve_path(path_str: str) -> str:
    """
    입력된 경로가 절대 경로인지 확인하고 상대 경로일 경우 BASE_DIR 기준으로 변환
    """
    path = Path(path_str)
    return str(path if path.is_absolute() else BASE_DIR / path)

class Settings(BaseSettings):
    """
    애플리케이션 환경 설정 모델
    - 환경 변수 및 config/settings.env 파일을 자동 로드
    - get_settings()로 한 번만 생성되어 의존성 주입으로 전달됨
    """
    model_config = SettingsConfigDict(
        env_file=str(BASE_DIR / "config" / "settings.env"),
        env_file_encoding="utf-8",
        extra='ignore',
    )

    # Security & JWT
    ACCESS_TOKEN_SECRET: str
    ACCESS_TOKEN_EXPIRES_MINUTES: int = Field(
        60 * 24,
        description="액세스 토큰 만료 시간(분)",
    )
    REFRESH_TOKEN_SECRET: str
    REFRESH_TOKEN_EXPIRES_DAYS: int = Field(
        10,
        description="리프레시 토큰 만료 시간(일)",
    )
    JWT_ALGORITHM: str = "HS256"
    BCRYPT_ROUNDS: int = Field(
        12,
        description="비밀번호 해시 bcrypt cost",
    )

    # Cookies
    COOKIE_SECURE: bool = True
    COOKIE_SAMESITE: str = "none"

    # Database
    DB_USER:     str = "vidtube"
    DB_PASSWORD: str = "vidtube_pw"
    DB_HOST:     str = "localhost"
    DB_PORT:     int = 3306
    DB_NAME:     str = "vidtube"
    DATABASE_URL: Optional[str] = Field(
        None,
        description="전체 DB 연결 URL (우선순위: env > 자동 조합)",
    )
    DB_ECHO: bool = False
    DB_AUTO_CREATE: bool = Field(
        True,
        description="앱 시작 시 메타데이터 기반 테이블 자동 생성 여부",
    )

    # Media storage (S3 호환)
    MEDIA_ENDPOINT_URL: Optional[str] = Field(
        None,
        description="S3 호환 스토리지 엔드포인트 (MinIO 등). 비어 있으면 AWS 기본값",
    )
    MEDIA_ACCESS_KEY: str = ""
    MEDIA_SECRET_KEY: str = ""
    MEDIA_BUCKET: str = "vidtube-media"
    MEDIA_REGION: str = "us-east-1"
    MEDIA_PUBLIC_BASE_URL: Optional[str] = Field(
        None,
        description="업로드된 오브젝트의 공개 URL 접두어",
    )
    UPLOAD_TEMP_DIR: str = Field(
        default=str(BASE_DIR / "public" / "temp"),
        description="multipart 업로드 임시 저장 경로",
    )

    # HTTP
    CORS_ORIGINS: List[str] = ["http://localhost:3000"]
    LOG_LEVEL: str = "INFO"
    MAX_PAGE_LIMIT: int = Field(
        100,
        description="페이지당 최대 조회 개수",
    )

    @field_validator("UPLOAD_TEMP_DIR", mode="before")
    @classmethod
    def _validate_paths(cls, v: str) -> str:
        """
        파일 경로 필드가 절대 경로가 아닐 경우 BASE_DIR 기준으로 변환
        """
        return _resolve_path(v)

    @model_validator(mode="after")
    def _assemble_database_url(self) -> "Settings":
        """
        DATABASE_URL이 설정되어 있으면 그대로 사용하고, 없으면 개별 DB 설정값으로 URL을 조합
        """
        if not self.DATABASE_URL:
            self.DATABASE_URL = (
                f"mysql+asyncmy://{self.DB_USER}:{self.DB_PASSWORD}"
                f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}?charset=utf8mb4"
            )
        return self

    @property
    def SQLALCHEMY_DATABASE_URI(self) -> str:
        """
        SQLAlchemy가 기대하는 이름의 DB 연결 문자열을 반환
        """
        return self.DATABASE_URL  # 항상 존재함

    @property
    def media_public_base_url(self) -> str:
        """
        공개 URL 접두어 반환
        - 미설정 시 엔드포인트/버킷 경로 조합
        """
        if self.MEDIA_PUBLIC_BASE_URL:
            return self.MEDIA_PUBLIC_BASE_URL.rstrip("/")
        endpoint = self.MEDIA_ENDPOINT_URL or f"https://s3.{self.MEDIA_REGION}.amazonaws.com"
        return f"{endpoint.rstrip('/')}/{self.MEDIA_BUCKET}"

@lru_cache()
def get_settings() -> Settings:
    """
    Settings 인스턴스를 싱글톤으로 반환
    최초 호출 시 객체를 생성하고, 이후 캐싱된 인스턴스를 반환
    """
    return Settings()
