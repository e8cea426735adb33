from datetime import datetime
from typing import Optional

from pydantic import ConfigDict, Field

from vidtube.schemas.common_schema import CamelModel

# ─── 사용자/인증 관련 요청/응답 스키마 정의 ───────────────────────────────

class UserResponse(CamelModel):
    """
    사용자 공개 정보 응답 모델
    - password, refresh_token 필드는 존재하지 않음
    """
    id: str
    username: str
    email: str
    fullname: str
    avatar: str
    cover_image: str = ""
    created_at: datetime
    updated_at: datetime


class Identity(UserResponse):
    """
    인증 미들웨어가 요청 컨텍스트에 붙이는 현재 사용자
    """
    pass


class LoginRequest(CamelModel):
    """
    로그인 요청 모델
    - username 또는 email 중 하나 이상과 비밀번호
    """
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "username": "johndoe",
                "password": "securepassword",
            }
        },
    )

    username: Optional[str] = Field(None, description="사용자 이름")
    email:    Optional[str] = Field(None, description="이메일 주소")
    password: Optional[str] = Field(None, description="비밀번호")


class RefreshTokenRequest(CamelModel):
    """
    토큰 재발급 요청 모델
    - 쿠키가 없을 때 body의 refreshToken 사용
    """
    refresh_token: Optional[str] = Field(None, description="리프레시 토큰")


class AuthTokensResponse(CamelModel):
    """
    로그인/재발급 응답 데이터
    """
    user: UserResponse
    access_token: str = Field(..., description="Access Token")
    refresh_token: str = Field(..., description="Refresh Token")
