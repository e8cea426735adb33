import logging
from typing import Optional

from fastapi import Depends, Request, Response
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.config import Settings, get_settings
from vidtube.core.database import get_db_session
from vidtube.schemas.user_schema import Identity
from vidtube.services.auth_service import AuthService

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


class CookieConfig:
    """
    인증 쿠키 설정
    - 액세스/리프레시 토큰 모두 httpOnly + secure
    """
    ACCESS_NAME = "accessToken"
    REFRESH_NAME = "refreshToken"
    PATH = "/"
    HTTPONLY = True

    @classmethod
    def set_cookies(cls, response: Response, settings: Settings, access: str, refresh: str) -> None:
        """
        응답에 액세스 및 리프레시 토큰 쿠키를 설정
        """
        for name, token, max_age in [
            (cls.ACCESS_NAME, access, 60 * settings.ACCESS_TOKEN_EXPIRES_MINUTES),
            (cls.REFRESH_NAME, refresh, 60 * 60 * 24 * settings.REFRESH_TOKEN_EXPIRES_DAYS),
        ]:
            response.set_cookie(
                key=name,
                value=token,
                httponly=cls.HTTPONLY,
                secure=settings.COOKIE_SECURE,
                samesite=settings.COOKIE_SAMESITE,
                max_age=max_age,
                path=cls.PATH,
            )

    @classmethod
    def clear_cookies(cls, response: Response, settings: Settings) -> None:
        for name in [cls.ACCESS_NAME, cls.REFRESH_NAME]:
            response.delete_cookie(
                name,
                path=cls.PATH,
                httponly=cls.HTTPONLY,
                secure=settings.COOKIE_SECURE,
                samesite=settings.COOKIE_SAMESITE,
            )


def extract_access_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials],
) -> Optional[str]:
    """
    요청에서 액세스 토큰 추출
    1) 쿠키 'accessToken' 우선
    2) 없으면 Authorization: Bearer 헤더
    """
    token = request.cookies.get(CookieConfig.ACCESS_NAME)
    if token:
        return token
    if credentials and credentials.credentials:
        return credentials.credentials
    return None


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> Identity:
    """
    현재 요청의 사용자를 가져오는 종속성 함수
    Raises:
        UnauthorizedError: 토큰 없음/무효 또는 사용자 없음
    """
    token = extract_access_token(request, credentials)
    return await AuthService(db, settings).resolve_identity(token)
