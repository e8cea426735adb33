import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Request, Response, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.config import Settings, get_settings
from vidtube.core.database import get_db_session
from vidtube.dependencies import CookieConfig, get_current_user
from vidtube.schemas.common_schema import ApiResponse
from vidtube.schemas.user_schema import (
    AuthTokensResponse, Identity, LoginRequest, RefreshTokenRequest, UserResponse
)
from vidtube.services.auth_service import AuthService
from vidtube.services.media_service import MediaService, get_media_service

logger = logging.getLogger(__name__)

# 라우터 인스턴스
router = APIRouter(prefix="/users", tags=["User"])


@router.post("/register", response_model=ApiResponse[UserResponse], status_code=status.HTTP_201_CREATED)
async def register(
    fullname: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    username: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    avatar: Optional[UploadFile] = File(None),
    cover_image: Optional[UploadFile] = File(None, alias="coverImage"),
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
    media: MediaService = Depends(get_media_service),
) -> ApiResponse[UserResponse]:
    """
    회원가입 (multipart)
    - avatar 필수, coverImage 선택
    - username은 소문자로 저장
    """
    user = await AuthService(db, settings, media).register(
        fullname, email, username, password, avatar, cover_image
    )
    return ApiResponse(status_code=201, data=user, message="user registered successfully.")


@router.post("/login", response_model=ApiResponse[AuthTokensResponse])
async def login(
    req: LoginRequest,
    response: Response,
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> ApiResponse[AuthTokensResponse]:
    """
    username 또는 email 로그인 후 토큰 쿠키 설정
    """
    tokens = await AuthService(db, settings).login(req.username, req.email, req.password)
    CookieConfig.set_cookies(response, settings, tokens.access_token, tokens.refresh_token)
    return ApiResponse(data=tokens, message="user logged in successfully.")


@router.post("/logout", response_model=ApiResponse[dict])
async def logout(
    response: Response,
    current_user: Identity = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> ApiResponse[dict]:
    """
    저장된 리프레시 토큰 무효화 및 쿠키 삭제
    """
    await AuthService(db, settings).logout(current_user.id)
    CookieConfig.clear_cookies(response, settings)
    return ApiResponse(data={}, message="user logged out.")


@router.post("/refresh-token", response_model=ApiResponse[AuthTokensResponse])
async def refresh_token(
    request: Request,
    response: Response,
    req: Optional[RefreshTokenRequest] = None,
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> ApiResponse[AuthTokensResponse]:
    """
    리프레시 토큰(쿠키 우선, 없으면 body)으로 토큰 쌍 재발급
    """
    token = request.cookies.get(CookieConfig.REFRESH_NAME) or (req.refresh_token if req else None)
    tokens = await AuthService(db, settings).refresh(token)
    CookieConfig.set_cookies(response, settings, tokens.access_token, tokens.refresh_token)
    return ApiResponse(data=tokens, message="access token refreshed.")


@router.get("/current-user", response_model=ApiResponse[UserResponse])
async def current_user(current_user: Identity = Depends(get_current_user)) -> ApiResponse[UserResponse]:
    """
    현재 인증된 사용자 반환
    """
    return ApiResponse(data=current_user, message="current user fetched successfully.")
