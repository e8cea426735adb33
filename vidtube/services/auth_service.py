import logging
import uuid
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Optional

from fastapi import UploadFile
from jose import jwt, JWTError
from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.config import Settings
from vidtube.models.user import User
from vidtube.repositories.user_repository import UserRepository
from vidtube.schemas.user_schema import AuthTokensResponse, Identity, UserResponse
from vidtube.services.media_service import MediaService, ingest_upload, remove_media
from vidtube.utils.exceptions import (
    BadRequestError, ConflictError, NotFoundError, UnauthorizedError
)
from vidtube.utils.validators import check_present, check_text, clean_text, ensure

logger = logging.getLogger(__name__)


@lru_cache()
def get_password_context(rounds: int) -> CryptContext:
    """bcrypt cost별 CryptContext (프로세스 단위 캐시)"""
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)


class TokenService:
    """
    JWT 발급/검증
    - access/refresh 토큰은 서로 다른 secret으로 서명
    - payload.type으로 토큰 용도 구분
    """

    def __init__(self, settings: Settings):
        self.settings = settings

    def create_access_token(self, user: User) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "sub": user.id,
            "email": user.email,
            "username": user.username,
            "fullname": user.fullname,
            "type": "access",
            "exp": now + timedelta(minutes=self.settings.ACCESS_TOKEN_EXPIRES_MINUTES),
            "jti": uuid.uuid4().hex,
        }
        return jwt.encode(payload, self.settings.ACCESS_TOKEN_SECRET, algorithm=self.settings.JWT_ALGORITHM)

    def create_refresh_token(self, user: User) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "sub": user.id,
            "type": "refresh",
            "exp": now + timedelta(days=self.settings.REFRESH_TOKEN_EXPIRES_DAYS),
            "jti": uuid.uuid4().hex,
        }
        return jwt.encode(payload, self.settings.REFRESH_TOKEN_SECRET, algorithm=self.settings.JWT_ALGORITHM)

    def decode(self, token: str, token_type: str) -> str:
        """
        토큰 검증 후 subject(사용자 ID) 반환
        Raises:
            UnauthorizedError: 서명/만료 오류, 용도 불일치, subject 누락
        """
        secret = (
            self.settings.ACCESS_TOKEN_SECRET if token_type == "access"
            else self.settings.REFRESH_TOKEN_SECRET
        )
        try:
            payload = jwt.decode(token, secret, algorithms=[self.settings.JWT_ALGORITHM])
        except JWTError:
            logger.warning("유효하지 않은 %s 토큰", token_type)
            raise UnauthorizedError(f"invalid {token_type} token!")

        subject = payload.get("sub")
        if payload.get("type") != token_type or not subject:
            logger.warning("토큰 용도 불일치 또는 subject 누락 (expected=%s)", token_type)
            raise UnauthorizedError(f"invalid {token_type} token!")
        return subject


class AuthService:
    """
    인증 관련 서비스 클래스
    - 회원가입, 로그인, 로그아웃, 토큰 재발급
    - 요청 토큰으로 현재 사용자(Identity) 확인
    """

    def __init__(
        self,
        db: AsyncSession,
        settings: Settings,
        media: Optional[MediaService] = None,
    ):
        self.db = db
        self.settings = settings
        self.media = media
        self.user_repo = UserRepository(db)
        self.tokens = TokenService(settings)
        self.pwd_context = get_password_context(settings.BCRYPT_ROUNDS)

    async def register(
        self,
        fullname: Optional[str],
        email: Optional[str],
        username: Optional[str],
        password: Optional[str],
        avatar: Optional[UploadFile],
        cover_image: Optional[UploadFile] = None,
    ) -> UserResponse:
        # 1) 필수 입력 검증
        ensure(
            check_text(fullname, "fullname"),
            check_text(email, "email"),
            check_text(username, "username"),
            check_text(password, "password"),
        )
        email = clean_text(email)
        username = clean_text(username).lower()

        # 2) 중복 체크
        if await self.user_repo.find_by_username_or_email(username, email):
            raise ConflictError("user with email or username already exists.")

        # 3) 아바타 필수, 커버 이미지는 선택
        ensure(check_present(avatar if avatar and avatar.filename else None, "avatar file"))
        avatar_asset = await ingest_upload(self.media, avatar, self.settings.UPLOAD_TEMP_DIR)
        try:
            cover_asset = await ingest_upload(self.media, cover_image, self.settings.UPLOAD_TEMP_DIR)
        except Exception:
            await remove_media(self.media, avatar_asset.url)
            raise

        # 4) User 생성/저장
        user = User(
            fullname=clean_text(fullname),
            email=email,
            username=username,
            password=self.pwd_context.hash(password),
            avatar=avatar_asset.url,
            cover_image=cover_asset.url if cover_asset else "",
        )
        # 저장 실패 시 방금 올린 미디어 정리
        uploaded = (avatar_asset.url, cover_asset.url if cover_asset else None)
        try:
            await self.user_repo.create_user(user)
            await self.user_repo.commit()
        except IntegrityError:
            await self.db.rollback()
            await remove_media(self.media, *uploaded)
            raise ConflictError("user with email or username already exists.")
        except Exception:
            await remove_media(self.media, *uploaded)
            raise

        logger.info("회원가입 완료: user_id=%s", user.id)
        return UserResponse.model_validate(user)

    async def login(
        self,
        username: Optional[str],
        email: Optional[str],
        password: Optional[str],
    ) -> AuthTokensResponse:
        """
        username 또는 email + 비밀번호 로그인
        - 없는 사용자: NotFound / 비밀번호 불일치: Unauthorized
        """
        username = clean_text(username).lower() or None
        email = clean_text(email) or None
        if not username and not email:
            raise BadRequestError("username or email required!")
        ensure(check_text(password, "password"))

        user = await self.user_repo.find_by_username_or_email(username, email)
        if not user:
            raise NotFoundError("user does not exist!")

        if not self.pwd_context.verify(password, user.password):
            logger.warning("비밀번호 불일치: user_id=%s", user.id)
            raise UnauthorizedError("incorrect password!")

        tokens = await self._issue_tokens(user)
        logger.info("로그인 성공: user_id=%s", user.id)
        return tokens

    async def logout(self, user_id: str) -> None:
        """저장된 리프레시 토큰 무효화"""
        user = await self.user_repo.find_by_id(user_id)
        if user:
            await self.user_repo.save_refresh_token(user, None)
        logger.info("로그아웃: user_id=%s", user_id)

    async def refresh(self, refresh_token: Optional[str]) -> AuthTokensResponse:
        """
        리프레시 토큰으로 토큰 쌍 재발급 (기존 리프레시 토큰은 교체됨)
        """
        if not refresh_token:
            raise UnauthorizedError("unauthorized request!")

        user_id = self.tokens.decode(refresh_token, "refresh")
        user = await self.user_repo.find_by_id(user_id)
        if not user:
            raise UnauthorizedError("invalid refresh token!")
        if user.refresh_token != refresh_token:
            logger.warning("만료되었거나 이미 사용된 리프레시 토큰: user_id=%s", user.id)
            raise UnauthorizedError("refresh token is expired or used!")

        return await self._issue_tokens(user)

    async def resolve_identity(self, access_token: Optional[str]) -> Identity:
        """
        액세스 토큰 → 현재 사용자
        Raises:
            UnauthorizedError: 토큰 없음/무효, 사용자 없음
        """
        if not access_token:
            raise UnauthorizedError("unauthorized request!")

        user_id = self.tokens.decode(access_token, "access")
        user = await self.user_repo.find_by_id(user_id)
        if not user:
            logger.warning("토큰 subject로 사용자 조회 실패: %s", user_id)
            raise UnauthorizedError("invalid access token!")
        return Identity.model_validate(user)

    async def _issue_tokens(self, user: User) -> AuthTokensResponse:
        """토큰 쌍 발급 + 리프레시 토큰 저장 (사용자당 1개)"""
        access_token = self.tokens.create_access_token(user)
        refresh_token = self.tokens.create_refresh_token(user)
        await self.user_repo.save_refresh_token(user, refresh_token)
        return AuthTokensResponse(
            user=UserResponse.model_validate(user),
            access_token=access_token,
            refresh_token=refresh_token,
        )
