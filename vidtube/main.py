import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Type

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from vidtube.core.config import get_settings
from vidtube.core.database import init_db
from vidtube.routers.comment_router import router as comment_router
from vidtube.routers.dashboard_router import router as dashboard_router
from vidtube.routers.healthcheck_router import router as healthcheck_router
from vidtube.routers.like_router import router as like_router
from vidtube.routers.playlist_router import router as playlist_router
from vidtube.routers.subscription_router import router as subscription_router
from vidtube.routers.tweet_router import router as tweet_router
from vidtube.routers.user_router import router as user_router
from vidtube.routers.video_router import router as video_router
from vidtube.schemas.common_schema import ApiErrorResponse
from vidtube.services.media_service import build_media_service
from vidtube.utils.exceptions import (
    ApiError, BadRequestError, ConflictError, ForbiddenError,
    NotFoundError, UnauthorizedError
)

settings = get_settings()

# ─── 로그 설정 ─────────────────────────────────────────────────────────
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logging.getLogger("botocore").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


# ─── 애플리케이션 수명 주기 이벤트 핸들러 정의 ─────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    앱 시작 시 DB 테이블 생성 및 미디어 버킷 확인
    """
    if settings.DB_AUTO_CREATE:
        await init_db()

    await asyncio.to_thread(build_media_service().ensure_bucket)

    yield


# ─── FastAPI 애플리케이션 인스턴스 생성 ─────────────────────────────────────
app = FastAPI(
    title="VidTube API",
    description="영상 공유 플랫폼 백엔드 (사용자, 영상, 댓글, 좋아요, 트윗, 플레이리스트, 구독)",
    version="1.0.0",
    lifespan=lifespan,
    default_response_class=ORJSONResponse,
)

# ─── CORS 설정 ─────────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ─── 예외 클래스 → Status Code 매핑 ───────────────────────────────────────
EXCEPTION_STATUS_MAP: dict[Type[Exception], int] = {
    BadRequestError: 400,
    UnauthorizedError: 401,
    ForbiddenError: 403,
    NotFoundError: 404,
    ConflictError: 409,
}


def status_code_for(exc: Exception) -> int:
    """예외 타입(상위 클래스 포함)에 매핑된 상태 코드, 없으면 500"""
    for klass in type(exc).__mro__:
        if klass in EXCEPTION_STATUS_MAP:
            return EXCEPTION_STATUS_MAP[klass]
    return 500


def error_response(status_code: int, message: str, errors=None) -> ORJSONResponse:
    body = ApiErrorResponse(status_code=status_code, message=message, errors=errors or [])
    return ORJSONResponse(status_code=status_code, content=body.model_dump(by_alias=True))


# ─── 예외 처리 핸들러 등록───────────────────────────────────────────────────
@app.exception_handler(ApiError)
async def handle_api_error(request: Request, exc: ApiError):
    """
    커스텀 ApiError를 에러 envelope으로 변환
    EXCEPTION_STATUS_MAP에 매핑된 예외라면 해당 상태 코드로, 그렇지 않으면 500으로 반환
    """
    status_code = status_code_for(exc)
    if status_code >= 500:
        logger.error("%s %s 처리 실패: %s", request.method, request.url.path, exc.message)
    return error_response(status_code, exc.message, exc.errors)


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError):
    """요청 형식 오류는 400으로 반환"""
    errors = [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
        for error in exc.errors()
    ]
    return error_response(400, "invalid request!", errors)


@app.exception_handler(StarletteHTTPException)
async def handle_http_error(request: Request, exc: StarletteHTTPException):
    return error_response(exc.status_code, str(exc.detail))


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception):
    logger.exception("%s %s 처리 중 예기치 못한 오류", request.method, request.url.path)
    return error_response(500, "something went wrong!")


# ─── 라우터 등록 ───────────────────────────────────────────────────────
app.include_router(healthcheck_router,   prefix=API_PREFIX)
app.include_router(user_router,          prefix=API_PREFIX)
app.include_router(video_router,         prefix=API_PREFIX)
app.include_router(comment_router,       prefix=API_PREFIX)
app.include_router(like_router,          prefix=API_PREFIX)
app.include_router(tweet_router,         prefix=API_PREFIX)
app.include_router(playlist_router,      prefix=API_PREFIX)
app.include_router(subscription_router,  prefix=API_PREFIX)
app.include_router(dashboard_router,     prefix=API_PREFIX)

if __name__ == "__main__":
    uvicorn.run(
        "vidtube.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True
    )
