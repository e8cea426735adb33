import logging

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.database import get_db_session
from vidtube.schemas.common_schema import ApiResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/healthcheck", tags=["Healthcheck"])


@router.get("", response_model=ApiResponse[dict])
async def healthcheck(db: AsyncSession = Depends(get_db_session)) -> ApiResponse[dict]:
    """
    서비스 상태 확인
    - DB에 SELECT 1을 보내 연결 상태 보고
    """
    try:
        await db.execute(text("SELECT 1"))
        database = "ok"
    except SQLAlchemyError as e:
        logger.error("헬스체크 DB 연결 실패: %s", e)
        database = "unavailable"
    return ApiResponse(data={"status": "ok", "database": database}, message="healthcheck passed.")
