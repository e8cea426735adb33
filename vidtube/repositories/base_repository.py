import logging
from typing import Any, Optional, Type

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.repositories.exceptions import DatabaseCommitError, QueryExecutionError

logger = logging.getLogger(__name__)


class BaseRepository:
    """
    Repository 베이스 클래스
    - 세션 보관, 커밋, 단건 조회 공통 처리
    - SQLAlchemyError는 RepositoryError(500)로 변환
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def commit(self) -> None:
        """
        트랜잭션 커밋 (예외 처리 포함)
        - IntegrityError는 호출 측이 분기할 수 있도록 롤백 후 그대로 전달
        """
        try:
            await self.session.commit()
            logger.debug("DB 커밋 성공")
        except IntegrityError:
            await self.session.rollback()
            raise
        except SQLAlchemyError as e:
            logger.error(f"DB 커밋 실패: {e}")
            await self.session.rollback()
            raise DatabaseCommitError("something went wrong while saving data!")

    async def get(self, model: Type[Any], entity_id: str) -> Optional[Any]:
        """기본키로 엔티티 조회"""
        try:
            return await self.session.get(model, entity_id)
        except SQLAlchemyError as e:
            logger.error(f"{model.__name__} 조회 실패 (id={entity_id}): {e}")
            raise QueryExecutionError(f"something went wrong while fetching {model.__name__.lower()}!")

    async def execute(self, statement, action: str = "query"):
        """쿼리 실행 (실패 시 QueryExecutionError)"""
        try:
            return await self.session.execute(statement)
        except SQLAlchemyError as e:
            logger.error(f"쿼리 실행 실패 ({action}): {e}")
            raise QueryExecutionError(f"something went wrong while executing {action}!")

    async def run(self, shaped_query, pagination=None):
        """ShapedQuery 실행 (실패 시 QueryExecutionError)"""
        try:
            return await shaped_query.fetch(self.session, pagination)
        except SQLAlchemyError as e:
            logger.error(f"조회 파이프라인 실패 ({shaped_query.model.__tablename__}): {e}")
            raise QueryExecutionError("something went wrong while fetching data!")

    async def run_count(self, shaped_query) -> int:
        try:
            return await shaped_query.count(self.session)
        except SQLAlchemyError as e:
            logger.error(f"개수 조회 실패 ({shaped_query.model.__tablename__}): {e}")
            raise QueryExecutionError("something went wrong while counting data!")

    def add(self, entity: Any) -> None:
        """엔티티를 세션에 추가"""
        self.session.add(entity)

    async def delete(self, entity: Any) -> None:
        """엔티티를 세션에서 삭제 표시"""
        try:
            await self.session.delete(entity)
        except SQLAlchemyError as e:
            logger.error(f"엔티티 삭제 실패: {e}")
            raise QueryExecutionError("something went wrong while deleting data!")

    async def refresh(self, entity: Any, attribute_names=None) -> None:
        try:
            await self.session.refresh(entity, attribute_names=attribute_names)
        except SQLAlchemyError as e:
            logger.error(f"엔티티 갱신 실패: {e}")
            raise QueryExecutionError("something went wrong while reloading data!")
