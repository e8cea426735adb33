"""
Repository 계층 예외 클래스들
- 저장소 작업 실패는 모두 500(Internal)으로 직렬화됨
"""

from vidtube.utils.exceptions import InternalServerError


class RepositoryError(InternalServerError):
    """Repository 관련 기본 예외"""
    pass


class DatabaseCommitError(RepositoryError):
    """DB 커밋 관련 예외"""
    pass


class QueryExecutionError(RepositoryError):
    """쿼리 실행 관련 예외"""
    pass
