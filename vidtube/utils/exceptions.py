from typing import Any, List, Optional


class ApiError(Exception):
    """
    기본 API 예외의 최상위 클래스
    - 모든 커스텀 API 예외가 이 클래스를 상속
    - main.py의 예외 핸들러가 에러 응답 envelope으로 직렬화
    """
    def __init__(self, message: str, errors: Optional[List[Any]] = None):
        """
        - message: 사용자에게 전달할 예외 메시지 문자열
        - errors: 필드별 상세 오류 목록 (선택)
        """
        # 예외 메시지 설정
        self.message = message
        self.errors = errors or []
        # 상위 Exception 초기화
        super().__init__(message)


class BadRequestError(ApiError):
    """400 Bad Request"""
    pass


class UnauthorizedError(ApiError):
    """401 Unauthorized"""
    pass


class ForbiddenError(ApiError):
    """403 Forbidden"""
    pass


class NotFoundError(ApiError):
    """404 Not Found"""
    pass


class ConflictError(ApiError):
    """409 Conflict"""
    pass


class InternalServerError(ApiError):
    """500 Internal Server Error"""
    pass
