from typing import Any, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

# ─── 공통 응답 스키마 정의 ─────────────────────────────────────────────

T = TypeVar("T")


class CamelModel(BaseModel):
    """
    공개 JSON 키를 camelCase로 직렬화하는 베이스 모델
    - 내부 필드명은 snake_case, ORM 객체에서 바로 변환 가능
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ApiResponse(CamelModel, Generic[T]):
    """
    모든 성공 응답을 감싸는 envelope
    - { statusCode, data, message, success }
    """
    status_code: int = Field(200, description="HTTP 상태 코드")
    data: Optional[T] = Field(None, description="응답 데이터")
    message: str = Field("Success", description="응답 메시지")
    success: bool = Field(True, description="statusCode < 400 여부")

    @model_validator(mode="after")
    def _derive_success(self) -> "ApiResponse":
        self.success = self.status_code < 400
        return self


class ApiErrorResponse(CamelModel):
    """
    에러 응답 envelope
    - { statusCode, message, success: false, errors: [] }
    """
    status_code: int
    message: str
    success: bool = False
    errors: List[Any] = Field(default_factory=list)


class OwnerSummary(CamelModel):
    """
    조인된 사용자(소유자/구독자/채널)의 공개 필드 요약
    - 비밀번호, 리프레시 토큰은 절대 포함하지 않음
    """
    id: str
    username: str
    fullname: str
    avatar: str
