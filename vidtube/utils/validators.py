"""
입력 검증 유틸리티

각 검사 함수는 예외를 던지지 않고 실패 시 BadRequestError를, 통과 시 None을 반환한다.
호출 측은 ensure(...)로 검사 결과를 묶어 첫 번째 실패만 올린다.

    ensure(
        check_id(video_id, "videoId"),
        check_text(content, "content"),
    )
"""
import uuid
from typing import Any, Optional

from vidtube.utils.exceptions import BadRequestError


def is_valid_id(value: Any) -> bool:
    """저장소 ID 형식(소문자 하이픈 UUID 문자열)에 맞는지 확인"""
    if not isinstance(value, str) or not value:
        return False
    try:
        parsed = uuid.UUID(value)
    except ValueError:
        return False
    return str(parsed) == value


def clean_text(value: Optional[str]) -> str:
    """앞뒤 공백 제거 (None은 빈 문자열)"""
    return (value or "").strip()


def check_text(value: Optional[str], field: str) -> Optional[BadRequestError]:
    """필수 텍스트 필드가 공백 제거 후에도 비어 있지 않은지 확인"""
    if not clean_text(value):
        return BadRequestError(f"{field} is required!")
    return None


def check_optional_text(value: Optional[str], field: str) -> Optional[BadRequestError]:
    """선택 필드: 값이 주어졌다면 비어 있지 않아야 함"""
    if value is not None and not clean_text(value):
        return BadRequestError(f"{field} must not be empty!")
    return None


def check_id(value: Optional[str], field: str) -> Optional[BadRequestError]:
    """ID 누락 및 형식 검사"""
    if not value:
        return BadRequestError(f"{field} is missing!")
    if not is_valid_id(value):
        return BadRequestError(f"invalid {field}!")
    return None


def check_present(value: Any, field: str) -> Optional[BadRequestError]:
    """파일 등 값 존재 여부 검사"""
    if value is None:
        return BadRequestError(f"{field} is required!")
    return None


def ensure(*results: Optional[BadRequestError]) -> None:
    """
    검사 결과 중 첫 번째 실패를 올림
    - 모든 결과가 None이면 통과
    """
    for error in results:
        if error is not None:
            raise error
