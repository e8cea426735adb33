"""
조회 응답 형태 가공(Read-Shaping) 쿼리 빌더

기준 엔티티에 소유자 정보와 집계 값을 붙여 비정규화된 페이지 뷰를 만든다.
단계:
  1) match     : 기준 테이블 필터 (ID 일치, 텍스트 검색, 집합 포함)
  2) join_owner: 관련 사용자 LEFT JOIN, 공개 필드만 투영 (비밀번호/토큰 제외)
  3) count_related / add_scalar : 1:N 관계를 개수(상관 서브쿼리)로 축약
  4) sort      : 지정 필드/방향 정렬 (동률은 id로 고정)
  5) paginate  : skip=(page-1)*limit, limit
정렬은 페이지 자르기 전에 적용되어 page N이 정렬 결과의 고정 구간이 된다.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from sqlalchemy import Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from vidtube.models.user import User
from vidtube.utils.exceptions import BadRequestError

logger = logging.getLogger(__name__)

# 조인된 사용자에서 노출하는 필드 (password, refresh_token 제외)
OWNER_FIELDS: Tuple[str, ...] = ("id", "username", "fullname", "avatar")

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
# 저장소 OFFSET 상한 (64비트 부호 있는 정수)
MAX_OFFSET = 2 ** 63 - 1


def _positive_int(value: Any, default: int) -> int:
    """양의 정수로 변환, 실패하거나 1 미만이면 기본값"""
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number >= 1 else default


@dataclass(frozen=True)
class Pagination:
    """페이지 파라미터 (1부터 시작)"""
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @classmethod
    def from_params(cls, page: Any = None, limit: Any = None, max_limit: int = 100) -> "Pagination":
        """
        쿼리 문자열 값을 양의 정수로 강제 변환
        - 기본값 page=1, limit=10
        - limit은 max_limit을 넘지 않음
        - offset이 MAX_OFFSET을 넘는 page는 마지막 가능한 page로 고정 (빈 결과)
        """
        limit = min(_positive_int(limit, DEFAULT_LIMIT), max_limit)
        page = min(_positive_int(page, DEFAULT_PAGE), MAX_OFFSET // limit + 1)
        return cls(page=page, limit=limit)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(frozen=True)
class SortSpec:
    """정렬 기준 (공개 필드명 + 방향)"""
    field: str = "createdAt"
    descending: bool = False

    @classmethod
    def from_params(
        cls,
        sort_by: Optional[str],
        sort_type: Optional[str],
        allowed: Sequence[str],
    ) -> "SortSpec":
        """
        sortBy/sortType 파라미터 해석
        - sortBy 미지정: createdAt
        - sortType: 1/asc (오름차순, 기본), -1/desc (내림차순)
        """
        field = sort_by or "createdAt"
        if field not in allowed:
            raise BadRequestError(f"invalid sortBy! allowed: {', '.join(allowed)}")

        direction = (sort_type or "1").strip().lower()
        if direction in ("1", "asc"):
            return cls(field=field, descending=False)
        if direction in ("-1", "desc"):
            return cls(field=field, descending=True)
        raise BadRequestError("invalid sortType! use 1/asc or -1/desc")


def text_search(query: str, *columns) -> Any:
    """여러 컬럼에 대한 대소문자 무시 부분 문자열 검색 (OR 결합)"""
    return or_(*[column.icontains(query, autoescape=True) for column in columns])


def _collapse_owner(mapping: Mapping[str, Any], label: str) -> Optional[Dict[str, Any]]:
    """1:1 조인 결과를 단일 객체로 축약 (조인 실패 시 None)"""
    if mapping.get(f"{label}__id") is None:
        return None
    return {field: mapping[f"{label}__{field}"] for field in OWNER_FIELDS}


class ShapedQuery:
    """
    기준 모델 하나에 대한 조인/집계/정렬/페이지 파이프라인
    - 빌더 메서드는 self를 반환하여 체이닝 가능
    - fetch()는 {기준 필드..., <owner label>: {...}|None, <count label>: int} dict 목록 반환
    """

    def __init__(self, model, fields: Optional[Sequence[str]] = None):
        """
        - model: 기준 ORM 모델
        - fields: 노출할 기준 모델 필드 (None이면 전체 컬럼)
        """
        self.model = model
        self.fields = tuple(fields) if fields else tuple(
            attr.key for attr in model.__mapper__.column_attrs
        )
        self._criteria: List[Any] = []
        self._joins: List[Tuple[Any, Any]] = []
        self._owners: List[Tuple[str, Any]] = []
        self._owner_columns: List[Any] = []
        self._scalars: List[Any] = []
        self._scalar_labels: List[str] = []
        self._order_by: List[Any] = []

    # ==================== 1) 필터 ====================
    def match(self, *criteria) -> "ShapedQuery":
        """WHERE 조건 추가 (None은 무시)"""
        self._criteria.extend(c for c in criteria if c is not None)
        return self

    def join(self, target, onclause) -> "ShapedQuery":
        """집합 포함 필터용 INNER JOIN"""
        self._joins.append((target, onclause))
        return self

    # ==================== 2) 소유자 조인 ====================
    def join_owner(self, fk_column, label: str = "owner") -> "ShapedQuery":
        """
        fk_column이 가리키는 User를 LEFT JOIN 하고 OWNER_FIELDS만 투영
        - 같은 쿼리에서 여러 번 호출 가능 (label별 별칭)
        """
        owner = aliased(User, name=f"{label}_user")
        self._owners.append((label, (owner, owner.id == fk_column)))
        self._owner_columns.extend(
            getattr(owner, field).label(f"{label}__{field}") for field in OWNER_FIELDS
        )
        return self

    # ==================== 3) 집계 ====================
    def add_scalar(self, label: str, expression) -> "ShapedQuery":
        """스칼라 서브쿼리/표현식을 label 컬럼으로 추가"""
        self._scalars.append(expression.label(label))
        self._scalar_labels.append(label)
        return self

    def count_related(self, label: str, related_model, fk_column, key_column=None) -> "ShapedQuery":
        """
        1:N 관계를 개수로 축약
        - related_model.fk_column == key_column(기본: 기준 모델 id) 인 행 수
        """
        key_column = key_column if key_column is not None else self.model.id
        subquery = (
            select(func.count(related_model.id))
            .where(fk_column == key_column)
            .scalar_subquery()
        )
        return self.add_scalar(label, func.coalesce(subquery, 0))

    # ==================== 4) 정렬 ====================
    def sort(self, spec: SortSpec, columns: Mapping[str, Any]) -> "ShapedQuery":
        """
        공개 필드명 → 컬럼 매핑에 따라 정렬
        - 동률은 기준 모델 id로 정렬하여 페이지 경계 고정
        """
        column = columns[spec.field]
        self._order_by = [column.desc() if spec.descending else column.asc(), self.model.id.asc()]
        return self

    def order_by(self, *columns) -> "ShapedQuery":
        """정렬 컬럼 직접 지정 (플레이리스트 순번 등)"""
        self._order_by = [*columns, self.model.id.asc()]
        return self

    # ==================== 5) 빌드/실행 ====================
    def _base_statement(self, *columns) -> Select:
        query = select(*columns).select_from(self.model)
        for target, onclause in self._joins:
            query = query.join(target, onclause)
        if self._criteria:
            query = query.where(*self._criteria)
        return query

    def statement(self, pagination: Optional[Pagination] = None) -> Select:
        """전체 파이프라인을 SELECT 문으로 변환"""
        query = self._base_statement(
            self.model, *self._owner_columns, *self._scalars
        )
        for _label, (owner, onclause) in self._owners:
            query = query.outerjoin(owner, onclause)
        if self._order_by:
            query = query.order_by(*self._order_by)
        if pagination is not None:
            query = query.offset(pagination.offset).limit(pagination.limit)
        return query

    def count_statement(self) -> Select:
        """페이지와 무관한 전체 매칭 개수 SELECT"""
        return self._base_statement(func.count(self.model.id))

    def shape(self, row) -> Dict[str, Any]:
        """결과 행을 응답용 dict로 가공"""
        entity = row[0]
        mapping = row._mapping
        shaped = {field: getattr(entity, field) for field in self.fields}
        for label, _join in self._owners:
            shaped[label] = _collapse_owner(mapping, label)
        for label in self._scalar_labels:
            shaped[label] = mapping[label] or 0
        return shaped

    async def fetch(
        self,
        session: AsyncSession,
        pagination: Optional[Pagination] = None,
    ) -> List[Dict[str, Any]]:
        result = await session.execute(self.statement(pagination))
        rows = [self.shape(row) for row in result.all()]
        logger.debug(
            "ShapedQuery(%s) 조회: pagination=%s, found=%d",
            self.model.__tablename__, pagination, len(rows),
        )
        return rows

    async def count(self, session: AsyncSession) -> int:
        result = await session.execute(self.count_statement())
        return int(result.scalar_one() or 0)
