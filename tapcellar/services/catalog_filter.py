# tapcellar/services/catalog_filter.py

"""
카탈로그 재고(가용성) 필터 조립 모듈입니다.

필터는 기본 조건(재고 있음)과 차원(dimension)별 조건으로 구성됩니다.
- 차원 사이는 AND, 한 차원 안의 값들은 IN(...)으로 OR 결합합니다.
- 비어 있거나 생략된 차원은 조건을 추가하지 않습니다.
- 특정 차원을 뺀 조건 목록을 만들 수 있어 facet(선택 가능한 옵션) 계산에 사용합니다.
"""

from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy.sql.elements import ColumnElement


def normalize_ids(values: Optional[Iterable[Optional[int]]]) -> List[int]:
    """None을 제거하고 중복 없이 정렬된 ID 목록을 반환합니다."""
    if not values:
        return []
    return sorted({value for value in values if value is not None})


class CatalogFilter:
    """
    SQLAlchemy 조건식을 차원 이름별로 모아 하나의 WHERE 절로 적용합니다.
    """
    def __init__(self, base: Optional[ColumnElement] = None):
        self._base = base
        self._dimensions: Dict[str, ColumnElement] = {}

    def add(self, dimension: str, condition: ColumnElement) -> "CatalogFilter":
        self._dimensions[dimension] = condition
        return self

    def add_membership(
        self, dimension: str, column: Any, values: Optional[Iterable[Optional[int]]]
    ) -> "CatalogFilter":
        """values가 비어 있지 않으면 `column IN (values)` 조건을 추가합니다."""
        ids = normalize_ids(values)
        if ids:
            self.add(dimension, column.in_(ids))
        return self

    @property
    def dimensions(self) -> Tuple[str, ...]:
        return tuple(self._dimensions)

    def __contains__(self, dimension: object) -> bool:
        return dimension in self._dimensions

    def conditions(self, exclude: Optional[str] = None) -> List[ColumnElement]:
        """기본 조건과 차원 조건 목록 (exclude 차원 제외)"""
        conditions = [] if self._base is None else [self._base]
        conditions.extend(
            condition for dimension, condition in self._dimensions.items()
            if dimension != exclude
        )
        return conditions

    def apply(self, query, exclude: Optional[str] = None):
        for condition in self.conditions(exclude=exclude):
            query = query.where(condition)
        return query
