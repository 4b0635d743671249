# tapcellar/domains/loc/hierarchy.py

"""
산지 계층 구조(트리) 탐색 모듈입니다.

locations 테이블 전체를 (id, name, parent_id)로 한 번에 조회한 뒤
메모리에서 경로(root -> leaf)와 하위 집합을 계산합니다.
데이터에 순환 참조가 있어도 탐색은 항상 종료됩니다.
"""

import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Set, Tuple

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from tapcellar.core.config import settings
from .models import KIND_RANK, Location, LocationKind

logger = logging.getLogger(__name__)

LocationRow = Tuple[int, str, Optional[int]]


class LocationHierarchyError(ValueError):
    """부모/유형 조합이 계층 규칙을 위반하는 경우 발생합니다."""


def check_parent_kind(kind: LocationKind, parent_kind: Optional[LocationKind]) -> None:
    """
    부모 유형이 자식 유형보다 정확히 한 단계 위인지 확인합니다.
    parent_kind가 None(최상위)이면 어떤 유형이든 허용합니다.
    """
    if parent_kind is None:
        return
    if KIND_RANK[LocationKind(parent_kind)] != KIND_RANK[LocationKind(kind)] - 1:
        raise LocationHierarchyError(
            f"A {LocationKind(kind).value} cannot be placed under a {LocationKind(parent_kind).value}"
        )


class LocationTree:
    """
    산지 트리의 메모리 스냅샷입니다.
    """
    def __init__(self, rows: Iterable[LocationRow]):
        self._names: Dict[int, str] = {}
        self._parents: Dict[int, Optional[int]] = {}
        self._children: Dict[int, List[int]] = defaultdict(list)

        for node_id, name, parent_id in rows:
            self._names[node_id] = name
            self._parents[node_id] = parent_id

        for node_id, parent_id in self._parents.items():
            if parent_id is not None:
                self._children[parent_id].append(node_id)
        for child_ids in self._children.values():
            child_ids.sort()

    @classmethod
    async def load(cls, db: AsyncSession) -> "LocationTree":
        """locations 테이블 전체를 한 번의 쿼리로 읽어 트리를 만듭니다."""
        result = await db.exec(select(Location.id, Location.name, Location.parent_id))
        return cls(result.all())

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._names

    def __len__(self) -> int:
        return len(self._names)

    def name_of(self, node_id: int) -> Optional[str]:
        return self._names.get(node_id)

    def parent_of(self, node_id: int) -> Optional[int]:
        return self._parents.get(node_id)

    def children_of(self, node_id: int) -> List[int]:
        return list(self._children.get(node_id, []))

    def roots(self) -> List[int]:
        """부모가 없거나 부모가 존재하지 않는 노드 ID 목록"""
        return sorted(
            node_id for node_id, parent_id in self._parents.items()
            if parent_id is None or parent_id not in self._names
        )

    def ancestors(self, node_id: int) -> List[int]:
        """
        상위 노드 ID 목록을 최상위부터 반환합니다. (자기 자신 제외)
        """
        chain: List[int] = []
        seen = {node_id}
        current = self._parents.get(node_id)
        while current is not None and current in self._names:
            if current in seen:
                logger.warning("Cycle detected in location hierarchy at id=%s", current)
                break
            seen.add(current)
            chain.append(current)
            current = self._parents.get(current)
        chain.reverse()
        return chain

    def build_path(self, node_id: int, separator: Optional[str] = None) -> str:
        """
        최상위부터 해당 노드까지의 이름을 구분자로 연결합니다.
        예: "France → Bordeaux → Pauillac". 존재하지 않는 ID는 빈 문자열입니다.
        """
        if node_id not in self._names:
            return ""
        if separator is None:
            separator = settings.LOCATION_PATH_SEPARATOR
        names = [self._names[ancestor_id] for ancestor_id in self.ancestors(node_id)]
        names.append(self._names[node_id])
        return separator.join(names)

    def descendants(self, node_id: int) -> Set[int]:
        """
        해당 노드와 모든 하위 노드 ID 집합을 반환합니다. 항상 node_id 자신을 포함합니다.
        """
        found = {node_id}
        stack = [node_id]
        while stack:
            current = stack.pop()
            for child_id in self._children.get(current, []):
                if child_id not in found:
                    found.add(child_id)
                    stack.append(child_id)
        return found

    def expand(self, node_ids: Iterable[int]) -> Set[int]:
        """여러 노드의 하위 집합 합집합"""
        expanded: Set[int] = set()
        for node_id in node_ids:
            expanded |= self.descendants(node_id)
        return expanded

    def would_create_cycle(self, node_id: int, new_parent_id: Optional[int]) -> bool:
        """node_id의 부모를 new_parent_id로 바꾸면 순환이 생기는지 확인합니다."""
        if new_parent_id is None:
            return False
        return new_parent_id == node_id or new_parent_id in self.descendants(node_id)
