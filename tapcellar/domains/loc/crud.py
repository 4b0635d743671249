# tapcellar/domains/loc/crud.py

"""
'loc' 도메인 (산지 정보)과 관련된 CRUD 로직을 담당하는 모듈입니다.

- 생성/수정 시 계층 규칙(부모 존재, 순환 금지, 유형 단계)을 검사합니다.
- 삭제 시 자식 산지는 최상위로 올리고, 이 산지를 참조하는 와인/와이너리의 location_id는 NULL로 만듭니다.
"""

import logging
from typing import Any, Dict, List, Optional, Union

from sqlmodel.ext.asyncio.session import AsyncSession
from fastapi import HTTPException, status

from tapcellar.core.crud_base import CRUDBase, clear_reference, degrade_on_store_error, get_or_unavailable
from tapcellar.domains.wine.models import Wine, Winery
from . import models as loc_models
from . import schemas as loc_schemas
from .hierarchy import LocationHierarchyError, LocationTree, check_parent_kind

logger = logging.getLogger(__name__)


class CRUDLocation(
    CRUDBase[
        loc_models.Location,
        loc_schemas.LocationCreate,
        loc_schemas.LocationUpdate
    ]
):
    def __init__(self):
        super().__init__(model=loc_models.Location, order_by=("name",))

    @degrade_on_store_error(lambda: LocationTree(()))
    async def get_tree(self, db: AsyncSession) -> LocationTree:
        """산지 트리 스냅샷을 한 번의 쿼리로 읽어옵니다."""
        return await LocationTree.load(db)

    async def get_by_kind(self, db: AsyncSession, *, kind: loc_models.LocationKind) -> List[loc_models.Location]:
        return await self.get_multi(db, kind=kind)

    async def get_by_parent(self, db: AsyncSession, *, parent_id: Optional[int]) -> List[loc_models.Location]:
        """parent_id의 직계 자식을 조회합니다. parent_id가 None이면 최상위 산지를 반환합니다."""
        return await self.get_multi(db, parent_id=parent_id)

    async def list_with_paths(self, db: AsyncSession) -> List[loc_schemas.LocationWithPath]:
        """
        모든 산지를 전체 경로와 함께 경로 순으로 반환합니다.
        """
        locations = await self.get_multi(db)
        tree = LocationTree((loc.id, loc.name, loc.parent_id) for loc in locations)
        rows = [
            loc_schemas.LocationWithPath(**loc.model_dump(), path=tree.build_path(loc.id))
            for loc in locations
        ]
        rows.sort(key=lambda row: (row.path, row.id))
        return rows

    async def get_descendant_ids(self, db: AsyncSession, *, id: int) -> List[int]:
        tree = await self.get_tree(db)
        return sorted(tree.descendants(id))

    async def _validate_placement(
        self,
        db: AsyncSession,
        *,
        node_id: Optional[int],
        kind: loc_models.LocationKind,
        parent_id: Optional[int],
    ) -> None:
        """부모 존재 여부, 순환 여부, 유형 단계를 검사합니다."""
        if parent_id is None:
            return
        parent = await get_or_unavailable(db, loc_models.Location, parent_id, action="checking parent location")
        if parent is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Parent location not found for the given ID"
            )
        if node_id is not None:
            tree = await self.get_tree(db)
            if tree.would_create_cycle(node_id, parent_id):
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="A location cannot be placed under itself or one of its descendants"
                )
        try:
            check_parent_kind(kind, parent.kind)
        except LocationHierarchyError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    async def create(self, db: AsyncSession, *, obj_in: loc_schemas.LocationCreate) -> loc_models.Location:
        await self._validate_placement(db, node_id=None, kind=obj_in.kind, parent_id=obj_in.parent_id)
        return await super().create(db, obj_in=obj_in)

    async def update(
        self,
        db: AsyncSession, *, db_obj: loc_models.Location, obj_in: Union[loc_schemas.LocationUpdate, Dict[str, Any]]
    ) -> loc_models.Location:
        """
        산지 정보를 업데이트합니다.
        유형을 바꾸는 경우 기존 자식 산지와의 유형 단계도 유지되어야 합니다.
        """
        update_data = obj_in if isinstance(obj_in, dict) else obj_in.model_dump(exclude_unset=True)

        for required in ("name", "kind"):
            if required in update_data and update_data[required] is None:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=f"Location {required} cannot be null"
                )

        kind = update_data.get("kind", db_obj.kind)
        parent_id = update_data["parent_id"] if "parent_id" in update_data else db_obj.parent_id

        if "kind" in update_data or "parent_id" in update_data:
            await self._validate_placement(db, node_id=db_obj.id, kind=kind, parent_id=parent_id)

        if "kind" in update_data and kind != db_obj.kind:
            for child in await self.get_by_parent(db, parent_id=db_obj.id):
                try:
                    check_parent_kind(child.kind, kind)
                except LocationHierarchyError as e:
                    raise HTTPException(
                        status_code=status.HTTP_400_BAD_REQUEST,
                        detail=f"Changing the kind would break child location '{child.name}': {e}"
                    )

        return await super().update(db, db_obj=db_obj, obj_in=update_data)

    async def before_delete(self, db: AsyncSession, db_obj: loc_models.Location) -> None:
        await clear_reference(db, loc_models.Location.parent_id, db_obj.id)
        await clear_reference(db, Wine.location_id, db_obj.id)
        await clear_reference(db, Winery.location_id, db_obj.id)
        logger.info("Detached children and catalog references from location %s", db_obj.id)


location = CRUDLocation()
