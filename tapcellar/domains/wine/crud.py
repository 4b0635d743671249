# tapcellar/domains/wine/crud.py

"""
'wine' 도메인과 관련된 CRUD 로직을 담당하는 모듈입니다.

- 와인 생성/수정 시 품종 연결(wine_varietals)은 같은 트랜잭션에서 전체 교체합니다.
- 재고 있는 와인 조회 시 산지 필터는 선택한 산지의 모든 하위 산지까지 확장합니다.
- 표시용 상세 정보(와이너리 이름, 산지 경로, 품종)는 참조 테이블별로 한 번씩 조회해 붙입니다.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Union

from sqlalchemy import delete as sa_delete, or_
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from fastapi import HTTPException, status

from tapcellar.core.crud_base import CRUDBase, degrade_on_store_error, ensure_reference, write_transaction
from tapcellar.domains.loc.hierarchy import LocationTree
from tapcellar.domains.loc.models import Location
from tapcellar.services.catalog_filter import CatalogFilter, normalize_ids
from . import models as wine_models
from . import schemas as wine_schemas

logger = logging.getLogger(__name__)

Wine = wine_models.Wine
WineVarietal = wine_models.WineVarietal
Varietal = wine_models.Varietal


def wine_in_stock():
    """판매 가능 조건: 냉장 또는 셀러 수량이 0보다 큼"""
    return or_(Wine.refrigerated > 0, Wine.cellared > 0)


# =============================================================================
# 1. 와이너리 CRUD
# =============================================================================
class CRUDWinery(CRUDBase[wine_models.Winery, wine_schemas.WineryCreate, wine_schemas.WineryUpdate]):
    def __init__(self):
        super().__init__(model=wine_models.Winery, order_by=("name",))

    async def create(self, db: AsyncSession, *, obj_in: wine_schemas.WineryCreate) -> wine_models.Winery:
        await ensure_reference(db, Location, obj_in.location_id, entity="Location")
        return await super().create(db, obj_in=obj_in)

    async def update(
        self, db: AsyncSession, *, db_obj: wine_models.Winery, obj_in: Union[wine_schemas.WineryUpdate, Dict[str, Any]]
    ) -> wine_models.Winery:
        update_data = obj_in if isinstance(obj_in, dict) else obj_in.model_dump(exclude_unset=True)
        await ensure_reference(db, Location, update_data.get("location_id"), entity="Location")
        return await super().update(db, db_obj=db_obj, obj_in=update_data)

    async def before_delete(self, db: AsyncSession, db_obj: wine_models.Winery) -> None:
        """와이너리의 와인과 품종 연결을 함께 삭제합니다."""
        winery_wines = select(Wine.id).where(Wine.winery_id == db_obj.id)
        await db.exec(sa_delete(WineVarietal).where(WineVarietal.wine_id.in_(winery_wines)))
        await db.exec(sa_delete(Wine).where(Wine.winery_id == db_obj.id))
        logger.info("Deleted wines of winery %s", db_obj.id)


winery = CRUDWinery()


# =============================================================================
# 2. 품종 CRUD
# =============================================================================
class CRUDVarietal(CRUDBase[wine_models.Varietal, wine_schemas.VarietalCreate, wine_schemas.VarietalUpdate]):
    def __init__(self):
        super().__init__(model=wine_models.Varietal, order_by=("name",))

    async def get_by_name(self, db: AsyncSession, *, name: str) -> Optional[wine_models.Varietal]:
        return await self.get_by_attribute(db, attribute="name", value=name)

    async def create(self, db: AsyncSession, *, obj_in: wine_schemas.VarietalCreate) -> wine_models.Varietal:
        if await self.get_by_name(db, name=obj_in.name):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Varietal with this name already exists")
        return await super().create(db, obj_in=obj_in)

    async def update(
        self, db: AsyncSession, *, db_obj: wine_models.Varietal, obj_in: Union[wine_schemas.VarietalUpdate, Dict[str, Any]]
    ) -> wine_models.Varietal:
        update_data = obj_in if isinstance(obj_in, dict) else obj_in.model_dump(exclude_unset=True)
        new_name = update_data.get("name")
        if new_name and new_name != db_obj.name and await self.get_by_name(db, name=new_name):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Another varietal with this name already exists")
        return await super().update(db, db_obj=db_obj, obj_in=update_data)

    async def before_delete(self, db: AsyncSession, db_obj: wine_models.Varietal) -> None:
        await db.exec(sa_delete(WineVarietal).where(WineVarietal.varietal_id == db_obj.id))


varietal = CRUDVarietal()


# =============================================================================
# 3. 와인 CRUD
# =============================================================================
class CRUDWine(CRUDBase[wine_models.Wine, wine_schemas.WineCreate, wine_schemas.WineUpdate]):
    def __init__(self):
        super().__init__(model=wine_models.Wine, order_by=("label",))

    async def _check_references(self, db: AsyncSession, data: Dict[str, Any], varietal_ids: Optional[List[int]]) -> None:
        if "winery_id" in data:
            await ensure_reference(db, wine_models.Winery, data["winery_id"], entity="Winery")
        await ensure_reference(db, Location, data.get("location_id"), entity="Location")
        if varietal_ids:
            result = await db.exec(select(Varietal.id).where(Varietal.id.in_(varietal_ids)))
            missing = set(varietal_ids) - set(result.all())
            if missing:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Varietal not found for the given ID"
                )

    async def _replace_varietals(self, db: AsyncSession, *, wine_id: int, varietal_ids: List[int]) -> None:
        """품종 연결을 모두 지우고 주어진 목록으로 다시 만듭니다. (호출자 트랜잭션 안에서 실행)"""
        await db.exec(sa_delete(WineVarietal).where(WineVarietal.wine_id == wine_id))
        for varietal_id in varietal_ids:
            db.add(WineVarietal(wine_id=wine_id, varietal_id=varietal_id))

    async def create(self, db: AsyncSession, *, obj_in: wine_schemas.WineCreate) -> wine_models.Wine:
        """와인을 생성하고 품종을 연결합니다. 하나의 트랜잭션으로 처리합니다."""
        varietal_ids = normalize_ids(obj_in.varietal_ids)
        wine_data = obj_in.model_dump(exclude={"varietal_ids"})
        await self._check_references(db, wine_data, varietal_ids)

        db_obj = Wine.model_validate(wine_data)
        async with write_transaction(db, action="create Wine"):
            db.add(db_obj)
            await db.flush()
            await self._replace_varietals(db, wine_id=db_obj.id, varietal_ids=varietal_ids)
        await db.refresh(db_obj)
        return db_obj

    async def update(
        self, db: AsyncSession, *, db_obj: wine_models.Wine, obj_in: Union[wine_schemas.WineUpdate, Dict[str, Any]]
    ) -> wine_models.Wine:
        """
        와인을 부분 업데이트합니다. varietal_ids가 있으면 품종 연결을 같은 트랜잭션에서 교체합니다.
        """
        update_data = dict(obj_in) if isinstance(obj_in, dict) else obj_in.model_dump(exclude_unset=True)
        raw_varietal_ids = update_data.pop("varietal_ids", None)
        varietal_ids = None if raw_varietal_ids is None else normalize_ids(raw_varietal_ids)

        for required in ("label", "winery_id", "refrigerated", "cellared"):
            if required in update_data and update_data[required] is None:
                raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Wine {required} cannot be null")
        await self._check_references(db, update_data, varietal_ids)

        async with write_transaction(db, action="update Wine"):
            for key, value in update_data.items():
                setattr(db_obj, key, value)
            db.add(db_obj)
            if varietal_ids is not None:
                await self._replace_varietals(db, wine_id=db_obj.id, varietal_ids=varietal_ids)
        await db.refresh(db_obj)
        return db_obj

    async def before_delete(self, db: AsyncSession, db_obj: wine_models.Wine) -> None:
        await db.exec(sa_delete(WineVarietal).where(WineVarietal.wine_id == db_obj.id))

    @degrade_on_store_error(list)
    async def get_varietal_ids(self, db: AsyncSession, *, wine_id: int) -> List[int]:
        result = await db.exec(
            select(WineVarietal.varietal_id).where(WineVarietal.wine_id == wine_id).order_by(WineVarietal.varietal_id)
        )
        return list(result.all())

    # -------------------------------------------------------------------------
    # 재고 필터
    # -------------------------------------------------------------------------
    def build_filter(
        self,
        tree: LocationTree,
        *,
        location_ids: Optional[Iterable[int]] = None,
        varietal_ids: Optional[Iterable[int]] = None,
        winery_ids: Optional[Iterable[int]] = None,
    ) -> CatalogFilter:
        """
        재고 조건 + 산지(하위 산지까지 확장) + 품종(하나라도 일치) + 와이너리 조건을 조립합니다.
        """
        catalog_filter = CatalogFilter(base=wine_in_stock())

        selected_locations = normalize_ids(location_ids)
        if selected_locations:
            expanded = tree.expand(selected_locations)
            catalog_filter.add("location", Wine.location_id.in_(sorted(expanded)))

        selected_varietals = normalize_ids(varietal_ids)
        if selected_varietals:
            catalog_filter.add(
                "varietal",
                Wine.id.in_(select(WineVarietal.wine_id).where(WineVarietal.varietal_id.in_(selected_varietals))),
            )

        catalog_filter.add_membership("winery", Wine.winery_id, winery_ids)
        return catalog_filter

    @degrade_on_store_error(list)
    async def list_available(
        self,
        db: AsyncSession,
        *,
        location_ids: Optional[Iterable[int]] = None,
        varietal_ids: Optional[Iterable[int]] = None,
        winery_ids: Optional[Iterable[int]] = None,
    ) -> List[wine_schemas.WineDetail]:
        """
        재고 있는 와인을 라벨 순으로 조회합니다.
        필터 차원 사이는 AND, 한 차원 안의 값은 OR로 결합합니다.
        """
        tree = await LocationTree.load(db)
        catalog_filter = self.build_filter(
            tree, location_ids=location_ids, varietal_ids=varietal_ids, winery_ids=winery_ids
        )
        query = self._apply_order(catalog_filter.apply(select(Wine)))
        result = await db.exec(query)
        return await self.to_details(db, result.all(), tree=tree)

    @degrade_on_store_error(wine_schemas.WineFacets)
    async def available_facets(
        self,
        db: AsyncSession,
        *,
        location_ids: Optional[Iterable[int]] = None,
        varietal_ids: Optional[Iterable[int]] = None,
        winery_ids: Optional[Iterable[int]] = None,
    ) -> wine_schemas.WineFacets:
        """
        각 차원별로, 나머지 차원의 필터를 적용했을 때 재고 있는 와인이 남는 선택지 ID를 반환합니다.
        산지 선택지에는 재고 있는 산지의 모든 상위 산지도 포함합니다.
        """
        tree = await LocationTree.load(db)
        catalog_filter = self.build_filter(
            tree, location_ids=location_ids, varietal_ids=varietal_ids, winery_ids=winery_ids
        )

        location_query = catalog_filter.apply(
            select(Wine.location_id).distinct().where(Wine.location_id.is_not(None)), exclude="location"
        )
        varietal_query = catalog_filter.apply(
            select(WineVarietal.varietal_id).distinct().join(Wine, Wine.id == WineVarietal.wine_id),
            exclude="varietal",
        )
        winery_query = catalog_filter.apply(select(Wine.winery_id).distinct(), exclude="winery")

        stocked_locations = set((await db.exec(location_query)).all())
        location_options = set(stocked_locations)
        for location_id in stocked_locations:
            location_options.update(tree.ancestors(location_id))

        return wine_schemas.WineFacets(
            location_ids=sorted(location_options),
            varietal_ids=sorted((await db.exec(varietal_query)).all()),
            winery_ids=sorted((await db.exec(winery_query)).all()),
        )

    # -------------------------------------------------------------------------
    # 표시용 상세 정보
    # -------------------------------------------------------------------------
    async def to_details(
        self, db: AsyncSession, wines: Iterable[wine_models.Wine], *, tree: Optional[LocationTree] = None
    ) -> List[wine_schemas.WineDetail]:
        wines = list(wines)
        if not wines:
            return []
        if tree is None:
            tree = await LocationTree.load(db)

        winery_ids = normalize_ids(wine.winery_id for wine in wines)
        rows = await db.exec(
            select(wine_models.Winery.id, wine_models.Winery.name).where(wine_models.Winery.id.in_(winery_ids))
        )
        winery_names = {row.id: row.name for row in rows.all()}

        wine_ids = [wine.id for wine in wines]
        rows = await db.exec(
            select(WineVarietal.wine_id, Varietal.id, Varietal.name)
            .join(Varietal, Varietal.id == WineVarietal.varietal_id)
            .where(WineVarietal.wine_id.in_(wine_ids))
            .order_by(Varietal.name, Varietal.id)
        )
        varietals_by_wine: Dict[int, List[wine_schemas.VarietalRef]] = {}
        for wine_id, varietal_id, varietal_name in rows.all():
            varietals_by_wine.setdefault(wine_id, []).append(
                wine_schemas.VarietalRef(id=varietal_id, name=varietal_name)
            )

        details = []
        for wine in wines:
            varietals = varietals_by_wine.get(wine.id, [])
            location_path = tree.build_path(wine.location_id) if wine.location_id is not None else ""
            details.append(
                wine_schemas.WineDetail(
                    **wine.model_dump(),
                    winery_name=winery_names.get(wine.winery_id),
                    location_name=tree.name_of(wine.location_id) if wine.location_id is not None else None,
                    location_path=location_path or None,
                    varietals=varietals,
                    varietal_names=[item.name for item in varietals],
                )
            )
        return details

    @degrade_on_store_error(list)
    async def list_details(self, db: AsyncSession, *, skip: int = 0, limit: Optional[int] = None) -> List[wine_schemas.WineDetail]:
        wines = await self.get_multi(db, skip=skip, limit=limit)
        return await self.to_details(db, wines)

    @degrade_on_store_error(lambda: None)
    async def get_wine_with_associations(self, db: AsyncSession, *, id: int) -> Optional[wine_schemas.WineDetail]:
        """와인 한 건을 와이너리/산지 경로/품종 정보와 함께 조회합니다. 없으면 None."""
        wine = await db.get(Wine, id)
        if wine is None:
            return None
        return (await self.to_details(db, [wine]))[0]


wine = CRUDWine()
