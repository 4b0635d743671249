# tapcellar/domains/beer/crud.py

"""
'beer' 도메인과 관련된 CRUD 로직을 담당하는 모듈입니다.

- 참조 ID(양조장, 스타일, BJCP 분류, 메뉴 카테고리)는 생성/수정 시 존재 여부를 확인합니다.
- 삭제 시 하위 데이터를 같은 트랜잭션에서 정리합니다.
  (양조장 -> 맥주 연쇄 삭제, 스타일/분류/메뉴 카테고리 참조는 NULL 처리)
- 재고 있는 맥주 목록은 CatalogFilter로 한 번의 쿼리로 조회합니다.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Union

from sqlalchemy import delete as sa_delete
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from fastapi import HTTPException, status

from tapcellar.core.crud_base import (
    CRUDBase, clear_reference, degrade_on_store_error, ensure_reference, write_transaction
)
from tapcellar.services.catalog_filter import CatalogFilter, normalize_ids
from . import models as beer_models
from . import schemas as beer_schemas

logger = logging.getLogger(__name__)

Beer = beer_models.Beer
Style = beer_models.Style


def beer_in_stock():
    """판매 가능 조건: status != out"""
    return Beer.status != beer_models.BeerStatus.OUT


# =============================================================================
# 1. BJCP 분류 CRUD
# =============================================================================
class CRUDBJCPCategory(
    CRUDBase[beer_models.BJCPCategory, beer_schemas.BJCPCategoryCreate, beer_schemas.BJCPCategoryUpdate]
):
    def __init__(self):
        super().__init__(model=beer_models.BJCPCategory, order_by=("label", "name"))

    async def before_delete(self, db: AsyncSession, db_obj: beer_models.BJCPCategory) -> None:
        await clear_reference(db, Style.bjcp_id, db_obj.id)


bjcp_category = CRUDBJCPCategory()


# =============================================================================
# 2. 메뉴 카테고리 CRUD
# =============================================================================
class CRUDMenuCategory(
    CRUDBase[beer_models.MenuCategory, beer_schemas.MenuCategoryCreate, beer_schemas.MenuCategoryUpdate]
):
    def __init__(self):
        super().__init__(model=beer_models.MenuCategory, order_by=("name",))

    @degrade_on_store_error(list)
    async def list_available(self, db: AsyncSession) -> List[beer_models.MenuCategory]:
        """
        재고 있는 맥주가 하나 이상 속한 스타일을 가진 메뉴 카테고리만 조회합니다.
        """
        in_stock_categories = (
            select(Style.menu_category_id)
            .join(Beer, Beer.style_id == Style.id)
            .where(beer_in_stock())
            .where(Style.menu_category_id.is_not(None))
        )
        query = self._apply_order(select(self.model).where(self.model.id.in_(in_stock_categories)))
        result = await db.exec(query)
        return list(result.all())

    @degrade_on_store_error(list)
    async def get_beer_links(self, db: AsyncSession, *, menu_category_id: int) -> List[beer_models.MenuCategoryBeer]:
        query = (
            select(beer_models.MenuCategoryBeer)
            .where(beer_models.MenuCategoryBeer.menu_category_id == menu_category_id)
            .order_by(beer_models.MenuCategoryBeer.beer_id)
        )
        result = await db.exec(query)
        return list(result.all())

    async def add_beer_link(
        self, db: AsyncSession, *, menu_category_id: int, beer_id: int
    ) -> beer_models.MenuCategoryBeer:
        """메뉴 카테고리에 맥주를 연결합니다. 이미 연결되어 있으면 400을 발생시킵니다."""
        await ensure_reference(db, Beer, beer_id, entity="Beer")
        link = beer_models.MenuCategoryBeer(menu_category_id=menu_category_id, beer_id=beer_id)
        async with write_transaction(db, action="link beer to menu category"):
            existing = await db.exec(
                select(beer_models.MenuCategoryBeer)
                .where(beer_models.MenuCategoryBeer.menu_category_id == menu_category_id)
                .where(beer_models.MenuCategoryBeer.beer_id == beer_id)
            )
            if existing.first() is not None:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Beer is already linked to this menu category"
                )
            db.add(link)
        return link

    async def remove_beer_link(self, db: AsyncSession, *, menu_category_id: int, beer_id: int) -> bool:
        """연결을 삭제합니다. 삭제한 연결이 없으면 False를 반환합니다."""
        async with write_transaction(db, action="unlink beer from menu category"):
            result = await db.exec(
                sa_delete(beer_models.MenuCategoryBeer)
                .where(beer_models.MenuCategoryBeer.menu_category_id == menu_category_id)
                .where(beer_models.MenuCategoryBeer.beer_id == beer_id)
            )
        return result.rowcount > 0

    async def before_delete(self, db: AsyncSession, db_obj: beer_models.MenuCategory) -> None:
        await clear_reference(db, Style.menu_category_id, db_obj.id)
        await db.exec(
            sa_delete(beer_models.MenuCategoryBeer)
            .where(beer_models.MenuCategoryBeer.menu_category_id == db_obj.id)
        )


menu_category = CRUDMenuCategory()


# =============================================================================
# 3. 스타일 CRUD
# =============================================================================
class CRUDStyle(CRUDBase[beer_models.Style, beer_schemas.StyleCreate, beer_schemas.StyleUpdate]):
    def __init__(self):
        super().__init__(model=beer_models.Style, order_by=("name",))

    async def _check_references(self, db: AsyncSession, data: Dict[str, Any]) -> None:
        await ensure_reference(db, beer_models.BJCPCategory, data.get("bjcp_id"), entity="BJCP category")
        await ensure_reference(db, beer_models.MenuCategory, data.get("menu_category_id"), entity="Menu category")

    async def create(self, db: AsyncSession, *, obj_in: beer_schemas.StyleCreate) -> beer_models.Style:
        await self._check_references(db, obj_in.model_dump())
        return await super().create(db, obj_in=obj_in)

    async def update(
        self, db: AsyncSession, *, db_obj: beer_models.Style, obj_in: Union[beer_schemas.StyleUpdate, Dict[str, Any]]
    ) -> beer_models.Style:
        update_data = obj_in if isinstance(obj_in, dict) else obj_in.model_dump(exclude_unset=True)
        await self._check_references(db, update_data)
        return await super().update(db, db_obj=db_obj, obj_in=update_data)

    async def before_delete(self, db: AsyncSession, db_obj: beer_models.Style) -> None:
        await clear_reference(db, Beer.style_id, db_obj.id)


style = CRUDStyle()


# =============================================================================
# 4. 양조장 CRUD
# =============================================================================
class CRUDBrewery(CRUDBase[beer_models.Brewery, beer_schemas.BreweryCreate, beer_schemas.BreweryUpdate]):
    def __init__(self):
        super().__init__(model=beer_models.Brewery, order_by=("name",))

    async def before_delete(self, db: AsyncSession, db_obj: beer_models.Brewery) -> None:
        """양조장의 맥주와 그 메뉴 카테고리 연결을 함께 삭제합니다."""
        brewery_beers = select(Beer.id).where(Beer.brewery_id == db_obj.id)
        await db.exec(
            sa_delete(beer_models.MenuCategoryBeer)
            .where(beer_models.MenuCategoryBeer.beer_id.in_(brewery_beers))
        )
        await db.exec(sa_delete(Beer).where(Beer.brewery_id == db_obj.id))
        logger.info("Deleted beers of brewery %s", db_obj.id)


brewery = CRUDBrewery()


# =============================================================================
# 5. 맥주 CRUD
# =============================================================================
class CRUDBeer(CRUDBase[beer_models.Beer, beer_schemas.BeerCreate, beer_schemas.BeerUpdate]):
    def __init__(self):
        super().__init__(model=beer_models.Beer, order_by=("name",))

    async def _check_references(self, db: AsyncSession, data: Dict[str, Any]) -> None:
        if "brewery_id" in data:
            if data["brewery_id"] is None:
                raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Beer brewery cannot be null")
            await ensure_reference(db, beer_models.Brewery, data["brewery_id"], entity="Brewery")
        await ensure_reference(db, Style, data.get("style_id"), entity="Style")

    async def create(self, db: AsyncSession, *, obj_in: beer_schemas.BeerCreate) -> beer_models.Beer:
        await self._check_references(db, obj_in.model_dump())
        return await super().create(db, obj_in=obj_in)

    async def update(
        self, db: AsyncSession, *, db_obj: beer_models.Beer, obj_in: Union[beer_schemas.BeerUpdate, Dict[str, Any]]
    ) -> beer_models.Beer:
        update_data = obj_in if isinstance(obj_in, dict) else obj_in.model_dump(exclude_unset=True)
        for required in ("name", "status"):
            if required in update_data and update_data[required] is None:
                raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Beer {required} cannot be null")
        await self._check_references(db, update_data)
        return await super().update(db, db_obj=db_obj, obj_in=update_data)

    async def before_delete(self, db: AsyncSession, db_obj: beer_models.Beer) -> None:
        await db.exec(
            sa_delete(beer_models.MenuCategoryBeer).where(beer_models.MenuCategoryBeer.beer_id == db_obj.id)
        )

    # -------------------------------------------------------------------------
    # 재고 필터
    # -------------------------------------------------------------------------
    def build_filter(
        self,
        *,
        style_ids: Optional[Iterable[int]] = None,
        brewery_ids: Optional[Iterable[int]] = None,
        menu_category_ids: Optional[Iterable[int]] = None,
    ) -> CatalogFilter:
        catalog_filter = CatalogFilter(base=beer_in_stock())
        catalog_filter.add_membership("style", Beer.style_id, style_ids)
        catalog_filter.add_membership("brewery", Beer.brewery_id, brewery_ids)
        category_ids = normalize_ids(menu_category_ids)
        if category_ids:
            catalog_filter.add(
                "menu_category",
                Beer.style_id.in_(select(Style.id).where(Style.menu_category_id.in_(category_ids))),
            )
        return catalog_filter

    @degrade_on_store_error(list)
    async def list_available(
        self,
        db: AsyncSession,
        *,
        style_ids: Optional[Iterable[int]] = None,
        brewery_ids: Optional[Iterable[int]] = None,
        menu_category_ids: Optional[Iterable[int]] = None,
    ) -> List[beer_schemas.BeerDetail]:
        """
        재고 있는 맥주를 이름 순으로 조회합니다.
        필터 차원 사이는 AND, 한 차원 안의 값은 OR로 결합합니다.
        """
        catalog_filter = self.build_filter(
            style_ids=style_ids, brewery_ids=brewery_ids, menu_category_ids=menu_category_ids
        )
        query = self._apply_order(catalog_filter.apply(select(Beer)))
        result = await db.exec(query)
        return await self.to_details(db, result.all())

    @degrade_on_store_error(beer_schemas.BeerFacets)
    async def available_facets(
        self,
        db: AsyncSession,
        *,
        style_ids: Optional[Iterable[int]] = None,
        brewery_ids: Optional[Iterable[int]] = None,
        menu_category_ids: Optional[Iterable[int]] = None,
    ) -> beer_schemas.BeerFacets:
        """
        각 차원별로, 나머지 차원의 필터를 적용했을 때 재고 있는 맥주가 남는 선택지 ID를 반환합니다.
        """
        catalog_filter = self.build_filter(
            style_ids=style_ids, brewery_ids=brewery_ids, menu_category_ids=menu_category_ids
        )

        style_query = catalog_filter.apply(
            select(Beer.style_id).distinct().where(Beer.style_id.is_not(None)), exclude="style"
        )
        brewery_query = catalog_filter.apply(select(Beer.brewery_id).distinct(), exclude="brewery")
        category_query = catalog_filter.apply(
            select(Style.menu_category_id).distinct()
            .join(Beer, Beer.style_id == Style.id)
            .where(Style.menu_category_id.is_not(None)),
            exclude="menu_category",
        )

        return beer_schemas.BeerFacets(
            style_ids=sorted((await db.exec(style_query)).all()),
            brewery_ids=sorted((await db.exec(brewery_query)).all()),
            menu_category_ids=sorted((await db.exec(category_query)).all()),
        )

    async def list_by_menu_category(self, db: AsyncSession, *, menu_category_id: int) -> List[beer_schemas.BeerDetail]:
        """메뉴 카테고리(스타일 경유)에 속한 재고 있는 맥주"""
        return await self.list_available(db, menu_category_ids=[menu_category_id])

    # -------------------------------------------------------------------------
    # 표시용 상세 정보
    # -------------------------------------------------------------------------
    async def to_details(self, db: AsyncSession, beers: Iterable[beer_models.Beer]) -> List[beer_schemas.BeerDetail]:
        """
        맥주 목록에 양조장/스타일/메뉴 카테고리 이름을 붙입니다. (참조 테이블별 한 번씩 조회)
        """
        beers = list(beers)
        brewery_ids = normalize_ids(beer.brewery_id for beer in beers)
        style_ids = normalize_ids(beer.style_id for beer in beers)

        brewery_names: Dict[int, str] = {}
        if brewery_ids:
            rows = await db.exec(
                select(beer_models.Brewery.id, beer_models.Brewery.name).where(beer_models.Brewery.id.in_(brewery_ids))
            )
            brewery_names = {row.id: row.name for row in rows.all()}

        styles: Dict[int, Any] = {}
        if style_ids:
            rows = await db.exec(
                select(Style.id, Style.name, Style.menu_category_id).where(Style.id.in_(style_ids))
            )
            styles = {row.id: row for row in rows.all()}

        category_ids = normalize_ids(row.menu_category_id for row in styles.values())
        category_names: Dict[int, str] = {}
        if category_ids:
            rows = await db.exec(
                select(beer_models.MenuCategory.id, beer_models.MenuCategory.name)
                .where(beer_models.MenuCategory.id.in_(category_ids))
            )
            category_names = {row.id: row.name for row in rows.all()}

        details = []
        for beer in beers:
            style_row = styles.get(beer.style_id)
            category_id = style_row.menu_category_id if style_row is not None else None
            details.append(
                beer_schemas.BeerDetail(
                    **beer.model_dump(),
                    brewery_name=brewery_names.get(beer.brewery_id),
                    style_name=style_row.name if style_row is not None else None,
                    menu_category_id=category_id,
                    menu_category_name=category_names.get(category_id),
                )
            )
        return details

    @degrade_on_store_error(list)
    async def list_details(self, db: AsyncSession, *, skip: int = 0, limit: Optional[int] = None) -> List[beer_schemas.BeerDetail]:
        beers = await self.get_multi(db, skip=skip, limit=limit)
        return await self.to_details(db, beers)

    @degrade_on_store_error(lambda: None)
    async def get_detail(self, db: AsyncSession, *, id: int) -> Optional[beer_schemas.BeerDetail]:
        beer = await db.get(Beer, id)
        if beer is None:
            return None
        return (await self.to_details(db, [beer]))[0]


beer = CRUDBeer()
