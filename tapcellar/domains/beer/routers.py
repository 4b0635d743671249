# tapcellar/domains/beer/routers.py

"""
'beer' 도메인의 API 엔드포인트를 정의하는 모듈입니다.

BJCP 분류, 스타일, 양조장, 맥주, 메뉴 카테고리의 CRUD와
재고 있는 맥주 조회(필터, facet), 메뉴 카테고리-맥주 연결 관리를 제공합니다.
조회는 공개, 변경은 curator 이상 권한이 필요합니다.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from tapcellar.core import dependencies as deps
from tapcellar.domains.usr.models import User as UsrUser

from tapcellar.domains.beer import crud as beer_crud
from tapcellar.domains.beer import schemas as beer_schemas

router = APIRouter(
    tags=["Beer Catalog (맥주 카탈로그)"],
    responses={404: {"description": "Not found"}},
)


# =============================================================================
# 1. BJCP 분류 엔드포인트
# =============================================================================
@router.post("/bjcp_categories/", response_model=beer_schemas.BJCPCategoryRead, status_code=status.HTTP_201_CREATED, summary="BJCP 분류 생성")
async def create_bjcp_category(
    category_create: beer_schemas.BJCPCategoryCreate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_curator_user)
):
    return await beer_crud.bjcp_category.create(db=db, obj_in=category_create)


@router.get("/bjcp_categories/", response_model=List[beer_schemas.BJCPCategoryRead], summary="BJCP 분류 목록")
async def read_bjcp_categories(
    skip: int = 0,
    limit: Optional[int] = None,
    db: AsyncSession = Depends(deps.get_db_session)
):
    return await beer_crud.bjcp_category.get_multi(db, skip=skip, limit=limit)


@router.get("/bjcp_categories/{category_id}", response_model=beer_schemas.BJCPCategoryRead, summary="특정 BJCP 분류 조회")
async def read_bjcp_category(category_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    db_category = await beer_crud.bjcp_category.get(db, id=category_id)
    if db_category is None:
        raise HTTPException(status_code=404, detail="BJCP category not found")
    return db_category


@router.put("/bjcp_categories/{category_id}", response_model=beer_schemas.BJCPCategoryRead, summary="BJCP 분류 업데이트")
async def update_bjcp_category(
    category_id: int,
    category_update: beer_schemas.BJCPCategoryUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_curator_user)
):
    db_category = await beer_crud.bjcp_category.get_for_update(db, id=category_id)
    if db_category is None:
        raise HTTPException(status_code=404, detail="BJCP category not found")
    return await beer_crud.bjcp_category.update(db=db, db_obj=db_category, obj_in=category_update)


@router.delete("/bjcp_categories/{category_id}", status_code=status.HTTP_204_NO_CONTENT, summary="BJCP 분류 삭제")
async def delete_bjcp_category(
    category_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_curator_user)
):
    """BJCP 분류를 삭제합니다. 이 분류를 참조하던 스타일은 유지되고 bjcp_id만 비워집니다."""
    if await beer_crud.bjcp_category.delete(db, id=category_id) is None:
        raise HTTPException(status_code=404, detail="BJCP category not found")


# =============================================================================
# 2. 스타일 엔드포인트
# =============================================================================
@router.post("/styles/", response_model=beer_schemas.StyleRead, status_code=status.HTTP_201_CREATED, summary="스타일 생성")
async def create_style(
    style_create: beer_schemas.StyleCreate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_curator_user)
):
    return await beer_crud.style.create(db=db, obj_in=style_create)


@router.get("/styles/", response_model=List[beer_schemas.StyleRead], summary="스타일 목록")
async def read_styles(
    menu_category_id: Optional[int] = Query(None, description="메뉴 카테고리로 필터링"),
    skip: int = 0,
    limit: Optional[int] = None,
    db: AsyncSession = Depends(deps.get_db_session)
):
    if menu_category_id is not None:
        return await beer_crud.style.get_multi(db, skip=skip, limit=limit, menu_category_id=menu_category_id)
    return await beer_crud.style.get_multi(db, skip=skip, limit=limit)


@router.get("/styles/{style_id}", response_model=beer_schemas.StyleRead, summary="특정 스타일 조회")
async def read_style(style_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    db_style = await beer_crud.style.get(db, id=style_id)
    if db_style is None:
        raise HTTPException(status_code=404, detail="Style not found")
    return db_style


@router.put("/styles/{style_id}", response_model=beer_schemas.StyleRead, summary="스타일 업데이트")
async def update_style(
    style_id: int,
    style_update: beer_schemas.StyleUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_curator_user)
):
    db_style = await beer_crud.style.get_for_update(db, id=style_id)
    if db_style is None:
        raise HTTPException(status_code=404, detail="Style not found")
    return await beer_crud.style.update(db=db, db_obj=db_style, obj_in=style_update)


@router.delete("/styles/{style_id}", status_code=status.HTTP_204_NO_CONTENT, summary="스타일 삭제")
async def delete_style(
    style_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_curator_user)
):
    """스타일을 삭제합니다. 이 스타일의 맥주는 유지되고 style_id만 비워집니다."""
    if await beer_crud.style.delete(db, id=style_id) is None:
        raise HTTPException(status_code=404, detail="Style not found")


# =============================================================================
# 3. 양조장 엔드포인트
# =============================================================================
@router.post("/breweries/", response_model=beer_schemas.BreweryRead, status_code=status.HTTP_201_CREATED, summary="양조장 생성")
async def create_brewery(
    brewery_create: beer_schemas.BreweryCreate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_curator_user)
):
    return await beer_crud.brewery.create(db=db, obj_in=brewery_create)


@router.get("/breweries/", response_model=List[beer_schemas.BreweryRead], summary="양조장 목록")
async def read_breweries(
    skip: int = 0,
    limit: Optional[int] = None,
    db: AsyncSession = Depends(deps.get_db_session)
):
    return await beer_crud.brewery.get_multi(db, skip=skip, limit=limit)


@router.get("/breweries/{brewery_id}", response_model=beer_schemas.BreweryRead, summary="특정 양조장 조회")
async def read_brewery(brewery_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    db_brewery = await beer_crud.brewery.get(db, id=brewery_id)
    if db_brewery is None:
        raise HTTPException(status_code=404, detail="Brewery not found")
    return db_brewery


@router.put("/breweries/{brewery_id}", response_model=beer_schemas.BreweryRead, summary="양조장 업데이트")
async def update_brewery(
    brewery_id: int,
    brewery_update: beer_schemas.BreweryUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_curator_user)
):
    db_brewery = await beer_crud.brewery.get_for_update(db, id=brewery_id)
    if db_brewery is None:
        raise HTTPException(status_code=404, detail="Brewery not found")
    return await beer_crud.brewery.update(db=db, db_obj=db_brewery, obj_in=brewery_update)


@router.delete("/breweries/{brewery_id}", status_code=status.HTTP_204_NO_CONTENT, summary="양조장 삭제")
async def delete_brewery(
    brewery_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_curator_user)
):
    """양조장을 삭제합니다. 이 양조장의 맥주도 함께 삭제됩니다."""
    if await beer_crud.brewery.delete(db, id=brewery_id) is None:
        raise HTTPException(status_code=404, detail="Brewery not found")


# =============================================================================
# 4. 맥주 엔드포인트
# =============================================================================
@router.post("/beers/", response_model=beer_schemas.BeerRead, status_code=status.HTTP_201_CREATED, summary="맥주 생성")
async def create_beer(
    beer_create: beer_schemas.BeerCreate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_curator_user)
):
    """
    새 맥주를 생성합니다. (curator 권한 필요)
    - `brewery_id`: 존재하는 양조장 ID (필수)
    - `status`: on_tap, bottle_can, out (기본값 out)
    """
    return await beer_crud.beer.create(db=db, obj_in=beer_create)


@router.get("/beers/", response_model=List[beer_schemas.BeerDetail], summary="맥주 목록 (재고 무관)")
async def read_beers(
    skip: int = 0,
    limit: Optional[int] = None,
    db: AsyncSession = Depends(deps.get_db_session)
):
    return await beer_crud.beer.list_details(db, skip=skip, limit=limit)


@router.get("/beers/available", response_model=List[beer_schemas.BeerDetail], summary="재고 있는 맥주 조회")
async def read_available_beers(
    style_ids: List[int] = Query(default=[], description="스타일 ID (OR)"),
    brewery_ids: List[int] = Query(default=[], description="양조장 ID (OR)"),
    menu_category_ids: List[int] = Query(default=[], description="메뉴 카테고리 ID (OR)"),
    db: AsyncSession = Depends(deps.get_db_session)
):
    """
    status가 out이 아닌 맥주를 이름 순으로 조회합니다.
    서로 다른 필터는 AND로, 같은 필터의 여러 값은 OR로 결합합니다.
    """
    return await beer_crud.beer.list_available(
        db, style_ids=style_ids, brewery_ids=brewery_ids, menu_category_ids=menu_category_ids
    )


@router.get("/beers/available/facets", response_model=beer_schemas.BeerFacets, summary="재고 맥주 필터 선택지")
async def read_available_beer_facets(
    style_ids: List[int] = Query(default=[]),
    brewery_ids: List[int] = Query(default=[]),
    menu_category_ids: List[int] = Query(default=[]),
    db: AsyncSession = Depends(deps.get_db_session)
):
    return await beer_crud.beer.available_facets(
        db, style_ids=style_ids, brewery_ids=brewery_ids, menu_category_ids=menu_category_ids
    )


@router.get("/beers/{beer_id}", response_model=beer_schemas.BeerDetail, summary="특정 맥주 조회")
async def read_beer(beer_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    db_beer = await beer_crud.beer.get_detail(db, id=beer_id)
    if db_beer is None:
        raise HTTPException(status_code=404, detail="Beer not found")
    return db_beer


@router.put("/beers/{beer_id}", response_model=beer_schemas.BeerRead, summary="맥주 업데이트")
async def update_beer(
    beer_id: int,
    beer_update: beer_schemas.BeerUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_curator_user)
):
    db_beer = await beer_crud.beer.get_for_update(db, id=beer_id)
    if db_beer is None:
        raise HTTPException(status_code=404, detail="Beer not found")
    return await beer_crud.beer.update(db=db, db_obj=db_beer, obj_in=beer_update)


@router.delete("/beers/{beer_id}", status_code=status.HTTP_204_NO_CONTENT, summary="맥주 삭제")
async def delete_beer(
    beer_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_curator_user)
):
    if await beer_crud.beer.delete(db, id=beer_id) is None:
        raise HTTPException(status_code=404, detail="Beer not found")


# =============================================================================
# 5. 메뉴 카테고리 엔드포인트
# =============================================================================
@router.post("/menu_categories/", response_model=beer_schemas.MenuCategoryRead, status_code=status.HTTP_201_CREATED, summary="메뉴 카테고리 생성")
async def create_menu_category(
    category_create: beer_schemas.MenuCategoryCreate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_curator_user)
):
    return await beer_crud.menu_category.create(db=db, obj_in=category_create)


@router.get("/menu_categories/", response_model=List[beer_schemas.MenuCategoryRead], summary="메뉴 카테고리 목록")
async def read_menu_categories(
    skip: int = 0,
    limit: Optional[int] = None,
    db: AsyncSession = Depends(deps.get_db_session)
):
    return await beer_crud.menu_category.get_multi(db, skip=skip, limit=limit)


@router.get("/menu_categories/available", response_model=List[beer_schemas.MenuCategoryRead], summary="재고 있는 메뉴 카테고리")
async def read_available_menu_categories(db: AsyncSession = Depends(deps.get_db_session)):
    """재고 있는 맥주가 하나 이상 있는 메뉴 카테고리만 반환합니다."""
    return await beer_crud.menu_category.list_available(db)


@router.get("/menu_categories/{category_id}", response_model=beer_schemas.MenuCategoryRead, summary="특정 메뉴 카테고리 조회")
async def read_menu_category(category_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    db_category = await beer_crud.menu_category.get(db, id=category_id)
    if db_category is None:
        raise HTTPException(status_code=404, detail="Menu category not found")
    return db_category


@router.get("/menu_categories/{category_id}/beers", response_model=List[beer_schemas.BeerDetail], summary="메뉴 카테고리의 재고 맥주")
async def read_menu_category_beers(category_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    """스타일을 통해 이 메뉴 카테고리에 속한 재고 있는 맥주를 반환합니다."""
    db_category = await beer_crud.menu_category.get(db, id=category_id)
    if db_category is None:
        raise HTTPException(status_code=404, detail="Menu category not found")
    return await beer_crud.beer.list_by_menu_category(db, menu_category_id=category_id)


@router.put("/menu_categories/{category_id}", response_model=beer_schemas.MenuCategoryRead, summary="메뉴 카테고리 업데이트")
async def update_menu_category(
    category_id: int,
    category_update: beer_schemas.MenuCategoryUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_curator_user)
):
    db_category = await beer_crud.menu_category.get_for_update(db, id=category_id)
    if db_category is None:
        raise HTTPException(status_code=404, detail="Menu category not found")
    return await beer_crud.menu_category.update(db=db, db_obj=db_category, obj_in=category_update)


@router.delete("/menu_categories/{category_id}", status_code=status.HTTP_204_NO_CONTENT, summary="메뉴 카테고리 삭제")
async def delete_menu_category(
    category_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_curator_user)
):
    """메뉴 카테고리를 삭제합니다. 이 카테고리를 참조하던 스타일은 유지되고 참조만 비워집니다."""
    if await beer_crud.menu_category.delete(db, id=category_id) is None:
        raise HTTPException(status_code=404, detail="Menu category not found")


# --- 메뉴 카테고리 <-> 맥주 연결 ---
@router.get("/menu_categories/{category_id}/beer_links/", response_model=List[beer_schemas.MenuCategoryBeerRead], summary="메뉴 카테고리 맥주 연결 목록")
async def read_menu_category_beer_links(category_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    db_category = await beer_crud.menu_category.get(db, id=category_id)
    if db_category is None:
        raise HTTPException(status_code=404, detail="Menu category not found")
    return await beer_crud.menu_category.get_beer_links(db, menu_category_id=category_id)


@router.post("/menu_categories/{category_id}/beer_links/", response_model=beer_schemas.MenuCategoryBeerRead, status_code=status.HTTP_201_CREATED, summary="메뉴 카테고리에 맥주 연결")
async def create_menu_category_beer_link(
    category_id: int,
    link_create: beer_schemas.MenuCategoryBeerCreate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_curator_user)
):
    db_category = await beer_crud.menu_category.get_for_update(db, id=category_id)
    if db_category is None:
        raise HTTPException(status_code=404, detail="Menu category not found")
    return await beer_crud.menu_category.add_beer_link(db, menu_category_id=category_id, beer_id=link_create.beer_id)


@router.delete("/menu_categories/{category_id}/beer_links/{beer_id}", status_code=status.HTTP_204_NO_CONTENT, summary="메뉴 카테고리 맥주 연결 해제")
async def delete_menu_category_beer_link(
    category_id: int,
    beer_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_curator_user)
):
    removed = await beer_crud.menu_category.remove_beer_link(db, menu_category_id=category_id, beer_id=beer_id)
    if not removed:
        raise HTTPException(status_code=404, detail="Menu category link not found")
