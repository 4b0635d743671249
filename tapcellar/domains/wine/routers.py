# tapcellar/domains/wine/routers.py

"""
'wine' 도메인의 API 엔드포인트를 정의하는 모듈입니다.

와이너리, 품종, 와인 CRUD와 재고 있는 와인 조회(산지/품종/와이너리 필터, facet)를 제공합니다.
조회는 공개, 변경은 curator 이상 권한이 필요합니다.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from tapcellar.core import dependencies as deps
from tapcellar.domains.usr.models import User as UsrUser

from tapcellar.domains.wine import crud as wine_crud
from tapcellar.domains.wine import schemas as wine_schemas

router = APIRouter(
    tags=["Wine Catalog (와인 카탈로그)"],
    responses={404: {"description": "Not found"}},
)


# =============================================================================
# 1. 와이너리 엔드포인트
# =============================================================================
@router.post("/wineries/", response_model=wine_schemas.WineryRead, status_code=status.HTTP_201_CREATED, summary="와이너리 생성")
async def create_winery(
    winery_create: wine_schemas.WineryCreate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_curator_user)
):
    return await wine_crud.winery.create(db=db, obj_in=winery_create)


@router.get("/wineries/", response_model=List[wine_schemas.WineryRead], summary="와이너리 목록")
async def read_wineries(
    skip: int = 0,
    limit: Optional[int] = None,
    db: AsyncSession = Depends(deps.get_db_session)
):
    return await wine_crud.winery.get_multi(db, skip=skip, limit=limit)


@router.get("/wineries/{winery_id}", response_model=wine_schemas.WineryRead, summary="특정 와이너리 조회")
async def read_winery(winery_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    db_winery = await wine_crud.winery.get(db, id=winery_id)
    if db_winery is None:
        raise HTTPException(status_code=404, detail="Winery not found")
    return db_winery


@router.put("/wineries/{winery_id}", response_model=wine_schemas.WineryRead, summary="와이너리 업데이트")
async def update_winery(
    winery_id: int,
    winery_update: wine_schemas.WineryUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_curator_user)
):
    db_winery = await wine_crud.winery.get_for_update(db, id=winery_id)
    if db_winery is None:
        raise HTTPException(status_code=404, detail="Winery not found")
    return await wine_crud.winery.update(db=db, db_obj=db_winery, obj_in=winery_update)


@router.delete("/wineries/{winery_id}", status_code=status.HTTP_204_NO_CONTENT, summary="와이너리 삭제")
async def delete_winery(
    winery_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_curator_user)
):
    """와이너리를 삭제합니다. 이 와이너리의 와인도 함께 삭제됩니다."""
    if await wine_crud.winery.delete(db, id=winery_id) is None:
        raise HTTPException(status_code=404, detail="Winery not found")


# =============================================================================
# 2. 품종 엔드포인트
# =============================================================================
@router.post("/varietals/", response_model=wine_schemas.VarietalRead, status_code=status.HTTP_201_CREATED, summary="품종 생성")
async def create_varietal(
    varietal_create: wine_schemas.VarietalCreate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_curator_user)
):
    return await wine_crud.varietal.create(db=db, obj_in=varietal_create)


@router.get("/varietals/", response_model=List[wine_schemas.VarietalRead], summary="품종 목록")
async def read_varietals(
    skip: int = 0,
    limit: Optional[int] = None,
    db: AsyncSession = Depends(deps.get_db_session)
):
    return await wine_crud.varietal.get_multi(db, skip=skip, limit=limit)


@router.get("/varietals/{varietal_id}", response_model=wine_schemas.VarietalRead, summary="특정 품종 조회")
async def read_varietal(varietal_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    db_varietal = await wine_crud.varietal.get(db, id=varietal_id)
    if db_varietal is None:
        raise HTTPException(status_code=404, detail="Varietal not found")
    return db_varietal


@router.put("/varietals/{varietal_id}", response_model=wine_schemas.VarietalRead, summary="품종 업데이트")
async def update_varietal(
    varietal_id: int,
    varietal_update: wine_schemas.VarietalUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_curator_user)
):
    db_varietal = await wine_crud.varietal.get_for_update(db, id=varietal_id)
    if db_varietal is None:
        raise HTTPException(status_code=404, detail="Varietal not found")
    return await wine_crud.varietal.update(db=db, db_obj=db_varietal, obj_in=varietal_update)


@router.delete("/varietals/{varietal_id}", status_code=status.HTTP_204_NO_CONTENT, summary="품종 삭제")
async def delete_varietal(
    varietal_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_curator_user)
):
    if await wine_crud.varietal.delete(db, id=varietal_id) is None:
        raise HTTPException(status_code=404, detail="Varietal not found")


# =============================================================================
# 3. 와인 엔드포인트
# =============================================================================
@router.post("/wines/", response_model=wine_schemas.WineDetail, status_code=status.HTTP_201_CREATED, summary="와인 생성")
async def create_wine(
    wine_create: wine_schemas.WineCreate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_curator_user)
):
    """
    새 와인을 생성합니다. (curator 권한 필요)
    - `winery_id`: 존재하는 와이너리 ID (필수)
    - `varietal_ids`: 연결할 품종 ID 목록
    """
    db_wine = await wine_crud.wine.create(db=db, obj_in=wine_create)
    return await wine_crud.wine.get_wine_with_associations(db, id=db_wine.id)


@router.get("/wines/", response_model=List[wine_schemas.WineDetail], summary="와인 목록 (재고 무관)")
async def read_wines(
    skip: int = 0,
    limit: Optional[int] = None,
    db: AsyncSession = Depends(deps.get_db_session)
):
    return await wine_crud.wine.list_details(db, skip=skip, limit=limit)


@router.get("/wines/available", response_model=List[wine_schemas.WineDetail], summary="재고 있는 와인 조회")
async def read_available_wines(
    location_ids: List[int] = Query(default=[], description="산지 ID (하위 산지 포함, OR)"),
    varietal_ids: List[int] = Query(default=[], description="품종 ID (OR)"),
    winery_ids: List[int] = Query(default=[], description="와이너리 ID (OR)"),
    db: AsyncSession = Depends(deps.get_db_session)
):
    """
    냉장 또는 셀러 수량이 있는 와인을 라벨 순으로 조회합니다.
    서로 다른 필터는 AND로, 같은 필터의 여러 값은 OR로 결합합니다.
    """
    return await wine_crud.wine.list_available(
        db, location_ids=location_ids, varietal_ids=varietal_ids, winery_ids=winery_ids
    )


@router.get("/wines/available/facets", response_model=wine_schemas.WineFacets, summary="재고 와인 필터 선택지")
async def read_available_wine_facets(
    location_ids: List[int] = Query(default=[]),
    varietal_ids: List[int] = Query(default=[]),
    winery_ids: List[int] = Query(default=[]),
    db: AsyncSession = Depends(deps.get_db_session)
):
    return await wine_crud.wine.available_facets(
        db, location_ids=location_ids, varietal_ids=varietal_ids, winery_ids=winery_ids
    )


@router.get("/wines/{wine_id}", response_model=wine_schemas.WineDetail, summary="특정 와인 조회")
async def read_wine(wine_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    db_wine = await wine_crud.wine.get_wine_with_associations(db, id=wine_id)
    if db_wine is None:
        raise HTTPException(status_code=404, detail="Wine not found")
    return db_wine


@router.put("/wines/{wine_id}", response_model=wine_schemas.WineDetail, summary="와인 업데이트")
async def update_wine(
    wine_id: int,
    wine_update: wine_schemas.WineUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_curator_user)
):
    """
    와인을 부분 업데이트합니다. (curator 권한 필요)
    `varietal_ids`를 보내면 품종 연결 전체를 교체합니다.
    """
    db_wine = await wine_crud.wine.get_for_update(db, id=wine_id)
    if db_wine is None:
        raise HTTPException(status_code=404, detail="Wine not found")
    await wine_crud.wine.update(db=db, db_obj=db_wine, obj_in=wine_update)
    return await wine_crud.wine.get_wine_with_associations(db, id=wine_id)


@router.delete("/wines/{wine_id}", status_code=status.HTTP_204_NO_CONTENT, summary="와인 삭제")
async def delete_wine(
    wine_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_curator_user)
):
    if await wine_crud.wine.delete(db, id=wine_id) is None:
        raise HTTPException(status_code=404, detail="Wine not found")
