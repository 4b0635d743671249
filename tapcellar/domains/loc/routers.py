# tapcellar/domains/loc/routers.py

"""
'loc' 도메인의 API 엔드포인트를 정의하는 모듈입니다.

산지(국가 -> 지역 -> 포도밭) CRUD와 계층 조회(경로 목록, 자식 목록, 하위 ID 집합)를 제공합니다.
조회는 공개, 변경은 curator 이상 권한이 필요합니다.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from tapcellar.core import dependencies as deps
from tapcellar.domains.usr.models import User as UsrUser

from tapcellar.domains.loc import crud as loc_crud
from tapcellar.domains.loc import models as loc_models
from tapcellar.domains.loc import schemas as loc_schemas

router = APIRouter(
    tags=["Location Management (산지 관리)"],
    responses={404: {"description": "Not found"}},
)


@router.post("/locations/", response_model=loc_schemas.LocationRead, status_code=status.HTTP_201_CREATED, summary="새 산지 생성")
async def create_location(
    location_create: loc_schemas.LocationCreate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_curator_user)
):
    """
    새로운 산지를 생성합니다. (curator 권한 필요)
    - `kind`: country, area, vineyard
    - `parent_id`: 상위 산지 ID (부모는 정확히 한 단계 위 유형)
    """
    return await loc_crud.location.create(db=db, obj_in=location_create)


@router.get("/locations/", response_model=List[loc_schemas.LocationRead], summary="산지 목록 조회")
async def read_locations(
    kind: Optional[loc_models.LocationKind] = Query(None, description="계층 유형으로 필터링"),
    skip: int = 0,
    limit: Optional[int] = None,
    db: AsyncSession = Depends(deps.get_db_session)
):
    """
    산지 목록을 이름 순으로 조회합니다.
    - `kind`: 지정 시 해당 유형만 조회
    """
    if kind is not None:
        return await loc_crud.location.get_multi(db, skip=skip, limit=limit, kind=kind)
    return await loc_crud.location.get_multi(db, skip=skip, limit=limit)


@router.get("/locations/paths", response_model=List[loc_schemas.LocationWithPath], summary="전체 경로 포함 산지 목록")
async def read_locations_with_paths(db: AsyncSession = Depends(deps.get_db_session)):
    """모든 산지를 "France → Bordeaux → Pauillac" 형태의 경로와 함께 경로 순으로 반환합니다."""
    return await loc_crud.location.list_with_paths(db)


@router.get("/locations/by-parent/", response_model=List[loc_schemas.LocationRead], summary="자식 산지 목록")
async def read_locations_by_parent(
    parent_id: Optional[int] = Query(None, description="상위 산지 ID (생략 시 최상위 산지)"),
    db: AsyncSession = Depends(deps.get_db_session)
):
    return await loc_crud.location.get_by_parent(db, parent_id=parent_id)


@router.get("/locations/{location_id}", response_model=loc_schemas.LocationRead, summary="특정 산지 조회")
async def read_location(
    location_id: int,
    db: AsyncSession = Depends(deps.get_db_session)
):
    db_location = await loc_crud.location.get(db, id=location_id)
    if db_location is None:
        raise HTTPException(status_code=404, detail="Location not found")
    return db_location


@router.get("/locations/{location_id}/descendants", response_model=loc_schemas.LocationDescendants, summary="하위 산지 ID 집합")
async def read_location_descendants(
    location_id: int,
    db: AsyncSession = Depends(deps.get_db_session)
):
    """해당 산지와 모든 하위 산지의 ID를 반환합니다."""
    db_location = await loc_crud.location.get(db, id=location_id)
    if db_location is None:
        raise HTTPException(status_code=404, detail="Location not found")
    descendant_ids = await loc_crud.location.get_descendant_ids(db, id=location_id)
    return {"id": location_id, "descendant_ids": descendant_ids}


@router.put("/locations/{location_id}", response_model=loc_schemas.LocationRead, summary="산지 정보 업데이트")
async def update_location(
    location_id: int,
    location_update: loc_schemas.LocationUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_curator_user)
):
    """
    산지 정보를 부분 업데이트합니다. (curator 권한 필요)
    부모를 자기 자신이나 하위 산지로 지정할 수 없습니다.
    """
    db_location = await loc_crud.location.get_for_update(db, id=location_id)
    if db_location is None:
        raise HTTPException(status_code=404, detail="Location not found")
    return await loc_crud.location.update(db=db, db_obj=db_location, obj_in=location_update)


@router.delete("/locations/{location_id}", status_code=status.HTTP_204_NO_CONTENT, summary="산지 삭제")
async def delete_location(
    location_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: UsrUser = Depends(deps.get_current_curator_user)
):
    """
    산지를 삭제합니다. (curator 권한 필요)
    자식 산지는 최상위로 이동하고, 이 산지를 참조하던 와인/와이너리의 산지는 비워집니다.
    """
    deleted = await loc_crud.location.delete(db, id=location_id)
    if deleted is None:
        raise HTTPException(status_code=404, detail="Location not found")
