# tapcellar/domains/wine/schemas.py

"""
'wine' 도메인의 Pydantic 스키마를 정의하는 모듈입니다.

와이너리, 품종, 와인 데이터에 대한 API 요청(생성, 업데이트) 및 응답(조회) 모델과
표시용 상세 정보(WineDetail), 재고 필터 선택지(WineFacets)를 포함합니다.
"""

from typing import List, Optional
from datetime import datetime
from pydantic import Field
from sqlmodel import SQLModel


# =============================================================================
# 1. 와이너리 스키마
# =============================================================================
class WineryCreate(SQLModel):
    name: str = Field(..., min_length=1, max_length=255, description="와이너리 명칭")
    location: Optional[str] = Field(None, max_length=255, description="소재지 (자유 텍스트)")
    location_id: Optional[int] = Field(None, description="산지 ID")


class WineryUpdate(SQLModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    location: Optional[str] = Field(None, max_length=255)
    location_id: Optional[int] = None


class WineryRead(WineryCreate):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# =============================================================================
# 2. 품종 스키마
# =============================================================================
class VarietalCreate(SQLModel):
    name: str = Field(..., min_length=1, max_length=255, description="품종 명칭 (고유)")


class VarietalUpdate(SQLModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)


class VarietalRead(VarietalCreate):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class VarietalRef(SQLModel):
    id: int
    name: str


# =============================================================================
# 3. 와인 스키마
# =============================================================================
class WineFields(SQLModel):
    label: str = Field(..., min_length=1, max_length=255, description="와인 라벨명")
    winery_id: int = Field(..., description="와이너리 ID")
    vintage: Optional[int] = Field(None, description="빈티지 (연도)")
    location_id: Optional[int] = Field(None, description="산지 ID")
    refrigerated: int = Field(0, ge=0, description="냉장 보관 수량")
    cellared: int = Field(0, ge=0, description="셀러 보관 수량")
    description: Optional[str] = Field(None, description="설명")


class WineCreate(WineFields):
    """
    새 와인을 생성하기 위한 모델입니다.
    `varietal_ids`로 품종을 함께 연결합니다.
    """
    varietal_ids: List[int] = Field(default_factory=list, description="품종 ID 목록")


class WineUpdate(SQLModel):
    """
    기존 와인을 부분 업데이트하기 위한 모델입니다.
    `varietal_ids`를 보내면 품종 연결 전체를 그 목록으로 교체합니다. (생략 시 유지)
    """
    label: Optional[str] = Field(None, min_length=1, max_length=255)
    winery_id: Optional[int] = None
    vintage: Optional[int] = None
    location_id: Optional[int] = None
    refrigerated: Optional[int] = Field(None, ge=0)
    cellared: Optional[int] = Field(None, ge=0)
    description: Optional[str] = None
    varietal_ids: Optional[List[int]] = None


class WineRead(WineFields):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class WineDetail(WineRead):
    """와인 정보 + 와이너리 이름, 산지 이름/전체 경로, 품종"""
    winery_name: Optional[str] = None
    location_name: Optional[str] = None
    location_path: Optional[str] = None
    varietals: List[VarietalRef] = Field(default_factory=list)
    varietal_names: List[str] = Field(default_factory=list)


class WineFacets(SQLModel):
    """다른 필터 조건을 적용했을 때 재고가 있는 선택지 ID (산지는 상위 산지 포함)"""
    location_ids: List[int] = Field(default_factory=list)
    varietal_ids: List[int] = Field(default_factory=list)
    winery_ids: List[int] = Field(default_factory=list)
