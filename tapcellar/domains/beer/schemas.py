# tapcellar/domains/beer/schemas.py

"""
'beer' 도메인의 Pydantic 스키마를 정의하는 모듈입니다.

BJCP 분류, 메뉴 카테고리, 스타일, 양조장, 맥주 데이터에 대한
API 요청(생성, 업데이트) 및 응답(조회) 모델과 재고 필터/facet 응답 모델을 포함합니다.
"""

from typing import List, Optional
from datetime import datetime
from pydantic import Field
from sqlmodel import SQLModel

from .models import BeerStatus


# =============================================================================
# 1. BJCP 분류 스키마
# =============================================================================
class BJCPCategoryCreate(SQLModel):
    label: str = Field(..., min_length=1, max_length=50, description="BJCP 코드 (예: 21A)")
    name: str = Field(..., min_length=1, max_length=255, description="분류 명칭")


class BJCPCategoryUpdate(SQLModel):
    label: Optional[str] = Field(None, min_length=1, max_length=50)
    name: Optional[str] = Field(None, min_length=1, max_length=255)


class BJCPCategoryRead(BJCPCategoryCreate):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# =============================================================================
# 2. 메뉴 카테고리 스키마
# =============================================================================
class MenuCategoryCreate(SQLModel):
    name: str = Field(..., min_length=1, max_length=255, description="메뉴 카테고리 명칭")
    description: Optional[str] = Field(None, description="설명")


class MenuCategoryUpdate(SQLModel):
    """description은 빈 문자열이나 null로 지울 수 있습니다."""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None


class MenuCategoryRead(MenuCategoryCreate):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class MenuCategoryBeerCreate(SQLModel):
    beer_id: int = Field(..., description="연결할 맥주 ID")


class MenuCategoryBeerRead(SQLModel):
    menu_category_id: int
    beer_id: int


# =============================================================================
# 3. 스타일 스키마
# =============================================================================
class StyleCreate(SQLModel):
    name: str = Field(..., min_length=1, max_length=255, description="스타일 명칭")
    description: Optional[str] = Field(None, description="설명")
    bjcp_id: Optional[int] = Field(None, description="BJCP 분류 ID")
    bjcp_link: Optional[str] = Field(None, max_length=500, description="BJCP 가이드라인 링크")
    menu_category_id: Optional[int] = Field(None, description="메뉴 카테고리 ID")


class StyleUpdate(SQLModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    bjcp_id: Optional[int] = None
    bjcp_link: Optional[str] = Field(None, max_length=500)
    menu_category_id: Optional[int] = None


class StyleRead(StyleCreate):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# =============================================================================
# 4. 양조장 스키마
# =============================================================================
class BreweryCreate(SQLModel):
    name: str = Field(..., min_length=1, max_length=255, description="양조장 명칭")
    location: Optional[str] = Field(None, max_length=255, description="소재지")


class BreweryUpdate(SQLModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    location: Optional[str] = Field(None, max_length=255)


class BreweryRead(BreweryCreate):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# =============================================================================
# 5. 맥주 스키마
# =============================================================================
class BeerCreate(SQLModel):
    name: str = Field(..., min_length=1, max_length=255, description="맥주 명칭")
    description: Optional[str] = Field(None, description="설명")
    brewery_id: int = Field(..., description="양조장 ID")
    style_id: Optional[int] = Field(None, description="스타일 ID")
    abv: Optional[float] = Field(None, ge=0, lt=100, description="알코올 도수 (%)")
    ibu: Optional[int] = Field(None, ge=0, description="쓴맛 지수 (IBU)")
    status: BeerStatus = Field(BeerStatus.OUT, description="재고 상태 (on_tap, bottle_can, out)")


class BeerUpdate(SQLModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    brewery_id: Optional[int] = None
    style_id: Optional[int] = None
    abv: Optional[float] = Field(None, ge=0, lt=100)
    ibu: Optional[int] = Field(None, ge=0)
    status: Optional[BeerStatus] = None


class BeerRead(BeerCreate):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class BeerDetail(BeerRead):
    """맥주 정보 + 양조장/스타일/메뉴 카테고리 표시 정보"""
    brewery_name: Optional[str] = None
    style_name: Optional[str] = None
    menu_category_id: Optional[int] = None
    menu_category_name: Optional[str] = None


class BeerFacets(SQLModel):
    """다른 필터 조건을 적용했을 때 재고가 있는 선택지 ID"""
    style_ids: List[int] = Field(default_factory=list)
    brewery_ids: List[int] = Field(default_factory=list)
    menu_category_ids: List[int] = Field(default_factory=list)
