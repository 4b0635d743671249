# tapcellar/domains/beer/models.py

"""
'beer' 도메인의 데이터베이스 ORM 모델을 정의하는 모듈입니다.

- BJCP 분류(bjcp_categories) -> 스타일(styles) <- 메뉴 카테고리(menu_categories)
- 양조장(breweries) -> 맥주(beers) -> 스타일(styles)
- 메뉴 카테고리와 맥주의 직접 연결(menu_category_beers)은 큐레이터가 관리합니다.
"""

from typing import Optional
from datetime import datetime, UTC
from enum import Enum
from sqlmodel import Field, SQLModel, Column
from sqlalchemy import ForeignKey, Integer, Numeric
from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP


class BeerStatus(str, Enum):
    """맥주 재고 상태 (OUT이 아니면 판매 가능)"""
    ON_TAP = "on_tap"
    BOTTLE_CAN = "bottle_can"
    OUT = "out"


# =============================================================================
# 1. bjcp_categories 테이블 모델
# =============================================================================
class BJCPCategoryBase(SQLModel):
    id: Optional[int] = Field(default=None, primary_key=True, description="BJCP 분류 고유 ID")
    label: str = Field(max_length=50, description="BJCP 코드 (예: 21A)")
    name: str = Field(max_length=255, description="분류 명칭 (예: American IPA)")

    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
        description="레코드 생성 일시"
    )
    updated_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()),
        description="레코드 마지막 업데이트 일시"
    )


class BJCPCategory(BJCPCategoryBase, table=True):
    __tablename__ = "bjcp_categories"


# =============================================================================
# 2. menu_categories 테이블 모델
# =============================================================================
class MenuCategoryBase(SQLModel):
    id: Optional[int] = Field(default=None, primary_key=True, description="메뉴 카테고리 고유 ID")
    name: str = Field(max_length=255, description="메뉴 카테고리 명칭 (예: Hoppy)")
    description: Optional[str] = Field(default=None, description="설명")

    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
        description="레코드 생성 일시"
    )
    updated_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()),
        description="레코드 마지막 업데이트 일시"
    )


class MenuCategory(MenuCategoryBase, table=True):
    __tablename__ = "menu_categories"


# =============================================================================
# 3. styles 테이블 모델
# =============================================================================
class StyleBase(SQLModel):
    """
    맥주 스타일. BJCP 분류나 메뉴 카테고리가 삭제되면 해당 참조는 NULL이 됩니다.
    """
    id: Optional[int] = Field(default=None, primary_key=True, description="스타일 고유 ID")
    name: str = Field(max_length=255, description="스타일 명칭")
    description: Optional[str] = Field(default=None, description="설명")
    bjcp_id: Optional[int] = Field(
        default=None,
        sa_column=Column(Integer, ForeignKey("bjcp_categories.id", ondelete="SET NULL")),
        description="BJCP 분류 ID (FK)"
    )
    bjcp_link: Optional[str] = Field(default=None, max_length=500, description="BJCP 가이드라인 링크")
    menu_category_id: Optional[int] = Field(
        default=None,
        sa_column=Column(Integer, ForeignKey("menu_categories.id", ondelete="SET NULL")),
        description="메뉴 카테고리 ID (FK)"
    )

    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
        description="레코드 생성 일시"
    )
    updated_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()),
        description="레코드 마지막 업데이트 일시"
    )


class Style(StyleBase, table=True):
    __tablename__ = "styles"


# =============================================================================
# 4. breweries 테이블 모델
# =============================================================================
class BreweryBase(SQLModel):
    id: Optional[int] = Field(default=None, primary_key=True, description="양조장 고유 ID")
    name: str = Field(max_length=255, description="양조장 명칭")
    location: Optional[str] = Field(default=None, max_length=255, description="소재지 (자유 텍스트)")

    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
        description="레코드 생성 일시"
    )
    updated_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()),
        description="레코드 마지막 업데이트 일시"
    )


class Brewery(BreweryBase, table=True):
    __tablename__ = "breweries"


# =============================================================================
# 5. beers 테이블 모델
# =============================================================================
class BeerBase(SQLModel):
    """
    맥주. 양조장이 삭제되면 함께 삭제되고, 스타일이 삭제되면 style_id는 NULL이 됩니다.
    """
    id: Optional[int] = Field(default=None, primary_key=True, description="맥주 고유 ID")
    name: str = Field(max_length=255, description="맥주 명칭")
    description: Optional[str] = Field(default=None, description="설명")
    brewery_id: int = Field(
        sa_column=Column(Integer, ForeignKey("breweries.id", ondelete="CASCADE"), nullable=False, index=True),
        description="양조장 ID (FK)"
    )
    style_id: Optional[int] = Field(
        default=None,
        sa_column=Column(Integer, ForeignKey("styles.id", ondelete="SET NULL"), index=True),
        description="스타일 ID (FK)"
    )
    abv: Optional[float] = Field(default=None, sa_column=Column(Numeric(4, 2, asdecimal=False)), description="알코올 도수 (%)")
    ibu: Optional[int] = Field(default=None, description="쓴맛 지수 (IBU)")
    status: BeerStatus = Field(default=BeerStatus.OUT, description="재고 상태")

    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
        description="레코드 생성 일시"
    )
    updated_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()),
        description="레코드 마지막 업데이트 일시"
    )


class Beer(BeerBase, table=True):
    __tablename__ = "beers"


# =============================================================================
# 6. menu_category_beers 연결 테이블 모델
# =============================================================================
class MenuCategoryBeer(SQLModel, table=True):
    """
    메뉴 카테고리와 맥주의 다대다 연결 (큐레이터 지정)
    """
    __tablename__ = "menu_category_beers"

    menu_category_id: int = Field(
        sa_column=Column(Integer, ForeignKey("menu_categories.id", ondelete="CASCADE"), primary_key=True),
        description="메뉴 카테고리 ID (FK)"
    )
    beer_id: int = Field(
        sa_column=Column(Integer, ForeignKey("beers.id", ondelete="CASCADE"), primary_key=True),
        description="맥주 ID (FK)"
    )
