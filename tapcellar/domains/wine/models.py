# tapcellar/domains/wine/models.py

"""
'wine' 도메인의 데이터베이스 ORM 모델을 정의하는 모듈입니다.

- 와이너리(wineries) -> 와인(wines) -> 산지(locations)
- 와인과 품종(varietals)은 wine_varietals 연결 테이블로 다대다 관계입니다.
- 재고는 냉장(refrigerated)과 셀러(cellared) 수량으로 관리하며, 둘 중 하나라도 0보다 크면 판매 가능합니다.
"""

from typing import Optional
from datetime import datetime, UTC
from sqlmodel import Field, SQLModel, Column
from sqlalchemy import ForeignKey, Integer
from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP


# =============================================================================
# 1. wineries 테이블 모델
# =============================================================================
class WineryBase(SQLModel):
    id: Optional[int] = Field(default=None, primary_key=True, description="와이너리 고유 ID")
    name: str = Field(max_length=255, description="와이너리 명칭")
    location: Optional[str] = Field(default=None, max_length=255, description="소재지 (자유 텍스트)")
    location_id: Optional[int] = Field(
        default=None,
        sa_column=Column(Integer, ForeignKey("locations.id", ondelete="SET NULL")),
        description="산지 ID (FK)"
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


class Winery(WineryBase, table=True):
    __tablename__ = "wineries"


# =============================================================================
# 2. varietals 테이블 모델
# =============================================================================
class VarietalBase(SQLModel):
    id: Optional[int] = Field(default=None, primary_key=True, description="품종 고유 ID")
    name: str = Field(max_length=255, sa_column_kwargs={"unique": True}, description="품종 명칭 (예: Pinot Noir)")

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


class Varietal(VarietalBase, table=True):
    __tablename__ = "varietals"


# =============================================================================
# 3. wines 테이블 모델
# =============================================================================
class WineBase(SQLModel):
    """
    와인. 와이너리가 삭제되면 함께 삭제되고, 산지가 삭제되면 location_id는 NULL이 됩니다.
    """
    id: Optional[int] = Field(default=None, primary_key=True, description="와인 고유 ID")
    label: str = Field(max_length=255, description="와인 라벨명")
    winery_id: int = Field(
        sa_column=Column(Integer, ForeignKey("wineries.id", ondelete="CASCADE"), nullable=False, index=True),
        description="와이너리 ID (FK)"
    )
    vintage: Optional[int] = Field(default=None, description="빈티지 (연도)")
    location_id: Optional[int] = Field(
        default=None,
        sa_column=Column(Integer, ForeignKey("locations.id", ondelete="SET NULL"), index=True),
        description="산지 ID (FK)"
    )
    refrigerated: int = Field(default=0, ge=0, description="냉장 보관 수량")
    cellared: int = Field(default=0, ge=0, description="셀러 보관 수량")
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


class Wine(WineBase, table=True):
    __tablename__ = "wines"


# =============================================================================
# 4. wine_varietals 연결 테이블 모델
# =============================================================================
class WineVarietal(SQLModel, table=True):
    """
    와인과 품종의 다대다 연결
    """
    __tablename__ = "wine_varietals"

    wine_id: int = Field(
        sa_column=Column(Integer, ForeignKey("wines.id", ondelete="CASCADE"), primary_key=True),
        description="와인 ID (FK)"
    )
    varietal_id: int = Field(
        sa_column=Column(Integer, ForeignKey("varietals.id", ondelete="CASCADE"), primary_key=True),
        description="품종 ID (FK)"
    )
