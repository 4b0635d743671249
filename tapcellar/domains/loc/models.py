# tapcellar/domains/loc/models.py

"""
'loc' 도메인의 데이터베이스 ORM 모델을 정의하는 모듈입니다.
 - 산지는 국가(country) -> 지역(area) -> 포도밭(vineyard) 계층 구조
 - parent_id로 자기 자신을 참조하는 트리(forest)이며, 부모 삭제 시 자식은 최상위로 올라갑니다.
"""

from typing import Optional
from datetime import datetime, UTC
from enum import Enum
from sqlmodel import Field, SQLModel, Column
from sqlalchemy import ForeignKey, Integer
from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP


class LocationKind(str, Enum):
    """산지 계층 유형"""
    COUNTRY = "country"
    AREA = "area"
    VINEYARD = "vineyard"


# 계층 깊이 (부모는 정확히 한 단계 위여야 합니다)
KIND_RANK = {
    LocationKind.COUNTRY: 0,
    LocationKind.AREA: 1,
    LocationKind.VINEYARD: 2,
}


# =============================================================================
# locations 테이블 모델
# =============================================================================
class LocationBase(SQLModel):
    """
    locations 테이블의 기본 속성을 정의하는 SQLModel Base 클래스입니다.
    """
    id: Optional[int] = Field(default=None, primary_key=True, description="산지 고유 ID")
    name: str = Field(max_length=255, description="산지 명칭 (예: France, Bordeaux)")
    kind: LocationKind = Field(description="계층 유형 (country, area, vineyard)")
    parent_id: Optional[int] = Field(
        default=None,
        sa_column=Column(Integer, ForeignKey("locations.id", ondelete="SET NULL"), index=True),
        description="상위 산지 ID (FK, 최상위는 NULL)"
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


class Location(LocationBase, table=True):
    """
    locations 테이블에 매핑되는 SQLModel ORM 클래스입니다.
    """
    __tablename__ = "locations"
