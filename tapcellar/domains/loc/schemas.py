# tapcellar/domains/loc/schemas.py

"""
'loc' 도메인의 Pydantic 스키마를 정의하는 모듈입니다.

산지 데이터에 대한 API 요청(생성, 업데이트) 및 응답(조회)에 사용되는
데이터 유효성 검사 및 직렬화 모델을 포함합니다.
"""

from typing import List, Optional
from datetime import datetime
from pydantic import Field
from sqlmodel import SQLModel

from .models import LocationKind


class LocationBase(SQLModel):
    """
    산지의 기본 속성을 정의하는 Base 스키마입니다.
    """
    name: str = Field(..., min_length=1, max_length=255, description="산지 명칭")
    kind: LocationKind = Field(..., description="계층 유형 (country, area, vineyard)")
    parent_id: Optional[int] = Field(None, description="상위 산지 ID")


class LocationCreate(LocationBase):
    """
    새로운 산지를 생성하기 위한 모델입니다.
    부모가 있으면 부모 유형은 정확히 한 단계 위여야 합니다. (country > area > vineyard)
    """
    pass


class LocationUpdate(SQLModel):
    """
    기존 산지 정보를 업데이트하기 위한 모델입니다.
    모든 필드는 선택 사항입니다 (부분 업데이트 가능). parent_id를 null로 보내면 최상위로 이동합니다.
    """
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    kind: Optional[LocationKind] = None
    parent_id: Optional[int] = None


class LocationRead(LocationBase):
    id: int = Field(..., description="산지 고유 ID")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class LocationWithPath(LocationRead):
    """전체 경로(예: "France → Bordeaux → Pauillac")를 포함한 산지 정보"""
    path: str = Field(..., description="최상위부터의 전체 경로")


class LocationDescendants(SQLModel):
    """해당 산지와 모든 하위 산지 ID"""
    id: int
    descendant_ids: List[int]
