# tapcellar/domains/usr/models.py

"""
'usr' 도메인의 데이터베이스 ORM 모델을 정의하는 모듈입니다.

사용자는 Google 계정(google_id)으로 식별되며, 첫 로그인 시 자동으로 생성됩니다.
"""

from typing import Optional
from datetime import datetime, UTC
from enum import Enum
from sqlmodel import Field, SQLModel, Column
from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP


# =============================================================================
# 사용자 역할(RBAC)
# =============================================================================
class UserRole(str, Enum):
    """
    사용자 역할을 정의하는 Enum 클래스입니다.
    - USER: 카탈로그 조회만 가능
    - CURATOR: 카탈로그 생성/수정/삭제 가능
    - ADMIN: CURATOR 권한 + 사용자 역할 관리
    """
    USER = "user"
    CURATOR = "curator"
    ADMIN = "admin"


# =============================================================================
# users 테이블 모델
# =============================================================================
class UserBase(SQLModel):
    """
    users 테이블의 기본 속성을 정의하는 SQLModel Base 클래스입니다.
    """
    id: Optional[int] = Field(default=None, primary_key=True, description="사용자 고유 ID")
    google_id: str = Field(max_length=64, sa_column_kwargs={"unique": True}, description="Google 계정 고유 ID (sub)")
    email: str = Field(max_length=320, description="사용자 이메일")
    name: Optional[str] = Field(default=None, max_length=255, description="표시 이름")
    picture: Optional[str] = Field(default=None, description="프로필 이미지 URL")
    role: UserRole = Field(default=UserRole.USER, description="사용자 역할 (권한)")
    is_active: bool = Field(default=True, description="계정 활성 여부")

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
    last_signed_in: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
        description="마지막 로그인 일시"
    )


class User(UserBase, table=True):
    """
    users 테이블에 매핑되는 SQLModel ORM 클래스입니다.
    """
    __tablename__ = "users"
