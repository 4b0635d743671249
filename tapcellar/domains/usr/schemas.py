# tapcellar/domains/usr/schemas.py

"""
'usr' 도메인의 요청/응답 스키마를 정의하는 모듈입니다.
"""

from typing import Optional
from datetime import datetime
from pydantic import EmailStr, Field
from sqlmodel import SQLModel

from .models import UserRole


class UserRead(SQLModel):
    """
    사용자 정보를 클라이언트에 응답하기 위한 모델입니다.
    """
    id: int
    email: EmailStr
    name: Optional[str] = None
    picture: Optional[str] = None
    role: UserRole
    is_active: bool
    created_at: Optional[datetime] = None
    last_signed_in: Optional[datetime] = None

    class Config:
        from_attributes = True


class UserSignIn(SQLModel):
    """
    로그인 시 검증된 Google 계정 정보로 사용자를 생성/갱신하기 위한 모델입니다.
    """
    google_id: str = Field(..., max_length=64)
    email: EmailStr
    name: Optional[str] = None
    picture: Optional[str] = None


class UserRoleUpdate(SQLModel):
    role: UserRole = Field(..., description="변경할 역할")


class GoogleCredential(SQLModel):
    """
    클라이언트(Google Identity Services)가 전달한 ID 토큰입니다.
    """
    credential: str = Field(..., min_length=1, description="Google ID 토큰 (JWT)")


class Token(SQLModel):
    access_token: str
    token_type: str = "bearer"


class SessionResponse(Token):
    user: UserRead


class LogoutResponse(SQLModel):
    success: bool = True
