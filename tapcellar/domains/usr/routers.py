# tapcellar/domains/usr/routers.py

"""
'usr' 도메인 (Google 로그인 및 사용자 관리)과 관련된 API 엔드포인트를 정의하는 모듈입니다.
"""

from typing import Awaitable, Callable, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlmodel.ext.asyncio.session import AsyncSession

from tapcellar.core.config import settings
from tapcellar.core import dependencies as deps
from tapcellar.core.google_auth import (
    GoogleAuthError,
    GoogleAuthUnavailableError,
    GoogleIdentity,
    verify_google_token,
)

from . import crud as usr_crud
from . import models as usr_models
from . import schemas as usr_schemas


router = APIRouter(
    tags=["User Management (사용자 관리)"],
    responses={404: {"description": "Not found"}},
)

IdentityVerifier = Callable[[str], Awaitable[GoogleIdentity]]


def get_identity_verifier() -> IdentityVerifier:
    """
    Google ID 토큰 검증 함수를 제공합니다. (테스트에서 dependency_overrides로 교체)
    """
    return verify_google_token


def _set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
        path="/",
    )


# =============================================================================
# 1. 인증 (Authentication) 엔드포인트
# =============================================================================
@router.post("/auth/google", response_model=usr_schemas.SessionResponse, summary="Google 로그인")
async def sign_in_with_google(
    payload: usr_schemas.GoogleCredential,
    response: Response,
    db: AsyncSession = Depends(deps.get_db_session),
    verify: IdentityVerifier = Depends(get_identity_verifier),
):
    """
    Google ID 토큰을 검증하고 사용자를 생성/갱신한 뒤 세션 토큰을 발급합니다.
    세션 토큰은 응답 본문과 HttpOnly 쿠키로 함께 전달됩니다.
    """
    try:
        identity = await verify(payload.credential)
    except GoogleAuthUnavailableError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    except GoogleAuthError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = await usr_crud.user.upsert_from_sign_in(
        db,
        obj_in=usr_schemas.UserSignIn(
            google_id=identity.external_id,
            email=identity.email,
            name=identity.name,
            picture=identity.picture_url,
        ),
    )
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Inactive user")

    access_token = deps.create_access_token(data={"sub": str(user.id)})
    _set_session_cookie(response, access_token)
    return {"access_token": access_token, "token_type": "bearer", "user": user}


@router.get("/auth/me", response_model=Optional[usr_schemas.UserRead], summary="현재 사용자 정보 조회")
async def read_users_me(current_user: Optional[usr_models.User] = Depends(deps.get_optional_user)):
    """
    현재 로그인한 사용자 정보를 반환합니다. 로그인하지 않았으면 null을 반환합니다.
    """
    return current_user


@router.post("/auth/logout", response_model=usr_schemas.LogoutResponse, summary="로그아웃")
async def logout(response: Response):
    """세션 쿠키를 삭제합니다."""
    response.delete_cookie(key=settings.SESSION_COOKIE_NAME, path="/")
    return {"success": True}


# =============================================================================
# 2. 사용자 관리 엔드포인트 (관리자)
# =============================================================================
@router.get("/users", response_model=List[usr_schemas.UserRead], summary="모든 사용자 조회")
async def read_users(
    skip: int = 0,
    limit: int = 100,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: usr_models.User = Depends(deps.get_current_admin_user),
):
    return await usr_crud.user.get_multi(db, skip=skip, limit=limit)


@router.put("/users/{user_id}/role", response_model=usr_schemas.UserRead, summary="사용자 역할 변경")
async def update_user_role(
    user_id: int,
    role_update: usr_schemas.UserRoleUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: usr_models.User = Depends(deps.get_current_admin_user),
):
    """
    사용자의 역할을 변경합니다. (관리자 권한 필요)
    관리자는 자기 자신의 관리자 권한을 해제할 수 없습니다.
    """
    db_user = await usr_crud.user.get_for_update(db, id=user_id)
    if db_user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    if db_user.id == current_user.id and role_update.role != usr_models.UserRole.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Admins cannot remove their own admin role."
        )
    return await usr_crud.user.set_role(db, db_obj=db_user, role=role_update.role)
